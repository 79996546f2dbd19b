"""Chat service: the request lifecycle of one conversation turn.

Every turn goes through the same ladder, stopping at the first rung that
produces an answer:

1. Instant response for trivial inputs (no cache, no network)
2. Cached response for the same conversation tail and category
3. Image shortcut for "draw/generate an image of ..." requests
4. Streamed completion from the chat endpoint, cached on success
5. Category-specific fallback when the endpoint fails (never cached)

Each turn runs in its own producer task that feeds a per-request queue; the
caller reads the queue through an async iterator. Only one request is in
flight per service: starting a new one cancels the previous one, and a
superseded consumer stops without delivering anything further. Callers that
must not interfere with each other each use a ``fork()`` of one service.
"""

import asyncio
import inspect
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any

from chat_cache.config import settings
from chat_cache.entities import (
    ConversationTurn,
    ErrorTag,
    ResponsePayload,
    ServiceCategory,
    StreamChunk,
)
from chat_cache.errors import ChatServiceError
from chat_cache.models import PerformanceMetrics
from chat_cache.protocols import ChatTransport, ResponseStore
from chat_cache.utils import conversation_fingerprint

from .delivery import Emit, Sleep, type_out
from .fallback import FallbackPolicy
from .image_generation import ImagePromptBuilder
from .instant_responses import InstantResponder
from .profiles import CategoryProfile, profile_for
from .text_polisher import TextPolisher

logger = logging.getLogger(__name__)

INSTANT_MODEL_LABEL = "instant"

ConversationInput = Sequence[ConversationTurn | Mapping[str, Any]]
ChunkCallback = Callable[[StreamChunk], Any]


@dataclass(frozen=True)
class TypingSpeeds:
    """Base per-word delays (milliseconds) of the synthetic streams."""

    instant_ms: float = 25.0
    cached_ms: float = 15.0
    fallback_ms: float = 30.0

    @classmethod
    def from_settings(cls) -> "TypingSpeeds":
        return cls(
            instant_ms=settings.instant_typing_delay_ms,
            cached_ms=settings.cached_typing_delay_ms,
            fallback_ms=settings.fallback_typing_delay_ms,
        )


@dataclass(eq=False)
class _InFlightRequest:
    generation: int
    queue: asyncio.Queue
    task: asyncio.Task | None = None
    cancelled: bool = False
    superseded: bool = False


class ChatService:
    """Core chat orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - ChatTransport: the HTTP endpoint, or a mock in tests
    - ResponseStore: the in-memory cache, or any shared store

    Example:
        ```python
        from chat_cache.services import ChatService

        service = ChatService.create()

        async for chunk in service.stream([{"role": "user", "content": "hello"}], "general"):
            print(chunk.text, end="")

        answer = await service.send_message(conversation, "code")
        ```
    """

    def __init__(
        self,
        transport: ChatTransport,
        cache: ResponseStore,
        responder: InstantResponder | None = None,
        fallbacks: FallbackPolicy | None = None,
        images: ImagePromptBuilder | None = None,
        polisher: TextPolisher | None = None,
        profiles: dict[ServiceCategory, CategoryProfile] | None = None,
        timeout: float | None = None,
        key_turns: int | None = None,
        history_turns: int | None = None,
        typing: TypingSpeeds | None = None,
        sleep: Sleep = asyncio.sleep,
        metrics: PerformanceMetrics | None = None,
    ) -> None:
        """Initialize the chat service.

        Args:
            transport: Streaming chat backend (required).
            cache: Response store (required).
            responder: Instant-response table. Defaults to the built-in rules.
            fallbacks: Degraded answers per category. Defaults to the built-in texts.
            images: Image shortcut builder. Defaults to the settings template.
            polisher: Spell checker. Defaults to local corrections only.
            profiles: Model and system prompt per category.
            timeout: Absolute network deadline in seconds. Defaults to settings.
            key_turns: Trailing turns hashed into the cache key. Defaults to settings.
            history_turns: Trailing turns sent to the endpoint. Defaults to settings.
            typing: Synthetic typing speeds. Defaults to settings.
            sleep: Awaitable sleep used between synthetic words.
            metrics: Counters to update. Shared between forks of one service.
        """
        self._transport = transport
        self._cache = cache
        self._responder = responder or InstantResponder.default()
        self._fallbacks = fallbacks or FallbackPolicy.default()
        self._images = images or ImagePromptBuilder()
        self._polisher = polisher or TextPolisher()
        self._profiles = profiles
        self._timeout = settings.chat_request_timeout if timeout is None else timeout
        self._key_turns = settings.cache_key_turns if key_turns is None else key_turns
        self._history_turns = settings.chat_history_turns if history_turns is None else history_turns
        self._typing = typing or TypingSpeeds.from_settings()
        self._sleep = sleep

        self._generation = 0
        self._inflight: _InFlightRequest | None = None
        self._metrics = metrics if metrics is not None else PerformanceMetrics()

    @classmethod
    def create(
        cls,
        transport: ChatTransport | None = None,
        cache: ResponseStore | None = None,
        timeout: float | None = None,
    ) -> "ChatService":
        """Factory method to create ChatService with sensible defaults.

        Args:
            transport: Chat backend. If None, an HttpChatTransport from settings.
            cache: Response store. If None, an InMemoryResponseCache from settings.
            timeout: Network deadline in seconds. If None, uses settings.

        Returns:
            Configured ChatService instance
        """
        from chat_cache.repositories import HttpChatTransport, HttpPolishClient, InMemoryResponseCache

        polish_client = HttpPolishClient.create() if settings.polish_enabled else None
        return cls(
            transport=transport or HttpChatTransport.create(),
            cache=cache if cache is not None else InMemoryResponseCache.create(),
            polisher=TextPolisher(client=polish_client),
            timeout=timeout,
        )

    def stream(
        self,
        conversation: ConversationInput,
        category: ServiceCategory | str = ServiceCategory.AUTO,
    ) -> AsyncIterator[StreamChunk]:
        """Answer the conversation as a finite, non-restartable chunk stream.

        Args:
            conversation: Turns (entities or role/content mappings), oldest first
            category: Requested service category

        Returns:
            Async iterator of StreamChunk ending with exactly one final chunk,
            unless a newer request supersedes this one first

        Raises:
            ValueError: If the conversation is empty, has no user turn or the
                category is unknown (raised immediately, not on iteration)
        """
        turns, category = self._prepare(conversation, category)
        return self._stream(turns, category)

    def send_message_stream(
        self,
        conversation: ConversationInput,
        category: ServiceCategory | str,
        on_chunk: ChunkCallback,
    ) -> Awaitable[None]:
        """Deliver the answer chunk by chunk to ``on_chunk``.

        ``on_chunk`` may be a plain function or a coroutine function.

        Raises:
            TypeError: If ``on_chunk`` is not callable (raised immediately)
            ValueError: If the conversation or category is invalid
        """
        if not callable(on_chunk):
            raise TypeError(f"on_chunk must be callable, got {type(on_chunk).__name__}")
        return self._pump(self.stream(conversation, category), on_chunk)

    async def send_message(
        self,
        conversation: ConversationInput,
        category: ServiceCategory | str = ServiceCategory.AUTO,
    ) -> ResponsePayload:
        """Answer the conversation and return the accumulated response."""
        parts: list[str] = []
        final: StreamChunk | None = None

        async with aclosing(self.stream(conversation, category)) as chunks:
            async for chunk in chunks:
                parts.append(chunk.text)
                if chunk.is_final:
                    final = chunk

        text = "".join(parts)
        if final is None:
            # Superseded before a final chunk was delivered.
            return ResponsePayload(text=text, model_label="", error_tag=ErrorTag.CANCELLED)

        return ResponsePayload(
            text=text,
            model_label=final.model_label or "",
            image_url=final.image_url,
            error_tag=final.error_tag,
        )

    def cancel_request(self) -> None:
        """Cancel the in-flight request, if any.

        The request's consumer receives a single final chunk tagged
        ``cancelled`` and nothing else from that point on.
        """
        request = self._inflight
        if request is None or request.cancelled:
            return

        request.cancelled = True
        if request.task is not None:
            request.task.cancel()
        request.queue.put_nowait(StreamChunk.cancelled())
        self._inflight = None
        self._metrics.cancellations += 1
        logger.info("Cancelled request #%d", request.generation)

    async def spell_check(self, text: str) -> str:
        return await self._polisher.polish(text)

    def clear_cache(self) -> int:
        """Clear all cached responses.

        Returns:
            Number of entries deleted
        """
        count = self._cache.clear()
        logger.info("Cleared %d cached responses", count)
        return count

    def get_stats(self) -> dict:
        """Get cache and delivery statistics.

        Returns:
            Dictionary with cache statistics and per-path counters
        """
        return {
            "cache": self._cache.get_stats(),
            "performance": self._metrics.to_dict(),
            "instant_responses_available": len(self._responder),
            "in_flight": self._inflight is not None,
        }

    async def close(self) -> None:
        """Cancel pending work and release network clients."""
        self.cancel_request()
        await self._transport.close()
        await self._polisher.close()

    def fork(self) -> "ChatService":
        """Create a service with its own in-flight slot.

        The fork shares this service's collaborators, cache and metrics, so
        independent callers can stream concurrently without superseding
        each other.
        """
        return ChatService(
            transport=self._transport,
            cache=self._cache,
            responder=self._responder,
            fallbacks=self._fallbacks,
            images=self._images,
            polisher=self._polisher,
            profiles=self._profiles,
            timeout=self._timeout,
            key_turns=self._key_turns,
            history_turns=self._history_turns,
            typing=self._typing,
            sleep=self._sleep,
            metrics=self._metrics,
        )

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None

    @property
    def cache(self) -> ResponseStore:
        """Get the underlying response store (for testing)."""
        return self._cache

    @property
    def transport(self) -> ChatTransport:
        """Get the underlying transport (for testing)."""
        return self._transport

    def _prepare(
        self,
        conversation: ConversationInput,
        category: ServiceCategory | str,
    ) -> tuple[tuple[ConversationTurn, ...], ServiceCategory]:
        if isinstance(conversation, (str, bytes)) or not conversation:
            raise ValueError("conversation must be a non-empty sequence of turns")

        try:
            turns = tuple(
                turn if isinstance(turn, ConversationTurn) else ConversationTurn.from_dict(turn)
                for turn in conversation
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid conversation turn: {e}") from e

        if not any(turn.role == "user" for turn in turns):
            raise ValueError("conversation has no user turn")

        return turns, ServiceCategory(category)

    async def _stream(
        self,
        turns: tuple[ConversationTurn, ...],
        category: ServiceCategory,
    ) -> AsyncIterator[StreamChunk]:
        request = self._begin_request()
        request.task = asyncio.create_task(self._produce(turns, category, request))

        try:
            while True:
                item = await request.queue.get()
                if request.superseded:
                    return
                if request.cancelled and getattr(item, "error_tag", None) != ErrorTag.CANCELLED:
                    continue
                if isinstance(item, BaseException):
                    raise item
                yield item
                if item.is_final:
                    return
        finally:
            if not request.task.done():
                request.task.cancel()
            if self._inflight is request:
                self._inflight = None

    async def _pump(self, chunks: AsyncIterator[StreamChunk], on_chunk: ChunkCallback) -> None:
        async with aclosing(chunks):
            async for chunk in chunks:
                result = on_chunk(chunk)
                if inspect.isawaitable(result):
                    await result

    def _begin_request(self) -> _InFlightRequest:
        if self._inflight is not None:
            self._inflight.superseded = True
        self.cancel_request()
        self._generation += 1
        request = _InFlightRequest(generation=self._generation, queue=asyncio.Queue())
        self._inflight = request
        self._metrics.total_requests += 1
        return request

    async def _produce(
        self,
        turns: tuple[ConversationTurn, ...],
        category: ServiceCategory,
        request: _InFlightRequest,
    ) -> None:
        try:
            await self._respond(turns, category, request.queue.put_nowait)
        except Exception as e:
            logger.exception("Unexpected failure while answering request #%d", request.generation)
            request.queue.put_nowait(e)

    async def _respond(
        self,
        turns: tuple[ConversationTurn, ...],
        category: ServiceCategory,
        emit: Emit,
    ) -> None:
        latest = next(turn for turn in reversed(turns) if turn.role == "user")

        canned = self._responder.match(latest.content)
        if canned is not None:
            self._metrics.instant_hits += 1
            logger.debug("Instant response for %.40r", latest.content)
            await type_out(
                canned,
                emit,
                self._typing.instant_ms,
                self._sleep,
                StreamChunk.final(model_label=INSTANT_MODEL_LABEL),
            )
            return

        key = conversation_fingerprint(turns, category, self._key_turns)
        cached = self._cache.get(key)
        if cached is not None:
            self._metrics.cache_hits += 1
            logger.debug("Cache hit for %s", key)
            await type_out(
                cached.text,
                emit,
                self._typing.cached_ms,
                self._sleep,
                StreamChunk.final(model_label=cached.model_label, image_url=cached.image_url),
            )
            return
        self._metrics.cache_misses += 1

        if latest.image is None and self._images.wants_image(latest.content):
            payload = self._images.build(latest.content)
            self._metrics.image_responses += 1
            emit(
                StreamChunk.final(
                    text=payload.text,
                    model_label=payload.model_label,
                    image_url=payload.image_url,
                )
            )
            self._cache.set(key, payload)
            return

        start_time = time.perf_counter()
        try:
            await asyncio.wait_for(self._relay(turns, category, key, emit), timeout=self._timeout)
        except asyncio.TimeoutError:
            error_tag = ErrorTag.TIMEOUT
            logger.warning("Chat request timed out after %.1fs, using fallback", self._timeout)
        except ChatServiceError as e:
            error_tag = e.error_tag
            logger.warning("Chat request failed (%s), using fallback: %s", error_tag, e)
        else:
            return
        finally:
            self._metrics.record_network_call((time.perf_counter() - start_time) * 1000)

        self._metrics.fallbacks += 1
        await type_out(
            self._fallbacks.message_for(category),
            emit,
            self._typing.fallback_ms,
            self._sleep,
            StreamChunk.final(model_label=self._fallbacks.model_label, error_tag=error_tag),
        )

    async def _relay(
        self,
        turns: tuple[ConversationTurn, ...],
        category: ServiceCategory,
        key: str,
        emit: Emit,
    ) -> None:
        profile = profile_for(category, self._profiles)
        messages = [{"role": "system", "content": profile.system_prompt}]
        messages.extend(turn.to_dict() for turn in turns[-self._history_turns:])

        model_label = profile.model
        parts: list[str] = []
        async for event in self._transport.stream_chat(messages, category.value, profile.model):
            if event.model and isinstance(event.model, str):
                model_label = event.model
            if event.text:
                parts.append(event.text)
                emit(StreamChunk(text=event.text))

        emit(StreamChunk.final(model_label=model_label))

        text = "".join(parts)
        if text:
            self._cache.set(key, ResponsePayload(text=text, model_label=model_label))
        logger.info("Streamed %d chars from %s", len(text), model_label)
