"""
Shared fixtures and test doubles.
"""

import asyncio

import pytest

from chat_cache.entities import ConversationTurn, StreamEvent
from chat_cache.repositories import InMemoryResponseCache
from chat_cache.services import ChatService, ImagePromptBuilder


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def no_sleep(_seconds: float) -> None:
    """Yield to the event loop without waiting."""
    await asyncio.sleep(0)


class ScriptedTransport:
    """ChatTransport double replaying scripted events.

    Args:
        events: Events yielded in order
        error: Raised after the events, if given
        hang: Block forever after the events
    """

    def __init__(self, events=None, error=None, hang=False) -> None:
        self.events = list(events or [])
        self.error = error
        self.hang = hang
        self.calls: list[dict] = []
        self.closed = False

    async def stream_chat(self, messages, category, model):
        self.calls.append({"messages": messages, "category": category, "model": model})
        for event in self.events:
            await asyncio.sleep(0)
            yield event
        if self.hang:
            await asyncio.Event().wait()
        if self.error is not None:
            raise self.error

    async def close(self) -> None:
        self.closed = True


class GatedTransport:
    """Answers "slow" questions in two halves separated by a gate; others at once."""

    def __init__(self, gate: asyncio.Event) -> None:
        self.gate = gate
        self.calls: list[dict] = []

    async def stream_chat(self, messages, category, model):
        self.calls.append({"messages": messages, "category": category, "model": model})
        if "slow" in messages[-1]["content"]:
            yield StreamEvent(text="A1")
            await self.gate.wait()
            yield StreamEvent(text="A2")
            yield StreamEvent(text="A3")
        else:
            for text in ("B1", "B2"):
                await asyncio.sleep(0)
                yield StreamEvent(text=text)

    async def close(self) -> None:
        pass


def user(content: str, image: str | None = None) -> list[ConversationTurn]:
    """Single-turn conversation."""
    return [ConversationTurn(role="user", content=content, image=image)]


@pytest.fixture
def clock():
    """A fake clock starting at a fixed timestamp."""
    return FakeClock()


@pytest.fixture
def make_service(clock):
    """Build a ChatService with fast typing, a fake clock and the given transport."""

    def factory(transport, timeout: float = 5.0, **kwargs) -> ChatService:
        cache = kwargs.pop("cache", None)
        if cache is None:
            cache = InMemoryResponseCache(max_entries=100, default_ttl=600, clock=clock)
        return ChatService(
            transport=transport,
            cache=cache,
            images=ImagePromptBuilder(clock=clock),
            sleep=no_sleep,
            timeout=timeout,
            **kwargs,
        )

    return factory
