"""HTTP streaming chat transport.

Talks to a chat endpoint that answers ``POST {base}/chat/stream`` with a
server-sent-event style body: newline-delimited ``data: <json>`` frames,
each carrying an incremental ``response`` field and an optional ``model``
label, terminated by a frame with ``done: true`` or a ``[DONE]`` sentinel.

OpenAI-compatible frames (``choices[0].delta.content``) are understood too,
so the transport can point straight at a completions proxy.
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from chat_cache.config import settings
from chat_cache.entities import StreamEvent
from chat_cache.errors import StreamFormatError, TransportError, UpstreamError

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"


def parse_sse_line(line: str) -> StreamEvent | None:
    """Parse one line of the event stream.

    Args:
        line: A raw line without its trailing newline

    Returns:
        StreamEvent for data frames, None for blank lines, comments, other
        fields and malformed JSON (which is skipped, not fatal)

    Raises:
        UpstreamError: If the frame carries an ``error`` field
    """
    line = line.strip()
    if not line.startswith("data:"):
        return None

    data = line[len("data:"):].strip()
    if data == DONE_SENTINEL:
        return StreamEvent(done=True)

    try:
        frame = json.loads(data)
    except json.JSONDecodeError:
        logger.debug("Skipping malformed stream frame: %.80s", data)
        return None

    if not isinstance(frame, dict):
        return None

    error = frame.get("error")
    if error:
        message = error.get("message", error) if isinstance(error, dict) else error
        raise UpstreamError(f"Chat endpoint reported an error: {message}")

    text = frame.get("response")
    if text is None:
        text = _delta_content(frame)
    model = frame.get("model")

    return StreamEvent(
        text=text if isinstance(text, str) else "",
        model=model if isinstance(model, str) else None,
        done=bool(frame.get("done")),
    )


def _delta_content(frame: dict[str, Any]) -> str | None:
    choices = frame.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return None
    return delta.get("content")


class HttpChatTransport:
    """httpx-based implementation of the ChatTransport protocol.

    Example:
        ```python
        transport = HttpChatTransport.create(base_url="http://localhost:8787/api")

        async for event in transport.stream_chat(messages, "code", "deepseek/deepseek-coder"):
            print(event.text, end="")
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: Chat API base URL. Defaults to settings.chat_api_base_url.
            api_key: Bearer token. Defaults to settings.chat_api_key.
            timeout: Per-operation HTTP timeout in seconds. The absolute
                request deadline is enforced by the chat service.
            client: Preconfigured client (e.g. with a mock transport).
        """
        self._base_url = (base_url or settings.chat_api_base_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.chat_api_key
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=5),
            )
        return self._client

    @classmethod
    def create(
        cls,
        base_url: str | None = None,
        api_key: str | None = None,
    ) -> "HttpChatTransport":
        """Factory method to create HttpChatTransport with defaults.

        Args:
            base_url: Chat API base URL. If None, uses settings.
            api_key: Bearer token. If None, uses settings.

        Returns:
            Configured HttpChatTransport
        """
        return cls(base_url=base_url, api_key=api_key)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "text/event-stream"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def stream_chat(
        self,
        messages: list[dict[str, Any]],
        category: str,
        model: str,
    ) -> AsyncIterator[StreamEvent]:
        """Stream a completion from ``POST {base}/chat/stream``.

        Yields:
            StreamEvent for every frame with text or a model label

        Raises:
            TransportError: Connection failure or non-success status
            UpstreamError: The endpoint reported an error mid-stream
            StreamFormatError: The stream ended before the end-of-stream marker
        """
        url = f"{self._base_url}/chat/stream"
        payload = {
            "messages": messages,
            "category": category,
            "model": model,
            "stream": True,
        }

        try:
            async with self.client.stream("POST", url, json=payload, headers=self._headers()) as response:
                if not response.is_success:
                    raise TransportError(f"Chat request failed with status {response.status_code}")

                async for line in response.aiter_lines():
                    event = parse_sse_line(line)
                    if event is None:
                        continue
                    if event.text or event.model:
                        yield event
                    if event.done:
                        return

        except httpx.HTTPError as e:
            error_msg = f"Chat API error: {e}"
            if "connection refused" in str(e).lower():
                error_msg += f"\n  → Is the chat endpoint running at {self._base_url}?"
            raise TransportError(error_msg) from e

        raise StreamFormatError("Chat stream ended before the end-of-stream marker")

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
