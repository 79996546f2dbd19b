"""Chat transport protocol.

Defines the interface for the network dependency that produces streamed
completions. The endpoint itself is a black box: anything that yields
``StreamEvent`` objects and raises ``ChatServiceError`` subclasses on failure
satisfies the protocol.
"""

from collections.abc import AsyncIterator
from typing import Any, Protocol, runtime_checkable

from chat_cache.entities import StreamEvent


@runtime_checkable
class ChatTransport(Protocol):
    """Protocol for streaming chat backends."""

    def stream_chat(
        self,
        messages: list[dict[str, Any]],
        category: str,
        model: str,
    ) -> AsyncIterator[StreamEvent]:
        """Stream a completion.

        Args:
            messages: Role/content dictionaries, system prompt first
            category: The requested service category value
            model: Model identifier for the category

        Yields:
            StreamEvent for every text delta, ending at the end-of-stream marker

        Raises:
            TransportError: Connection failure or non-success status
            UpstreamError: The endpoint reported an error mid-stream
            StreamFormatError: The stream ended before the end-of-stream marker
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
