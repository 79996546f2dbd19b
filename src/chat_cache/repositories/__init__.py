"""Repository layer for data access.

This layer abstracts external dependencies (the response store, the chat
endpoint, the polish endpoint) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (in-memory → shared store, HTTP → mock)
- Unit testing with mock implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from chat_cache.protocols import ChatTransport, ResponseStore, TextCorrector

from .http_chat_transport import HttpChatTransport, parse_sse_line
from .http_polish_client import HttpPolishClient
from .memory_repository import InMemoryResponseCache, score_quality

__all__ = [
    "ChatTransport",
    "ResponseStore",
    "TextCorrector",
    "HttpChatTransport",
    "HttpPolishClient",
    "InMemoryResponseCache",
    "parse_sse_line",
    "score_quality",
]
