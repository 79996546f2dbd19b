"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the HTTP transport for a mock in tests
- Replacing the in-memory store with a shared one
- Clear separation of concerns

Usage:
    ```python
    from chat_cache.protocols import ChatTransport, ResponseStore

    transport: ChatTransport = HttpChatTransport.create()
    store: ResponseStore = InMemoryResponseCache.create()
    ```
"""

from .chat_transport import ChatTransport
from .response_store import ResponseStore
from .text_corrector import TextCorrector

__all__ = [
    "ChatTransport",
    "ResponseStore",
    "TextCorrector",
]
