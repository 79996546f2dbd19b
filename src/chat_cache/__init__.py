"""Chat Cache - instant answers, response caching and streaming delivery.

This package provides a layered architecture for a chat assistant core:

Layers:
    - protocols: Interface contracts (ChatTransport, ResponseStore, TextCorrector)
    - repositories: Data access implementations (in-memory cache, HTTP clients)
    - services: Business logic (request lifecycle, delivery, fallbacks)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from chat_cache.services import ChatService

    service = ChatService.create()
    answer = await service.send_message([{"role": "user", "content": "hello"}], "general")
    ```

For HTTP API:
    ```python
    from chat_cache.api.app import app
    ```
"""

from chat_cache.config import settings
from chat_cache.dto import ChatRequest, SpellCheckRequest
from chat_cache.entities import (
    CacheEntry,
    ConversationTurn,
    ErrorTag,
    ResponsePayload,
    ServiceCategory,
    StreamChunk,
)
from chat_cache.errors import ChatServiceError, StreamFormatError, TransportError, UpstreamError
from chat_cache.handlers import ChatHandler
from chat_cache.protocols import ChatTransport, ResponseStore, TextCorrector
from chat_cache.repositories import HttpChatTransport, HttpPolishClient, InMemoryResponseCache
from chat_cache.services import ChatService, ChatSessions
from chat_cache.utils import conversation_fingerprint

__all__ = [
    # Configuration
    "settings",
    # Protocols (interfaces)
    "ChatTransport",
    "ResponseStore",
    "TextCorrector",
    # Services (business logic)
    "ChatService",
    "ChatSessions",
    # Handlers (HTTP)
    "ChatHandler",
    # Repositories (data access)
    "HttpChatTransport",
    "HttpPolishClient",
    "InMemoryResponseCache",
    # Entities (domain models)
    "CacheEntry",
    "ConversationTurn",
    "ErrorTag",
    "ResponsePayload",
    "ServiceCategory",
    "StreamChunk",
    # Errors
    "ChatServiceError",
    "StreamFormatError",
    "TransportError",
    "UpstreamError",
    # DTOs (API contracts)
    "ChatRequest",
    "SpellCheckRequest",
    # Helpers
    "conversation_fingerprint",
]
