"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntry
from .conversation import ROLES, ConversationTurn, ServiceCategory
from .response import ErrorTag, ResponsePayload, StreamChunk, StreamEvent

__all__ = [
    "ROLES",
    "CacheEntry",
    "ConversationTurn",
    "ErrorTag",
    "ResponsePayload",
    "ServiceCategory",
    "StreamChunk",
    "StreamEvent",
]
