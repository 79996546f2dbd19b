"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import CancelRequest, ChatRequest, ConversationTurnItem, SpellCheckRequest
from .responses import (
    CacheClearResponse,
    CancelResponse,
    ChatResponse,
    SpellCheckResponse,
    StatsResponse,
    StreamChunkItem,
)

__all__ = [
    "ChatRequest",
    "CancelRequest",
    "ConversationTurnItem",
    "SpellCheckRequest",
    "ChatResponse",
    "StreamChunkItem",
    "SpellCheckResponse",
    "CacheClearResponse",
    "CancelResponse",
    "StatsResponse",
]
