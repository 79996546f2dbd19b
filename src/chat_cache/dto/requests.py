"""Request DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

from chat_cache.entities import ServiceCategory


class ConversationTurnItem(BaseModel):
    """A single conversation message."""

    role: Literal["system", "user", "assistant"] = Field(..., description="Who wrote the message")
    content: str = Field(..., description="The message text")
    image: str | None = Field(None, description="Optional attached image reference")


class ChatRequest(BaseModel):
    """Request DTO for chat endpoints.

    The handler will convert this to internal calls to the service layer.
    """

    messages: list[ConversationTurnItem] = Field(
        ...,
        description="Conversation, oldest message first",
        min_length=1,
    )
    category: ServiceCategory = Field(
        ServiceCategory.AUTO,
        description="Service category selecting the model profile and cache partition",
    )
    session_id: str | None = Field(
        None,
        description="Caller session. Requests of one session supersede each other; a fresh id is used if omitted",
        max_length=128,
    )


class CancelRequest(BaseModel):
    """Request DTO for cancelling a running answer."""

    session_id: str = Field(..., description="Session whose running request should stop", max_length=128)


class SpellCheckRequest(BaseModel):
    """Request DTO for text polishing."""

    text: str = Field(..., description="The text to correct")
