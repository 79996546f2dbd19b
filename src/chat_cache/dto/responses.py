"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ChatResponse(BaseModel):
    """Response DTO for a complete (non-streaming) answer."""

    content: str = Field(..., description="The full response text")
    model: str = Field(..., description="Model or source that produced the answer")
    image_url: str | None = Field(None, description="Generated image URL, if any")
    error: str | None = Field(None, description="Error tag when the answer is degraded or cancelled")
    session_id: str = Field(..., description="Session the answer ran in")


class StreamChunkItem(BaseModel):
    """One server-sent event of a streamed answer."""

    chunk: str = Field("", description="Text delta")
    is_final: bool = Field(False, description="True on the single terminal event")
    error: str | None = Field(None, description="Error tag (terminal event only)")
    model: str | None = Field(None, description="Model label (terminal event only)")
    image_url: str | None = Field(None, description="Generated image URL (terminal event only)")


class CancelResponse(BaseModel):
    """Response DTO for a cancellation request."""

    session_id: str = Field(..., description="The targeted session")
    cancelled: bool = Field(..., description="Whether a running request was found and cancelled")


class SpellCheckResponse(BaseModel):
    """Response DTO for text polishing."""

    original: str = Field(..., description="The submitted text")
    corrected: str = Field(..., description="The polished text")


class CacheClearResponse(BaseModel):
    """Response DTO for clearing the cache."""

    success: bool = Field(..., description="Whether the operation succeeded")
    deleted_count: int = Field(..., description="Number of entries removed", ge=0)
    message: str = Field(..., description="Human-readable status message")


class StatsResponse(BaseModel):
    """Response DTO for service statistics."""

    cache: dict[str, Any] = Field(..., description="Cache size, capacity and popularity figures")
    performance: dict[str, Any] = Field(..., description="Per-path request counters")
    instant_responses_available: int = Field(..., description="Number of instant-response rules", ge=0)
    in_flight: int = Field(..., description="Number of requests currently streaming", ge=0)
