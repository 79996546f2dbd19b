"""HTTP handlers for chat operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

from collections.abc import AsyncIterator
from contextlib import aclosing

from fastapi import HTTPException, status
from fastapi.responses import StreamingResponse

from chat_cache.dto import (
    CacheClearResponse,
    CancelRequest,
    CancelResponse,
    ChatRequest,
    ChatResponse,
    SpellCheckRequest,
    SpellCheckResponse,
    StatsResponse,
    StreamChunkItem,
)
from chat_cache.entities import ConversationTurn, StreamChunk
from chat_cache.services import ChatSessions


def _to_turns(request: ChatRequest) -> list[ConversationTurn]:
    return [ConversationTurn(role=m.role, content=m.content, image=m.image) for m in request.messages]


def _to_item(chunk: StreamChunk) -> StreamChunkItem:
    return StreamChunkItem(
        chunk=chunk.text,
        is_final=chunk.is_final,
        error=chunk.error_tag,
        model=chunk.model_label,
        image_url=chunk.image_url,
    )


class ChatHandler:
    """HTTP handlers for chat operations.

    This handler delegates business logic to ChatService sessions
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Giving every caller its own session so callers never cancel each other
    - Framing streamed chunks as server-sent events
    - Setting appropriate status codes

    Example:
        ```python
        sessions = ChatSessions(ChatService.create())
        handler = ChatHandler(sessions=sessions)

        @app.post("/chat", response_model=ChatResponse)
        async def chat(request: ChatRequest):
            return await handler.chat(request)
        ```
    """

    def __init__(self, sessions: ChatSessions) -> None:
        """Initialize the chat handler.

        Args:
            sessions: Session registry over the shared chat service (required).
        """
        self._sessions = sessions
        self._chat = sessions.root

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Handle POST /chat requests.

        Raises:
            HTTPException: 400 if the conversation is unusable
        """
        session_id, service = self._sessions.acquire(request.session_id)
        try:
            payload = await service.send_message(_to_turns(request), request.category)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        finally:
            self._sessions.release(session_id, service)

        return ChatResponse(
            content=payload.text,
            model=payload.model_label,
            image_url=payload.image_url,
            error=payload.error_tag,
            session_id=session_id,
        )

    async def stream_chat(self, request: ChatRequest) -> StreamingResponse:
        """Handle POST /chat/stream requests.

        Every chunk is sent as a ``data: <json>`` event; the last event has
        ``is_final`` set. The session id is returned in the ``X-Session-Id``
        header so the caller can cancel the stream.

        Raises:
            HTTPException: 400 if the conversation is unusable
        """
        session_id, service = self._sessions.acquire(request.session_id)
        try:
            chunks = service.stream(_to_turns(request), request.category)
        except ValueError as e:
            self._sessions.release(session_id, service)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

        async def events() -> AsyncIterator[str]:
            try:
                async with aclosing(chunks):
                    async for chunk in chunks:
                        yield f"data: {_to_item(chunk).model_dump_json()}\n\n"
            finally:
                self._sessions.release(session_id, service)

        return StreamingResponse(
            events(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Session-Id": session_id},
        )

    async def cancel(self, request: CancelRequest) -> CancelResponse:
        """Handle POST /chat/cancel requests."""
        cancelled = self._sessions.cancel(request.session_id)
        return CancelResponse(session_id=request.session_id, cancelled=cancelled)

    async def spell_check(self, request: SpellCheckRequest) -> SpellCheckResponse:
        """Handle POST /spellcheck requests."""
        corrected = await self._chat.spell_check(request.text)
        return SpellCheckResponse(original=request.text, corrected=corrected)

    async def clear_cache(self) -> CacheClearResponse:
        """Handle DELETE /cache requests.

        Raises:
            HTTPException: If the cache could not be cleared
        """
        try:
            count = self._chat.clear_cache()
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to clear cache: {e}",
            ) from e

        return CacheClearResponse(
            success=True,
            deleted_count=count,
            message="Cache cleared successfully",
        )

    async def get_stats(self) -> StatsResponse:
        """Handle GET /stats requests.

        Raises:
            HTTPException: If an error occurs while fetching stats
        """
        try:
            stats = self._sessions.get_stats()
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

        return StatsResponse(**stats)

    async def health_check(self) -> dict:
        """Handle GET /health requests."""
        stats = self._sessions.get_stats()
        return {
            "status": "healthy",
            "cache_entries": stats["cache"].get("total_entries", 0),
            "in_flight": stats["in_flight"],
        }
