from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from chat_cache.api.dependencies import HandlerDep, build_lifespan
from chat_cache.config import settings
from chat_cache.dto import (
    CacheClearResponse,
    CancelRequest,
    CancelResponse,
    ChatRequest,
    ChatResponse,
    SpellCheckRequest,
    SpellCheckResponse,
    StatsResponse,
)
from chat_cache.services import ChatService


def create_app(service: ChatService | None = None) -> FastAPI:
    """Build the HTTP facade.

    Args:
        service: Service to expose. If None, one is created from settings
            at startup.
    """
    app = FastAPI(
        title="Chat Cache API",
        description="Chat assistant with instant answers, response caching and streaming delivery",
        version="0.1.0",
        lifespan=build_lifespan(service),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Chat Cache API",
            "version": "0.1.0",
            "description": "Chat assistant with instant answers, response caching and streaming delivery",
            "endpoints": {
                "chat": "/chat",
                "stream": "/chat/stream",
                "cancel": "/chat/cancel",
                "spellcheck": "/spellcheck",
                "cache": "/cache",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health(handler: HandlerDep) -> dict[str, Any]:
        """Health check endpoint."""
        return await handler.health_check()

    @app.post("/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest, handler: HandlerDep) -> ChatResponse:
        """Answer a conversation and return the full response."""
        return await handler.chat(request)

    @app.post("/chat/stream")
    async def stream_chat(request: ChatRequest, handler: HandlerDep) -> StreamingResponse:
        """Answer a conversation as a server-sent event stream."""
        return await handler.stream_chat(request)

    @app.post("/chat/cancel", response_model=CancelResponse)
    async def cancel(request: CancelRequest, handler: HandlerDep) -> CancelResponse:
        """Cancel the running answer of a session, if any."""
        return await handler.cancel(request)

    @app.post("/spellcheck", response_model=SpellCheckResponse)
    async def spell_check(request: SpellCheckRequest, handler: HandlerDep) -> SpellCheckResponse:
        """Correct common misspellings in a text."""
        return await handler.spell_check(request)

    @app.delete("/cache", response_model=CacheClearResponse)
    async def clear_cache(handler: HandlerDep) -> CacheClearResponse:
        """Clear all cached responses."""
        return await handler.clear_cache()

    @app.get("/stats", response_model=StatsResponse)
    async def get_stats(handler: HandlerDep) -> StatsResponse:
        """Get cache and delivery statistics."""
        return await handler.get_stats()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chat_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
