"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from chat_cache.handlers import ChatHandler
from chat_cache.services import ChatService, ChatSessions

logger = logging.getLogger(__name__)


def get_chat_service(request: Request) -> ChatService:
    """Dependency injection for ChatService from app.state.

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "chat_service", None)
    if service is None:
        raise RuntimeError("ChatService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> ChatHandler:
    """Dependency injection for ChatHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "chat_handler", None)
    if handler is None:
        raise RuntimeError("ChatHandler not initialized. Check lifespan setup.")
    return handler


def build_lifespan(
    service: ChatService | None = None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Create the lifespan context manager for the app.

    Args:
        service: Preconfigured service (tests inject one with a mock
            transport). If None, ``ChatService.create()`` builds one from
            settings and it is closed on shutdown. Every HTTP caller gets
            its own session (a fork of this service) sharing its cache.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = service is None
        chat_service = ChatService.create() if owned else service

        sessions = ChatSessions(chat_service)

        app.state.chat_service = chat_service
        app.state.chat_sessions = sessions
        app.state.chat_handler = ChatHandler(sessions=sessions)
        logger.info("Chat service initialized")

        yield

        del app.state.chat_handler
        del app.state.chat_sessions
        del app.state.chat_service
        if owned:
            await sessions.close()
        else:
            sessions.cancel_all()
        logger.info("Chat service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ChatHandler, Depends(get_handler)]
ServiceDep = Annotated[ChatService, Depends(get_chat_service)]
