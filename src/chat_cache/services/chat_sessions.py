"""Per-caller chat sessions over one shared service.

A ChatService owns a single in-flight slot, which is right for one caller
but wrong for a server: two clients would supersede each other. Sessions
give every caller its own fork of a root service. All forks share the
root's cache, transport and metrics.
"""

import logging
import uuid

from .chat_service import ChatService

logger = logging.getLogger(__name__)


class ChatSessions:
    """Registry of active sessions keyed by session id.

    A session exists only while one of its requests is running. Requests
    that share a session id supersede each other; requests with different
    ids run independently.

    Example:
        ```python
        sessions = ChatSessions(ChatService.create())

        session_id, service = sessions.acquire("tab-1")
        try:
            answer = await service.send_message(conversation, "code")
        finally:
            sessions.release(session_id, service)
        ```
    """

    def __init__(self, root: ChatService) -> None:
        """Initialize the registry.

        Args:
            root: Service whose collaborators every session shares.
        """
        self._root = root
        self._sessions: dict[str, ChatService] = {}

    @property
    def root(self) -> ChatService:
        return self._root

    def acquire(self, session_id: str | None = None) -> tuple[str, ChatService]:
        """Get the service of a session, creating the session if needed.

        Args:
            session_id: Caller-chosen id. A fresh id is generated if None.

        Returns:
            Tuple of (session_id, service)
        """
        if session_id is None:
            session_id = uuid.uuid4().hex
        service = self._sessions.get(session_id)
        if service is None:
            service = self._root.fork()
            self._sessions[session_id] = service
        return session_id, service

    def release(self, session_id: str, service: ChatService) -> None:
        """Drop the session once it has nothing in flight."""
        if self._sessions.get(session_id) is service and not service.in_flight:
            del self._sessions[session_id]

    def cancel(self, session_id: str) -> bool:
        """Cancel the running request of a session.

        Returns:
            True if the session existed, False otherwise
        """
        service = self._sessions.get(session_id)
        if service is None:
            return False
        service.cancel_request()
        logger.info("Cancel requested for session %s", session_id)
        return True

    def in_flight(self) -> int:
        """Number of sessions with a request in flight."""
        return sum(1 for service in self._sessions.values() if service.in_flight)

    def __len__(self) -> int:
        return len(self._sessions)

    def get_stats(self) -> dict:
        """Root statistics with the in-flight count over all sessions."""
        stats = self._root.get_stats()
        stats["in_flight"] = self.in_flight()
        return stats

    def cancel_all(self) -> None:
        """Cancel every running request and forget all sessions."""
        for service in self._sessions.values():
            service.cancel_request()
        self._sessions.clear()

    async def close(self) -> None:
        """Cancel every session, then close the shared clients."""
        self.cancel_all()
        await self._root.close()
