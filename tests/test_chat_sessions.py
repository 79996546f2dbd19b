"""
Tests for per-caller chat sessions.
"""

import asyncio

import pytest

from chat_cache.entities import StreamChunk
from chat_cache.services import ChatSessions

from conftest import GatedTransport, ScriptedTransport, user


@pytest.fixture
def gate():
    return asyncio.Event()


@pytest.fixture
def sessions(make_service, gate):
    return ChatSessions(make_service(GatedTransport(gate)))


def test_acquire_generates_id_and_reuses_session(sessions):
    session_id, service = sessions.acquire()

    assert session_id
    assert sessions.acquire(session_id) == (session_id, service)
    assert service is not sessions.root
    assert len(sessions) == 1


def test_release_drops_idle_session(sessions):
    session_id, service = sessions.acquire("tab-1")

    sessions.release(session_id, service)

    assert len(sessions) == 0
    assert sessions.cancel("tab-1") is False


@pytest.mark.asyncio
async def test_release_keeps_session_in_flight(sessions):
    session_id, service = sessions.acquire("tab-1")
    stream = service.stream(user("slow question"), "general")
    await stream.__anext__()

    sessions.release(session_id, service)

    assert len(sessions) == 1
    assert sessions.in_flight() == 1
    assert sessions.get_stats()["in_flight"] == 1

    assert sessions.cancel("tab-1") is True
    assert [chunk async for chunk in stream] == [StreamChunk.cancelled()]


@pytest.mark.asyncio
async def test_sessions_share_cache(sessions):
    _, first = sessions.acquire("a")
    _, second = sessions.acquire("b")

    await first.send_message(user("quick question"), "general")
    await second.send_message(user("quick question"), "general")

    assert len(sessions.root.cache) == 1
    assert sessions.get_stats()["performance"]["cache_hits"] == 1


@pytest.mark.asyncio
async def test_close_cancels_sessions_and_closes_root(make_service):
    transport = ScriptedTransport()
    sessions = ChatSessions(make_service(transport))
    sessions.acquire("tab-1")

    await sessions.close()

    assert len(sessions) == 0
    assert transport.closed
