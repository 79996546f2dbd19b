"""
Tests for the HTTP streaming transport, using httpx.MockTransport.
"""

import json

import httpx
import pytest

from chat_cache.entities import StreamEvent
from chat_cache.errors import StreamFormatError, TransportError, UpstreamError
from chat_cache.repositories import HttpChatTransport, parse_sse_line

MESSAGES = [{"role": "user", "content": "Explain generators"}]


def sse(*frames) -> bytes:
    lines = []
    for frame in frames:
        data = frame if isinstance(frame, str) else json.dumps(frame)
        lines.append(f"data: {data}\n\n")
    return "".join(lines).encode()


def make_transport(handler) -> HttpChatTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpChatTransport(base_url="http://chat.test/api/", api_key="secret", client=client)


async def collect(transport: HttpChatTransport) -> list[StreamEvent]:
    return [event async for event in transport.stream_chat(MESSAGES, "code", "coder-1")]


def test_parse_text_frame():
    assert parse_sse_line('data: {"response": "Hi", "model": "m"}') == StreamEvent(text="Hi", model="m")


def test_parse_done_markers():
    assert parse_sse_line("data: [DONE]") == StreamEvent(done=True)
    assert parse_sse_line('data: {"done": true}') == StreamEvent(done=True)


def test_parse_openai_delta():
    line = 'data: {"choices": [{"delta": {"content": "yo"}}]}'
    assert parse_sse_line(line) == StreamEvent(text="yo")


@pytest.mark.parametrize("line", ["", ": keep-alive", "event: message", "data: {not json", "data: [1, 2]"])
def test_parse_skips_non_frames(line):
    assert parse_sse_line(line) is None


def test_parse_error_frame_raises():
    with pytest.raises(UpstreamError, match="quota"):
        parse_sse_line('data: {"error": {"message": "quota exceeded"}}')


@pytest.mark.asyncio
async def test_stream_success():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = sse({"response": "Gen"}, "{broken", {"response": "erators", "model": "coder-1b"}, {"done": True})
        return httpx.Response(200, content=body, headers={"content-type": "text/event-stream"})

    events = await collect(make_transport(handler))

    assert events == [StreamEvent(text="Gen"), StreamEvent(text="erators", model="coder-1b")]
    request = seen[0]
    assert request.url.path == "/api/chat/stream"
    assert request.headers["authorization"] == "Bearer secret"
    body = json.loads(request.content)
    assert body["messages"] == MESSAGES
    assert body["category"] == "code"
    assert body["model"] == "coder-1"


@pytest.mark.asyncio
async def test_stream_ignores_frames_after_sentinel():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=sse({"response": "a"}, "[DONE]", {"response": "late"}))

    assert await collect(make_transport(handler)) == [StreamEvent(text="a")]


@pytest.mark.asyncio
async def test_stream_non_success_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, content=b"unavailable")

    with pytest.raises(TransportError, match="503"):
        await collect(make_transport(handler))


@pytest.mark.asyncio
async def test_stream_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(TransportError):
        await collect(make_transport(handler))


@pytest.mark.asyncio
async def test_stream_upstream_error_frame():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=sse({"response": "par"}, {"error": "model overloaded"}))

    with pytest.raises(UpstreamError, match="overloaded"):
        await collect(make_transport(handler))


@pytest.mark.asyncio
async def test_stream_without_sentinel_is_malformed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=sse({"response": "cut off"}))

    with pytest.raises(StreamFormatError):
        await collect(make_transport(handler))


@pytest.mark.asyncio
async def test_close_releases_client():
    transport = make_transport(lambda request: httpx.Response(200))
    await transport.close()
    assert transport._client is None


@pytest.mark.parametrize("model", ["42", "null", '{"name": "m"}', "[\"m\"]"])
def test_parse_drops_non_string_model(model):
    event = parse_sse_line(f'data: {{"response": "Hi", "model": {model}}}')
    assert event == StreamEvent(text="Hi")


def test_parse_ignores_malformed_delta():
    assert parse_sse_line('data: {"choices": [{"delta": "oops"}]}') == StreamEvent()


@pytest.mark.asyncio
async def test_stream_with_non_string_model_keeps_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=sse({"response": "answer text", "model": 42}, "[DONE]"))

    assert await collect(make_transport(handler)) == [StreamEvent(text="answer text")]
