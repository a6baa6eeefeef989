"""Tests for the aiohttp WebSocket transport."""

from __future__ import annotations

from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest

from webirc.errors import TransportError
from webirc.irc.transport import CONNECTION_FAILED, WEBSOCKET_ERROR, WebSocketTransport


class FakeWebSocket:
    """Minimal stand-in for ``aiohttp.ClientWebSocketResponse``."""

    def __init__(self, messages=(), error: Exception | None = None) -> None:
        self._messages = list(messages)
        self._error = error
        self.closed = False
        self.close_code: int | None = None
        self.sent: list[str] = []
        self.close_calls = 0

    async def send_str(self, data: str) -> None:
        self.sent.append(data)

    async def close(self) -> bool:
        self.close_calls += 1
        self.closed = True
        self.close_code = 1000
        return True

    def exception(self) -> Exception | None:
        return self._error

    def __aiter__(self):
        return self

    async def __anext__(self) -> aiohttp.WSMessage:
        if not self._messages:
            raise StopAsyncIteration
        return self._messages.pop(0)


def text(data: str) -> aiohttp.WSMessage:
    return aiohttp.WSMessage(aiohttp.WSMsgType.TEXT, data, None)


@pytest.fixture
def http_session():
    session = Mock(spec=aiohttp.ClientSession)
    session.closed = False
    session.close = AsyncMock()
    return session


@pytest.mark.asyncio
async def test_open_uses_given_session(http_session):
    ws = FakeWebSocket()
    http_session.ws_connect = AsyncMock(return_value=ws)
    transport = await WebSocketTransport.open("ws://irc.example.org:8067", http_session)
    http_session.ws_connect.assert_awaited_once()
    assert http_session.ws_connect.call_args.args[0] == "ws://irc.example.org:8067"
    assert transport.ws is ws
    assert not transport.closed
    transport.close()
    await transport._writer_task
    http_session.close.assert_not_awaited()


@pytest.mark.asyncio
async def test_open_failure_raises_connection_failed(http_session):
    http_session.ws_connect = AsyncMock(
        side_effect=aiohttp.ClientConnectionError("refused")
    )
    with pytest.raises(TransportError) as excinfo:
        await WebSocketTransport.open("ws://nowhere:1", http_session)
    assert str(excinfo.value) == CONNECTION_FAILED
    assert excinfo.value.data["url"] == "ws://nowhere:1"
    assert "refused" in excinfo.value.data["error"]


@pytest.mark.asyncio
async def test_writes_are_sent_in_order_then_closed(http_session):
    ws = FakeWebSocket()
    transport = WebSocketTransport("ws://x", ws, http_session)
    transport.write("NICK a\r\n")
    transport.write("USER a 0 * :a\r\n")
    transport.write("QUIT :bye\r\n")
    transport.close()
    # ignored once closing
    transport.write("JOIN #late\r\n")
    await transport._writer_task
    assert ws.sent == ["NICK a\r\n", "USER a 0 * :a\r\n", "QUIT :bye\r\n"]
    assert ws.close_calls == 1
    assert transport.closed


@pytest.mark.asyncio
async def test_receive_yields_text_and_decodes_binary(http_session):
    ws = FakeWebSocket(
        [
            text(":srv 001 me :hi\r\n"),
            aiohttp.WSMessage(aiohttp.WSMsgType.BINARY, "PING :café\r\n".encode(), None),
        ]
    )
    transport = WebSocketTransport("ws://x", ws, http_session, owns_session=True)
    chunks = [chunk async for chunk in transport.receive()]
    assert chunks == [":srv 001 me :hi\r\n", "PING :café\r\n"]
    assert ws.close_calls == 1
    assert transport._writer_task.cancelled()
    http_session.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_receive_error_frame_raises(http_session):
    ws = FakeWebSocket(
        [text("PING :a\r\n"), aiohttp.WSMessage(aiohttp.WSMsgType.ERROR, None, None)],
        error=ConnectionResetError("reset by peer"),
    )
    transport = WebSocketTransport("ws://x", ws, http_session)
    seen = []
    with pytest.raises(TransportError) as excinfo:
        async for chunk in transport.receive():
            seen.append(chunk)
    assert seen == ["PING :a\r\n"]
    assert str(excinfo.value) == WEBSOCKET_ERROR
    assert "reset by peer" in excinfo.value.data["error"]
    assert ws.closed
    http_session.close.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_failure_stops_writer(http_session):
    ws = FakeWebSocket()
    ws.send_str = AsyncMock(side_effect=ConnectionResetError("gone"))
    transport = WebSocketTransport("ws://x", ws, http_session)
    transport.write("NICK a\r\n")
    await transport._writer_task
    assert ws.closed


@pytest.mark.asyncio
async def test_write_queue_is_unbounded(http_session):
    ws = FakeWebSocket()
    transport = WebSocketTransport("ws://x", ws, http_session)
    assert transport._queue.maxsize == 0
    for n in range(500):
        transport.write(f"PRIVMSG #a :{n}\r\n")
    transport.close()
    await transport._writer_task
    assert len(ws.sent) == 500
    assert ws.sent[-1] == "PRIVMSG #a :499\r\n"
