"""WebSocket transport for the IRC session.

The session only needs ``write``/``close``/``receive``; anything providing
them (a test double, another socket library) can stand in for
:class:`WebSocketTransport`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Protocol

import aiohttp

from ..constants import CONNECT_TIMEOUT
from ..errors import TransportError
from ..logs.logger import logger

CONNECTION_FAILED = "Connection Failed"
WEBSOCKET_ERROR = "WebSocket Error"

_CLOSE = object()


class Transport(Protocol):
    def write(self, data: str) -> None:
        """Queue ``data`` for sending; never blocks."""

    def close(self) -> None:
        """Request closure after already queued data is flushed; never blocks."""

    def receive(self) -> AsyncIterator[str]:
        """Yield inbound text chunks until the peer closes.

        Raises:
            TransportError: If the socket fails.
        """


TransportFactory = Callable[[str], Awaitable[Transport]]


class WebSocketTransport:
    """aiohttp-backed transport.

    Outbound writes go through a queue drained by a single writer task so
    lines reach the socket in the order they were written.

    Attributes:
        url: The WebSocket URL.
        ws: The open aiohttp websocket.
        session: HTTP session the websocket belongs to.
    """

    def __init__(
        self,
        url: str,
        ws: aiohttp.ClientWebSocketResponse,
        session: aiohttp.ClientSession,
        *,
        owns_session: bool = False,
    ) -> None:
        self.url = url
        self.ws = ws
        self.session = session
        self._owns_session = owns_session
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closing = False
        self._writer_task = asyncio.get_running_loop().create_task(self._drain_writes())

    @classmethod
    async def open(
        cls,
        url: str,
        session: aiohttp.ClientSession | None = None,
        *,
        timeout: float = CONNECT_TIMEOUT,
    ) -> WebSocketTransport:
        """Open a websocket to ``url``.

        Args:
            url: ``ws://`` or ``wss://`` URL.
            session: Optional shared session; one is created (and owned) if omitted.
            timeout: Handshake timeout in seconds.

        Raises:
            TransportError: If the handshake fails or times out.
        """
        owns_session = session is None
        http = session or aiohttp.ClientSession()
        try:
            ws = await asyncio.wait_for(http.ws_connect(url, autoping=True), timeout=timeout)
        except (aiohttp.ClientError, OSError, TimeoutError, asyncio.TimeoutError) as e:
            if owns_session:
                await http.close()
            logger.log_event(
                "transport", "open_failed", level=logging.ERROR, url=url, error=str(e)
            )
            raise TransportError(CONNECTION_FAILED, data={"url": url, "error": str(e)}) from e
        logger.log_event("transport", "open", level=logging.DEBUG, url=url)
        return cls(url, ws, http, owns_session=owns_session)

    @property
    def closed(self) -> bool:
        return self._closing or self.ws.closed

    def write(self, data: str) -> None:
        if self._closing:
            return
        self._queue.put_nowait(data)

    def close(self) -> None:
        if self._closing:
            return
        self._closing = True
        self._queue.put_nowait(_CLOSE)

    async def receive(self) -> AsyncIterator[str]:
        try:
            async for msg in self.ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    yield msg.data
                elif msg.type == aiohttp.WSMsgType.BINARY:
                    yield msg.data.decode("utf-8", errors="replace")
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    error = self.ws.exception()
                    logger.log_event(
                        "transport",
                        "receive_error",
                        level=logging.ERROR,
                        error=str(error),
                    )
                    raise TransportError(WEBSOCKET_ERROR, data={"error": str(error)})
        finally:
            await self._shutdown()
        logger.log_event(
            "transport", "closed", level=logging.DEBUG, code=self.ws.close_code
        )

    async def _drain_writes(self) -> None:
        while True:
            item = await self._queue.get()
            if item is _CLOSE:
                break
            try:
                await self.ws.send_str(item)  # type: ignore[arg-type]
            except (aiohttp.ClientError, ConnectionError, RuntimeError) as e:
                logger.log_event(
                    "transport", "send_failed", level=logging.ERROR, error=str(e)
                )
                break
        await self._close_socket()

    async def _close_socket(self) -> None:
        if self.ws.closed:
            return
        try:
            await self.ws.close()
        except (aiohttp.ClientError, ConnectionError, RuntimeError) as e:
            logger.log_event(
                "transport", "close_error", level=logging.WARNING, error=str(e)
            )

    async def _shutdown(self) -> None:
        self._closing = True
        if not self._writer_task.done():
            self._writer_task.cancel()
            try:
                await self._writer_task
            except asyncio.CancelledError:
                pass
        await self._close_socket()
        if self._owns_session and not self.session.closed:
            await self.session.close()
