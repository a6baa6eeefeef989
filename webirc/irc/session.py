"""IRC session engine: connection lifecycle, registration and commands."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..config.model import SessionConfig
from ..constants import MAX_NICK_RETRIES, NICK_COLLISION_SUFFIX
from ..errors import TransportError
from ..logs.logger import logger
from . import commands
from .dispatcher import IRCDispatcher
from .events import (
    ErrorEvent,
    Event,
    EventEmitter,
    PrivmsgEvent,
    StatusEvent,
    SystemEvent,
)
from .models import ConnectionPhase, Status
from .transport import CONNECTION_FAILED, Transport, TransportFactory, WebSocketTransport


class IRCSession:  # pylint: disable=too-many-public-methods
    """One connection to one IRC server.

    Phases move ``IDLE -> CONNECTING -> CONNECTED -> DISCONNECTED``. Outbound
    commands are only written while ``CONNECTED`` with a live transport;
    otherwise they are dropped without error. There is no automatic
    reconnection: call :meth:`connect` again after a disconnect.
    """

    def __init__(
        self,
        config: SessionConfig,
        transport_factory: TransportFactory | None = None,
        *,
        max_nick_retries: int = MAX_NICK_RETRIES,
        nick_suffix: str = NICK_COLLISION_SUFFIX,
    ) -> None:
        self.config = config
        self.current_nickname = config.nick
        self.phase = ConnectionPhase.IDLE
        self.transport: Transport | None = None
        self.max_nick_retries = max_nick_retries
        self.nick_suffix = nick_suffix
        self._nick_collisions = 0
        self._transport_factory: TransportFactory = (
            transport_factory or WebSocketTransport.open
        )
        self.events = EventEmitter(owner=config.nick)
        self.dispatcher = IRCDispatcher(self)

    # -- events --------------------------------------------------------

    def on(self, kind: type[Event] | str, listener: Callable[[Any], Any]) -> Callable[[Any], Any]:
        return self.events.on(kind, listener)

    def off(self, kind: type[Event] | str, listener: Callable[[Any], Any]) -> bool:
        return self.events.off(kind, listener)

    def emit(self, event: Event) -> None:
        self.events.emit(event)

    # -- lifecycle -----------------------------------------------------

    @property
    def connected(self) -> bool:
        return self.phase is ConnectionPhase.CONNECTED and self.transport is not None

    def _set_phase(self, new_phase: ConnectionPhase) -> None:
        if self.phase != new_phase:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                nick=self.current_nickname,
                old_state=self.phase.name,
                new_state=new_phase.name,
            )
            self.phase = new_phase

    async def connect(self) -> bool:
        """Open the transport and register.

        Returns:
            True once the transport is open and registration was sent; False if
            the session was already connecting/connected or the open failed
            (an ``error`` event reports the failure).
        """
        if self.phase in (ConnectionPhase.CONNECTING, ConnectionPhase.CONNECTED):
            logger.log_event(
                "irc",
                "connect_skipped",
                level=logging.DEBUG,
                nick=self.current_nickname,
                phase=self.phase.name,
            )
            return False
        # nothing carries over from a previous connection
        self.current_nickname = self.config.nick
        self._nick_collisions = 0
        self._set_phase(ConnectionPhase.CONNECTING)
        self.emit(StatusEvent(Status.CONNECTING))
        url = self.config.url
        logger.log_event("irc", "connect_start", nick=self.current_nickname, url=url)
        try:
            transport = await self._transport_factory(url)
        except TransportError as e:
            logger.log_event(
                "irc",
                "connect_failed",
                level=logging.ERROR,
                nick=self.current_nickname,
                url=url,
                error=str(e.data.get("error", e)),
            )
            self.handle_error(str(e) or CONNECTION_FAILED)
            return False
        self.handle_open(transport)
        return True

    def handle_open(self, transport: Transport) -> None:
        """Transport-open signal: become connected and send registration."""
        self.transport = transport
        self._set_phase(ConnectionPhase.CONNECTED)
        logger.log_event("irc", "transport_open", nick=self.current_nickname)
        self.emit(StatusEvent(Status.CONNECTED))
        self._register()

    def _register(self) -> None:
        # PASS must precede NICK/USER for servers that require it
        if self.config.password:
            self.send_line(commands.pass_(self.config.password))
        self.send_line(commands.nick(self.current_nickname))
        self.send_line(commands.user(self.config.username, self.config.realname))

    async def listen(self) -> None:
        """Pump inbound chunks into the dispatcher until the transport ends."""
        transport = self.transport
        if transport is None:
            return
        try:
            async for chunk in transport.receive():
                self.handle_data(chunk)
        except TransportError as e:
            self.handle_error(str(e))
            return
        self.handle_close()

    async def run(self) -> None:
        if await self.connect():
            await self.listen()

    def handle_data(self, data: str) -> int:
        return self.dispatcher.process_incoming_data(data)

    def handle_error(self, category: str) -> None:
        """Transport-error signal: report, drop the transport, go DISCONNECTED."""
        logger.log_event(
            "irc",
            "transport_error",
            level=logging.ERROR,
            nick=self.current_nickname,
            error=category,
        )
        was_disconnected = self.phase is ConnectionPhase.DISCONNECTED
        self.transport = None
        self._set_phase(ConnectionPhase.DISCONNECTED)
        self.emit(ErrorEvent(category))
        if not was_disconnected:
            self.emit(StatusEvent(Status.DISCONNECTED))

    def handle_close(self) -> None:
        """Transport-close signal."""
        self.transport = None
        if self.phase is ConnectionPhase.DISCONNECTED:
            return
        logger.log_event(
            "irc", "transport_closed", level=logging.WARNING, nick=self.current_nickname
        )
        self._set_phase(ConnectionPhase.DISCONNECTED)
        self.emit(StatusEvent(Status.DISCONNECTED))

    def disconnect(self, reason: str | None = None) -> None:
        """Send QUIT and ask the transport to close, without waiting.

        The handle is cleared immediately so later commands are no-ops; the
        phase changes when the close signal arrives.
        """
        transport = self.transport
        if transport is None:
            return
        logger.log_event("irc", "disconnect_requested", nick=self.current_nickname)
        self.send_line(commands.quit_(reason or self.config.quit_message))
        self.transport = None
        transport.close()

    # -- nickname ------------------------------------------------------

    def handle_nick_collision(self) -> None:
        self._nick_collisions += 1
        if self.max_nick_retries and self._nick_collisions > self.max_nick_retries:
            logger.log_event(
                "irc",
                "nick_retries_exhausted",
                level=logging.ERROR,
                nick=self.current_nickname,
                attempts=self._nick_collisions - 1,
            )
            self.emit(
                ErrorEvent(
                    f"Nickname {self.current_nickname} is in use; "
                    f"gave up after {self.max_nick_retries} attempts"
                )
            )
            return
        old_nick = self.current_nickname
        new_nick = old_nick + self.nick_suffix
        logger.log_event(
            "irc",
            "nick_in_use",
            level=logging.WARNING,
            nick=old_nick,
            old_nick=old_nick,
            new_nick=new_nick,
        )
        self.emit(SystemEvent(f"Nickname {old_nick} is already in use, trying {new_nick}"))
        self.current_nickname = new_nick
        self.send_line(commands.nick(new_nick))

    def reset_nick_collisions(self) -> None:
        self._nick_collisions = 0

    def adopt_nick_change(self, old_nick: str, new_nick: str) -> bool:
        """Follow a server NICK message; returns True if it was ours.

        A local ``change_nick`` already moved ``current_nickname`` to the new
        value, so either side matching counts as ours.
        """
        current = self.current_nickname.lower()
        if current not in (old_nick.lower(), new_nick.lower()):
            return False
        if self.current_nickname != new_nick:
            logger.log_event(
                "irc",
                "nick_changed",
                nick=new_nick,
                old_nick=self.current_nickname,
                new_nick=new_nick,
            )
        self.current_nickname = new_nick
        return True

    # -- outbound ------------------------------------------------------

    def send_line(self, line: str) -> bool:
        """Write one line (CRLF appended). Returns False if it was dropped."""
        transport = self.transport
        if transport is None or self.phase is not ConnectionPhase.CONNECTED:
            logger.log_event(
                "irc",
                "send_dropped",
                level=logging.DEBUG,
                nick=self.current_nickname,
                verb=line.split(" ", 1)[0],
            )
            return False
        verb = line.split(" ", 1)[0]
        logger.log_event(
            "irc",
            "send",
            level=logging.DEBUG,
            nick=self.current_nickname,
            # the server password never reaches the log
            line=f"{verb} ********" if verb.upper() == "PASS" else line,
        )
        transport.write(line + commands.LINE_DELIMITER)
        return True

    def send_raw(self, text: str) -> bool:
        line = commands.raw(text)
        if not line:
            return False
        return self.send_line(line)

    def join(self, channel: str, key: str | None = None) -> bool:
        return self.send_line(commands.join(channel, key))

    def part(self, channel: str, reason: str | None = None) -> bool:
        return self.send_line(commands.part(channel, reason))

    def send_message(self, target: str, text: str) -> bool:
        """PRIVMSG ``target``; echoes a self-authored ``privmsg`` event locally."""
        if not self.send_line(commands.privmsg(target, text)):
            return False
        self.emit(
            PrivmsgEvent(target=target, sender=self.current_nickname, content=text, is_self=True)
        )
        return True

    def send_action(self, target: str, text: str) -> bool:
        if not self.send_line(commands.action(target, text)):
            return False
        self.emit(
            PrivmsgEvent(
                target=target,
                sender=self.current_nickname,
                content=text,
                is_self=True,
                is_action=True,
            )
        )
        return True

    def change_nick(self, new_nick: str) -> bool:
        # optimistic: the server's NICK echo is reconciled by adopt_nick_change
        if not self.send_line(commands.nick(new_nick)):
            return False
        self.current_nickname = new_nick
        return True

    def kick(self, channel: str, target: str, reason: str = "") -> bool:
        return self.send_line(commands.kick(channel, target, reason))

    def ban(self, channel: str, target: str) -> bool:
        return self.send_line(commands.mode(channel, "+b", commands.ban_mask(target)))

    def unban(self, channel: str, hostmask: str) -> bool:
        return self.send_line(commands.mode(channel, "-b", hostmask))

    def op(self, channel: str, target: str) -> bool:
        return self.send_line(commands.mode(channel, "+o", target))

    def deop(self, channel: str, target: str) -> bool:
        return self.send_line(commands.mode(channel, "-o", target))

    def voice(self, channel: str, target: str) -> bool:
        return self.send_line(commands.mode(channel, "+v", target))

    def devoice(self, channel: str, target: str) -> bool:
        return self.send_line(commands.mode(channel, "-v", target))

    def set_mode(self, channel: str, modes: str, *args: str) -> bool:
        return self.send_line(commands.mode(channel, modes, *args))
