"""Inbound line splitting and command dispatch."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..logs.logger import logger
from . import commands
from .events import (
    ErrorEvent,
    JoinEvent,
    KickEvent,
    ModeEvent,
    NamesEvent,
    NickEvent,
    NoticeEvent,
    PartEvent,
    PrivmsgEvent,
    QuitEvent,
    RawEvent,
    RegisteredEvent,
    TopicEvent,
)
from .modes import parse_mode_changes
from .parser import ParsedLine, is_channel, nick_from_origin, parse_line, unwrap_action

if TYPE_CHECKING:  # pragma: no cover
    from .session import IRCSession

RPL_WELCOME = "001"
RPL_TOPIC = "332"
RPL_NAMREPLY = "353"
ERR_NICKNAMEINUSE = "433"
ERR_BADCHANNELKEY = "475"

_LINE_SPLIT = re.compile(r"\r?\n")


class IRCDispatcher:
    def __init__(self, client: IRCSession):
        self.client = client
        self._handlers: dict[str, Callable[[ParsedLine], None]] = {
            RPL_WELCOME: self._handle_welcome,
            ERR_NICKNAMEINUSE: self._handle_nick_in_use,
            RPL_NAMREPLY: self._handle_names,
            RPL_TOPIC: self._handle_topic,
            ERR_BADCHANNELKEY: self._handle_bad_channel_key,
            "JOIN": self._handle_join,
            "PART": self._handle_part,
            "QUIT": self._handle_quit,
            "KICK": self._handle_kick,
            "MODE": self._handle_mode,
            "NICK": self._handle_nick,
            "PRIVMSG": self._handle_privmsg,
            "NOTICE": self._handle_notice,
        }

    def process_incoming_data(self, data: str) -> int:
        """Dispatch every non-empty line of one inbound chunk, in order.

        Each chunk is taken to end on a line boundary; ``\\r\\n`` and bare
        ``\\n`` both delimit lines. Returns the number of lines handled.
        """
        handled = 0
        for line in _LINE_SPLIT.split(data):
            if not line:
                continue
            self.handle_line(line)
            handled += 1
        return handled

    def handle_line(self, raw_line: str) -> None:
        parsed = parse_line(raw_line)

        # keep-alive first: no raw event, no further dispatch
        if parsed.command == "PING":
            self._handle_ping(parsed)
            return

        logger.log_event(
            "irc", "raw", level=logging.DEBUG, nick=self.client.current_nickname, raw=raw_line
        )
        self.client.emit(RawEvent(raw_line))

        handler = self._handlers.get(parsed.command)
        if handler is None:
            logger.log_event(
                "irc",
                "unhandled",
                level=logging.DEBUG,
                nick=self.client.current_nickname,
                command=parsed.command,
            )
            return
        handler(parsed)

    @staticmethod
    def _param(parsed: ParsedLine, index: int, default: str = "") -> str:
        params = parsed.parameters
        return params[index] if -len(params) <= index < len(params) else default

    def _handle_ping(self, parsed: ParsedLine) -> None:
        token = self._param(parsed, 0)
        logger.log_event(
            "irc", "ping", level=logging.DEBUG, nick=self.client.current_nickname, token=token
        )
        self.client.send_line(commands.pong(token))

    def _handle_welcome(self, parsed: ParsedLine) -> None:
        client = self.client
        client.reset_nick_collisions()
        logger.log_event("irc", "registered", nick=client.current_nickname)
        client.emit(RegisteredEvent(client.current_nickname))
        for channel in client.config.channels:
            logger.log_event(
                "irc", "auto_join", level=logging.DEBUG, nick=client.current_nickname, channel=channel
            )
            client.join(channel)

    def _handle_nick_in_use(self, parsed: ParsedLine) -> None:
        self.client.handle_nick_collision()

    def _handle_join(self, parsed: ParsedLine) -> None:
        self.client.emit(
            JoinEvent(nick=nick_from_origin(parsed.origin), channel=self._param(parsed, 0))
        )

    def _handle_part(self, parsed: ParsedLine) -> None:
        self.client.emit(
            PartEvent(
                nick=nick_from_origin(parsed.origin),
                channel=self._param(parsed, 0),
                reason=self._param(parsed, 1),
            )
        )

    def _handle_quit(self, parsed: ParsedLine) -> None:
        self.client.emit(
            QuitEvent(nick=nick_from_origin(parsed.origin), reason=self._param(parsed, 0))
        )

    def _handle_kick(self, parsed: ParsedLine) -> None:
        self.client.emit(
            KickEvent(
                channel=self._param(parsed, 0),
                kicked_nick=self._param(parsed, 1),
                actor=nick_from_origin(parsed.origin),
                reason=self._param(parsed, 2),
            )
        )

    def _handle_mode(self, parsed: ParsedLine) -> None:
        target = self._param(parsed, 0)
        # user modes are not surfaced
        if not is_channel(target):
            return
        modes = self._param(parsed, 1)
        args = parsed.parameters[2:]
        actor = nick_from_origin(parsed.origin)
        logger.log_event(
            "irc",
            "mode_change",
            level=logging.DEBUG,
            nick=self.client.current_nickname,
            channel=target,
            actor=actor,
            modes=" ".join((modes, *args)),
        )
        self.client.emit(
            ModeEvent(
                channel=target,
                actor=actor,
                modes=modes,
                args=tuple(args),
                changes=parse_mode_changes(modes, args),
            )
        )

    def _handle_nick(self, parsed: ParsedLine) -> None:
        old_nick = nick_from_origin(parsed.origin)
        new_nick = self._param(parsed, 0)
        if not new_nick:
            return
        is_self = self.client.adopt_nick_change(old_nick, new_nick)
        self.client.emit(NickEvent(old_nick=old_nick, new_nick=new_nick, is_self=is_self))

    def _handle_privmsg(self, parsed: ParsedLine) -> None:
        content = self._param(parsed, 1)
        body = unwrap_action(content)
        self.client.emit(
            PrivmsgEvent(
                target=self._param(parsed, 0),
                sender=nick_from_origin(parsed.origin),
                content=content if body is None else body,
                is_action=body is not None,
            )
        )

    def _handle_notice(self, parsed: ParsedLine) -> None:
        self.client.emit(
            NoticeEvent(
                target=self._param(parsed, 0),
                sender=nick_from_origin(parsed.origin),
                content=self._param(parsed, 1),
            )
        )

    def _handle_names(self, parsed: ParsedLine) -> None:
        # <me> <symbol> <channel> :<names>; some servers omit the symbol
        if len(parsed.parameters) < 3:
            return
        channel = self._param(parsed, -2)
        names = tuple(n for n in self._param(parsed, -1).split(" ") if n)
        self.client.emit(NamesEvent(channel=channel, names=names))

    def _handle_topic(self, parsed: ParsedLine) -> None:
        if len(parsed.parameters) < 3:
            return
        self.client.emit(
            TopicEvent(channel=self._param(parsed, 1), topic=self._param(parsed, 2))
        )

    def _handle_bad_channel_key(self, parsed: ParsedLine) -> None:
        channel = self._param(parsed, 1)
        logger.log_event(
            "irc",
            "bad_channel_key",
            level=logging.WARNING,
            nick=self.client.current_nickname,
            channel=channel,
        )
        self.client.emit(ErrorEvent(f"Cannot join channel {channel}: bad channel key"))
