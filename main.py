#!/usr/bin/env python3
"""
Main entry point for the web IRC client
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from webirc.config import default_config_path, load_server_configs, select_server
from webirc.errors import ConfigError
from webirc.irc import (
    ErrorEvent,
    IRCSession,
    JoinEvent,
    KickEvent,
    ModeEvent,
    NamesEvent,
    NickEvent,
    NoticeEvent,
    PartEvent,
    PrivmsgEvent,
    QuitEvent,
    StatusEvent,
    SystemEvent,
    TopicEvent,
    handle_input,
    strip_inline_markup,
)
from webirc.logging_config import LoggerConfigurator
from webirc.logs.logger import logger


class ConsoleView:
    """Prints session events and tracks which target plain input goes to."""

    def __init__(self, session: IRCSession) -> None:
        self.session = session
        self.active_target: str | None = None
        session.on(StatusEvent, lambda e: self._say(f"* {e.status.value}"))
        session.on(ErrorEvent, lambda e: self._say(f"! {e.message}", logging.ERROR))
        session.on(SystemEvent, lambda e: self._say(f"* {e.message}"))
        session.on(JoinEvent, self._on_join)
        session.on(PartEvent, lambda e: self._say(f"<- {e.nick} left {e.channel} {e.reason}".rstrip()))
        session.on(QuitEvent, lambda e: self._say(f"<- {e.nick} quit {e.reason}".rstrip()))
        session.on(
            KickEvent,
            lambda e: self._say(f"<- {e.actor} kicked {e.kicked_nick} from {e.channel} {e.reason}".rstrip()),
        )
        session.on(
            ModeEvent,
            lambda e: self._say(f"* {e.actor} sets mode {' '.join((e.modes, *e.args))} on {e.channel}"),
        )
        session.on(NamesEvent, lambda e: self._say(f"* {e.channel}: {' '.join(e.names)}"))
        session.on(TopicEvent, lambda e: self._say(f"* topic {e.channel}: {strip_inline_markup(e.topic)}"))
        session.on(NickEvent, lambda e: self._say(f"* {e.old_nick} is now {e.new_nick}"))
        session.on(NoticeEvent, lambda e: self._say(f"-{e.sender}- {strip_inline_markup(e.content)}"))
        session.on(PrivmsgEvent, self._on_privmsg)

    def _say(self, text: str, level: int = logging.INFO) -> None:
        logger.log_event("app", "console", level=level, human=text, nick=self.session.current_nickname)

    def _on_join(self, event: JoinEvent) -> None:
        if event.nick.lower() == self.session.current_nickname.lower():
            self.active_target = event.channel
        self._say(f"-> {event.nick} joined {event.channel}")

    def _on_privmsg(self, event: PrivmsgEvent) -> None:
        content = strip_inline_markup(event.content)
        text = f"* {event.sender} {content}" if event.is_action else f"{event.sender}: {content}"
        logger.log_event(
            "irc",
            "privmsg",
            human=text,
            nick=self.session.current_nickname,
            channel=event.target,
        )

    async def read_input(self) -> None:
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader()
        await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
        while True:
            line = (await reader.readline()).decode("utf-8", errors="replace")
            if not line:
                self.session.disconnect()
                return
            command, _, rest = line.strip().partition(" ")
            if command.lower() == "/query":
                self.active_target = rest.strip() or None
                self._say(f"* talking to {self.active_target or 'nobody'}")
                continue
            handle_input(self.session, line, self.active_target)
            if command.lower() == "/quit":
                return


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Web IRC client")
    parser.add_argument("--config", default=None, help="Path to the JSON server configuration")
    parser.add_argument("--server", default=None, help="Server entry to connect to (name or host)")
    parser.add_argument(
        "--check-config", action="store_true", help="Validate the configuration and exit"
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    path = args.config or default_config_path()
    try:
        configs = load_server_configs(path)
    except ConfigError as e:
        logger.log_event("app", "config_error", level=logging.ERROR, error=str(e))
        return 1
    if args.check_config:
        logger.log_event("app", "config_ok", count=len(configs))
        return 0

    config = select_server(configs, args.server)
    if config is None:
        logger.log_event("app", "server_not_found", level=logging.ERROR, server=args.server)
        return 1

    session = IRCSession(config)
    view = ConsoleView(session)
    logger.log_event("app", "start")
    if not await session.connect():
        return 1
    reader = asyncio.create_task(view.read_input())
    try:
        await session.listen()
    finally:
        if not reader.done():
            reader.cancel()
    return 0


def main(argv: list[str] | None = None) -> int:
    LoggerConfigurator().configure()
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        return 0
    finally:
        logger.log_event("app", "shutdown")


if __name__ == "__main__":
    sys.exit(main())
