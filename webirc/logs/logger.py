"""Structured event logger used across the client.

Call sites name an event as ``(domain, action)`` plus keyword context. The
catalog in :mod:`webirc.logs.event_catalog` turns that into a human line;
with ``DEBUG`` set the event name and the remaining context are appended for
grepping.
"""

from __future__ import annotations

import logging
import os
import sys

import colorlog

from ..logging_config import LOG_COLORS
from .event_catalog import EVENT_TEMPLATES

PREFIX_WIDTH = 24
EVENT_NAME_WIDTH = 32
CHAT_MARK = "💬"


def debug_enabled() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s%(levelname)-8s%(reset)s %(message)s",
            log_colors=LOG_COLORS,
            stream=sys.stdout,
        )
    )
    return handler


class ClientLogger:
    """Event-oriented front end for one stdlib logger.

    Args:
        name: Logger name; children of ``webirc`` propagate to it.
        log_file: Optional path that also receives timestamped plain lines.
    """

    def __init__(self, name: str = "webirc", log_file: str | None = None) -> None:
        self.logger = logging.getLogger(name)
        self.log_file = log_file
        self.logger.handlers.clear()
        self.logger.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)
        self.logger.addHandler(_console_handler())
        if log_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
            )
            self.logger.addHandler(file_handler)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **context: object,
    ) -> None:
        """Log one named event.

        ``human`` replaces the catalog text. Without it the ``(domain,
        action)`` template is filled from ``context``; pairs missing from the
        catalog get ``"domain: action"`` and a ``derived=True`` marker. The
        ``nick`` and ``channel`` keys build the line prefix rather than
        appearing as context.
        """
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        if human is None:
            human = self._render(domain, action, context)
        nick = context.pop("nick", None)
        channel = context.pop("channel", None)
        channel = channel if isinstance(channel, str) else None
        prefix = self._prefix(nick if isinstance(nick, str) else None, channel)
        if event_name == "irc_privmsg":
            human = self._chat_line(human, channel)
        if debug_enabled():
            message = self._debug_line(event_name, prefix, human, context)
        else:
            message = f"{prefix} {human}"
        self.logger.log(level, message, exc_info=exc_info)

    @staticmethod
    def _render(domain: str, action: str, context: dict[str, object]) -> str:
        template = EVENT_TEMPLATES.get((domain, action))
        if template is None:
            context["derived"] = True
            return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
        try:
            return template.format(**context)
        except (KeyError, IndexError, ValueError):
            # a call site without every field still logs the bare template
            return template

    @staticmethod
    def _prefix(nick: str | None, channel: str | None) -> str:
        label = (nick or "client") + (channel or "")
        return f"[{label.ljust(PREFIX_WIDTH)[:PREFIX_WIDTH]}]"

    @staticmethod
    def _chat_line(text: str, channel: str | None) -> str:
        body = text.removeprefix(CHAT_MARK).lstrip()
        return f"{CHAT_MARK} {channel} {body}" if channel else f"{CHAT_MARK} {body}"

    @staticmethod
    def _debug_line(
        event_name: str, prefix: str, human: str, context: dict[str, object]
    ) -> str:
        if len(event_name) > EVENT_NAME_WIDTH:
            event_name = event_name[: EVENT_NAME_WIDTH - 1] + "…"
        line = f"{event_name.ljust(EVENT_NAME_WIDTH)} {prefix} {human}"
        if context:
            line += " (" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")"
        return line


logger = ClientLogger()
