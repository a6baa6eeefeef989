"""Translate a line typed by the user into session calls.

``/join #chan key``, ``/part``, ``/nick``, ``/me``, ``/msg``, ``/quit`` and
the moderation shortcuts act on the session directly; any other ``/VERB``
is sent raw. Text without a leading slash is a message to the active target.
"""

from __future__ import annotations

from collections.abc import Callable

from .events import SystemEvent
from .parser import is_channel
from .session import IRCSession


def _split(rest: str, count: int) -> list[str]:
    parts = rest.split(" ", count) if rest else []
    return parts + [""] * (count + 1 - len(parts))


def _join(session: IRCSession, rest: str, active: str | None) -> str | None:
    channel, key = _split(rest, 1)
    if not channel:
        return None
    session.join(channel, key or None)
    return f"JOIN {channel}"


def _part(session: IRCSession, rest: str, active: str | None) -> str | None:
    first, reason = _split(rest, 1)
    if is_channel(first):
        channel = first
    else:
        channel, reason = active or "", rest
    if not channel:
        return None
    session.part(channel, reason or None)
    return f"PART {channel}"


def _nick(session: IRCSession, rest: str, active: str | None) -> str | None:
    new_nick = rest.split(" ", 1)[0] if rest else ""
    if not new_nick:
        return None
    session.change_nick(new_nick)
    return f"NICK {new_nick}"


def _me(session: IRCSession, rest: str, active: str | None) -> str | None:
    if not active or not rest:
        return None
    session.send_action(active, rest)
    return f"ACTION {active}"


def _msg(session: IRCSession, rest: str, active: str | None) -> str | None:
    target, text = _split(rest, 1)
    if not target or not text:
        return None
    session.send_message(target, text)
    return f"PRIVMSG {target}"


def _quit(session: IRCSession, rest: str, active: str | None) -> str | None:
    session.disconnect(rest or None)
    return "QUIT"


def _mode(session: IRCSession, rest: str, active: str | None) -> str | None:
    tokens = rest.split()
    channel = tokens.pop(0) if tokens and is_channel(tokens[0]) else active
    if not channel or not tokens:
        return None
    modes, *args = tokens
    session.set_mode(channel, modes, *args)
    return f"MODE {channel} {modes}"


def _kick(session: IRCSession, rest: str, active: str | None) -> str | None:
    target, reason = _split(rest, 1)
    if not active or not target:
        return None
    session.kick(active, target, reason)
    return f"KICK {active} {target}"


def _on_target(method: Callable[[IRCSession, str, str], bool], label: str):
    def handler(session: IRCSession, rest: str, active: str | None) -> str | None:
        target = rest.split(" ", 1)[0] if rest else ""
        if not active or not target:
            return None
        method(session, active, target)
        return f"{label} {active} {target}"

    return handler


_COMMANDS = {
    "JOIN": _join,
    "J": _join,
    "PART": _part,
    "NICK": _nick,
    "ME": _me,
    "MSG": _msg,
    "QUIT": _quit,
    "MODE": _mode,
    "KICK": _kick,
    "OP": _on_target(IRCSession.op, "OP"),
    "DEOP": _on_target(IRCSession.deop, "DEOP"),
    "VOICE": _on_target(IRCSession.voice, "VOICE"),
    "DEVOICE": _on_target(IRCSession.devoice, "DEVOICE"),
    "BAN": _on_target(IRCSession.ban, "BAN"),
    "UNBAN": _on_target(IRCSession.unban, "UNBAN"),
}


def handle_input(session: IRCSession, text: str, active_target: str | None = None) -> str | None:
    """Act on one line of user input.

    Args:
        session: The session to drive.
        text: What the user typed.
        active_target: Channel or nick that plain text is sent to.

    Returns:
        A short description of the command issued, or None when nothing was
        sent (empty input, missing arguments, no active target).
    """
    text = text.rstrip("\r\n")
    if not text.strip():
        return None

    if not text.startswith("/") or text.startswith("//"):
        message = text[1:] if text.startswith("//") else text
        if not active_target:
            session.emit(SystemEvent("No active channel or query to send to"))
            return None
        session.send_message(active_target, message)
        return f"PRIVMSG {active_target}"

    verb, _, rest = text[1:].partition(" ")
    rest = rest.strip()
    handler = _COMMANDS.get(verb.upper())
    if handler is not None:
        return handler(session, rest, active_target)

    line = f"{verb.upper()} {rest}" if rest else verb.upper()
    session.send_raw(line)
    return line
