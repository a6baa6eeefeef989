"""Outbound command serialization.

Each builder returns one protocol line without the CRLF terminator; the
session appends the delimiter when writing. Arguments have CR/LF removed so a
single call can never smuggle a second command onto the wire.
"""

from __future__ import annotations

from .parser import wrap_action

LINE_DELIMITER = "\r\n"


def _clean(value: str) -> str:
    return value.replace("\r", "").replace("\n", " ")


def build_line(verb: str, *params: str, trailing: str | None = None) -> str:
    """Serialize ``VERB p1 p2 :trailing``.

    A middle parameter that is empty, contains a space, or starts with ``:``
    cannot be represented positionally; it is promoted to the trailing slot
    when it is the last argument and no explicit trailing was given.
    """
    parts = [_clean(verb).upper()]
    middle = [_clean(p) for p in params]
    if trailing is None and middle and _needs_trailing(middle[-1]):
        trailing = middle.pop()
    parts.extend(middle)
    if trailing is not None:
        parts.append(":" + _clean(trailing))
    return " ".join(parts)


def _needs_trailing(param: str) -> bool:
    return not param or " " in param or param.startswith(":")


def pass_(password: str) -> str:
    return build_line("PASS", password)


def nick(new_nick: str) -> str:
    return build_line("NICK", new_nick)


def user(username: str, realname: str) -> str:
    return build_line("USER", username, "0", "*", trailing=realname)


def pong(token: str) -> str:
    return build_line("PONG", trailing=token)


def join(channel: str, key: str | None = None) -> str:
    if key:
        return build_line("JOIN", channel, key)
    return build_line("JOIN", channel)


def part(channel: str, reason: str | None = None) -> str:
    if reason:
        return build_line("PART", channel, trailing=reason)
    return build_line("PART", channel)


def privmsg(target: str, text: str) -> str:
    return build_line("PRIVMSG", target, trailing=text)


def action(target: str, text: str) -> str:
    return privmsg(target, wrap_action(text))


def quit_(reason: str) -> str:
    return build_line("QUIT", trailing=reason)


def kick(channel: str, target: str, reason: str = "") -> str:
    if reason:
        return build_line("KICK", channel, target, trailing=reason)
    return build_line("KICK", channel, target)


def mode(channel: str, modes: str, *args: str | None) -> str:
    # one middle parameter per flag argument, in flag order
    return build_line("MODE", channel, modes, *(a for a in args if a))


def ban_mask(target_nick: str) -> str:
    return f"{target_nick}!*@*"


def raw(text: str) -> str:
    """A user-typed command line, sent as-is apart from CR/LF removal."""
    return _clean(text).strip()
