"""IRC line parsing utilities."""

from __future__ import annotations

from dataclasses import dataclass

CHANNEL_PREFIXES = "#&+!"
CTCP_DELIM = "\x01"


@dataclass(frozen=True, slots=True)
class ParsedLine:
    origin: str
    command: str
    parameters: tuple[str, ...]


def parse_line(raw: str) -> ParsedLine:
    """Split one protocol line into origin, command and parameters.

    Never raises. Runs of spaces are not coalesced: every extra space yields
    an empty-string parameter. A parameter starting with ``:`` is the trailing
    parameter; it takes the remainder of the line verbatim and ends scanning.
    A prefix with no following space is treated as origin-only (empty command).
    """
    origin = ""
    rest = raw

    if rest.startswith(":"):
        space = rest.find(" ")
        if space == -1:
            return ParsedLine(origin=rest[1:], command="", parameters=())
        origin = rest[1:space]
        rest = rest[space + 1 :]

    space = rest.find(" ")
    if space == -1:
        return ParsedLine(origin=origin, command=rest.upper(), parameters=())
    command = rest[:space].upper()
    rest = rest[space + 1 :]

    params: list[str] = []
    while rest:
        if rest.startswith(":"):
            params.append(rest[1:])
            break
        space = rest.find(" ")
        if space == -1:
            params.append(rest)
            break
        params.append(rest[:space])
        rest = rest[space + 1 :]

    return ParsedLine(origin=origin, command=command, parameters=tuple(params))


def nick_from_origin(origin: str) -> str:
    # nick!user@host -> nick; server names pass through whole
    return origin.split("!", 1)[0]


def is_channel(name: str) -> bool:
    return bool(name) and name[0] in CHANNEL_PREFIXES


def unwrap_action(text: str) -> str | None:
    """Return the body of a CTCP ACTION (``/me``) message, else None."""
    if not text.startswith(CTCP_DELIM + "ACTION"):
        return None
    body = text[len(CTCP_DELIM + "ACTION") :]
    if body and body[0] != " " and body[0] != CTCP_DELIM:
        return None
    if body.endswith(CTCP_DELIM):
        body = body[:-1]
    return body[1:] if body.startswith(" ") else body


def wrap_action(text: str) -> str:
    return f"{CTCP_DELIM}ACTION {text}{CTCP_DELIM}"
