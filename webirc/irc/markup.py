"""Inline formatting codes to safe HTML."""

from __future__ import annotations

BOLD = "\x02"
ITALIC = "\x1d"
UNDERLINE = "\x1f"
RESET = "\x0f"

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}

# toggle code -> tag name; order is the close order at reset / end of input
_TOGGLES = ((BOLD, "b"), (ITALIC, "i"), (UNDERLINE, "u"))
_TAG_FOR = dict(_TOGGLES)


def render_inline_markup(text: str) -> str:
    """Render bold/italic/underline/reset codes as balanced ``<b>/<i>/<u>`` tags.

    Control codes are recognised on the raw characters in the same pass that
    escapes the five HTML-unsafe characters, so an escape sequence can never
    be mistaken for a code. Tags left open are closed at the end in b, i, u
    order, so the output is always well formed.
    """
    open_tags = {"b": False, "i": False, "u": False}
    out: list[str] = []

    for ch in text:
        tag = _TAG_FOR.get(ch)
        if tag is not None:
            out.append(f"</{tag}>" if open_tags[tag] else f"<{tag}>")
            open_tags[tag] = not open_tags[tag]
        elif ch == RESET:
            out.append(_close_all(open_tags))
        else:
            out.append(_ESCAPES.get(ch, ch))

    out.append(_close_all(open_tags))
    return "".join(out)


def strip_inline_markup(text: str) -> str:
    """Drop the formatting codes, leaving plain text (used for console output)."""
    return text.translate({ord(c): None for c in (BOLD, ITALIC, UNDERLINE, RESET)})


def _close_all(open_tags: dict[str, bool]) -> str:
    closed = []
    for _, tag in _TOGGLES:
        if open_tags[tag]:
            closed.append(f"</{tag}>")
            open_tags[tag] = False
    return "".join(closed)
