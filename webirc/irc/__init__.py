"""IRC subsystem package.

Contains the line codec, inline markup renderer, mode walker, typed events,
outbound serializer, WebSocket transport, dispatcher and session engine.
"""

from .dispatcher import IRCDispatcher  # noqa: F401
from .events import (  # noqa: F401
    EVENT_TYPES,
    ErrorEvent,
    Event,
    EventEmitter,
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
    StatusEvent,
    SystemEvent,
    TopicEvent,
)
from .input import handle_input  # noqa: F401
from .markup import render_inline_markup, strip_inline_markup  # noqa: F401
from .models import ConnectionPhase, Status  # noqa: F401
from .modes import ModeChange, parse_mode_changes  # noqa: F401
from .parser import ParsedLine, nick_from_origin, parse_line  # noqa: F401
from .session import IRCSession  # noqa: F401
from .transport import Transport, WebSocketTransport  # noqa: F401

__all__ = [
    "ConnectionPhase",
    "EVENT_TYPES",
    "ErrorEvent",
    "Event",
    "EventEmitter",
    "IRCDispatcher",
    "IRCSession",
    "JoinEvent",
    "KickEvent",
    "ModeChange",
    "ModeEvent",
    "NamesEvent",
    "NickEvent",
    "NoticeEvent",
    "ParsedLine",
    "PartEvent",
    "PrivmsgEvent",
    "QuitEvent",
    "RawEvent",
    "RegisteredEvent",
    "Status",
    "StatusEvent",
    "SystemEvent",
    "TopicEvent",
    "Transport",
    "WebSocketTransport",
    "handle_input",
    "nick_from_origin",
    "parse_line",
    "parse_mode_changes",
    "render_inline_markup",
    "strip_inline_markup",
]
