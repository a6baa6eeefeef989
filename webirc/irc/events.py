"""Typed session events and the listener registry.

Every event kind is a frozen dataclass with a class-level ``name`` (the key
UIs subscribe with). Payloads are complete on their own so a consumer never
has to go back to the raw line.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

from ..logs.logger import logger
from .modes import ModeChange
from .models import Status


@dataclass(frozen=True, slots=True)
class Event:
    name: ClassVar[str] = ""


@dataclass(frozen=True, slots=True)
class StatusEvent(Event):
    name: ClassVar[str] = "status"
    status: Status


@dataclass(frozen=True, slots=True)
class ErrorEvent(Event):
    name: ClassVar[str] = "error"
    message: str


@dataclass(frozen=True, slots=True)
class RegisteredEvent(Event):
    name: ClassVar[str] = "registered"
    nickname: str


@dataclass(frozen=True, slots=True)
class JoinEvent(Event):
    name: ClassVar[str] = "join"
    nick: str
    channel: str


@dataclass(frozen=True, slots=True)
class PartEvent(Event):
    name: ClassVar[str] = "part"
    nick: str
    channel: str
    reason: str = ""


@dataclass(frozen=True, slots=True)
class QuitEvent(Event):
    name: ClassVar[str] = "quit"
    nick: str
    reason: str = ""


@dataclass(frozen=True, slots=True)
class KickEvent(Event):
    name: ClassVar[str] = "kick"
    channel: str
    kicked_nick: str
    actor: str
    reason: str = ""


@dataclass(frozen=True, slots=True)
class ModeEvent(Event):
    name: ClassVar[str] = "mode"
    channel: str
    actor: str
    modes: str
    args: tuple[str, ...] = ()
    changes: tuple[ModeChange, ...] = ()


@dataclass(frozen=True, slots=True)
class NamesEvent(Event):
    name: ClassVar[str] = "names"
    channel: str
    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TopicEvent(Event):
    name: ClassVar[str] = "topic"
    channel: str
    topic: str


@dataclass(frozen=True, slots=True)
class PrivmsgEvent(Event):
    name: ClassVar[str] = "privmsg"
    target: str
    sender: str
    content: str
    is_self: bool = False
    is_action: bool = False


@dataclass(frozen=True, slots=True)
class NoticeEvent(Event):
    name: ClassVar[str] = "notice"
    target: str
    sender: str
    content: str


@dataclass(frozen=True, slots=True)
class NickEvent(Event):
    name: ClassVar[str] = "nick"
    old_nick: str
    new_nick: str
    is_self: bool = False


@dataclass(frozen=True, slots=True)
class RawEvent(Event):
    name: ClassVar[str] = "raw"
    line: str


@dataclass(frozen=True, slots=True)
class SystemEvent(Event):
    name: ClassVar[str] = "system"
    message: str


EVENT_TYPES: dict[str, type[Event]] = {
    cls.name: cls
    for cls in (
        StatusEvent,
        ErrorEvent,
        RegisteredEvent,
        JoinEvent,
        PartEvent,
        QuitEvent,
        KickEvent,
        ModeEvent,
        NamesEvent,
        TopicEvent,
        PrivmsgEvent,
        NoticeEvent,
        NickEvent,
        RawEvent,
        SystemEvent,
    )
}

E = TypeVar("E", bound=Event)
Listener = Callable[[Any], Any]


def resolve_event_type(kind: type[Event] | str) -> type[Event]:
    if isinstance(kind, str):
        try:
            return EVENT_TYPES[kind]
        except KeyError:
            raise ValueError(f"unknown event name: {kind!r}") from None
    if kind not in EVENT_TYPES.values():
        raise ValueError(f"unknown event type: {kind!r}")
    return kind


class EventEmitter:
    """Observer registry keyed by event type.

    Listeners run synchronously in registration order. A listener that raises
    is logged and skipped; the rest still run. A listener returning an
    awaitable has it scheduled on the running loop.
    """

    def __init__(self, owner: str | None = None) -> None:
        self.owner = owner
        self._listeners: dict[type[Event], list[Listener]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    def on(self, kind: type[E] | str, listener: Callable[[E], Any]) -> Callable[[E], Any]:
        event_type = resolve_event_type(kind)
        self._listeners.setdefault(event_type, []).append(listener)
        return listener

    def off(self, kind: type[Event] | str, listener: Listener) -> bool:
        listeners = self._listeners.get(resolve_event_type(kind), [])
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def listener_count(self, kind: type[Event] | str) -> int:
        return len(self._listeners.get(resolve_event_type(kind), []))

    def emit(self, event: Event) -> None:
        # copy so listeners may (un)subscribe while being notified
        for listener in list(self._listeners.get(type(event), ())):
            try:
                result = listener(event)
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "events",
                    "listener_error",
                    level=logging.ERROR,
                    nick=self.owner,
                    event=event.name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue
            if inspect.isawaitable(result):
                self._schedule(event, result)

    def _schedule(self, event: Event, awaitable: Awaitable[Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.log_event(
                "events",
                "listener_no_loop",
                level=logging.WARNING,
                nick=self.owner,
                event=event.name,
            )
            return
        task = loop.create_task(self._run_async_listener(event, awaitable))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_async_listener(self, event: Event, awaitable: Awaitable[Any]) -> None:
        try:
            await awaitable
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "events",
                "listener_error",
                level=logging.ERROR,
                nick=self.owner,
                event=event.name,
                error=str(e),
                error_type=type(e).__name__,
            )
