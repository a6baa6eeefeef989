"""Internal error hierarchy.

These exceptions give semantic categories to failures that cross module
boundaries. Raw aiohttp / OS / JSON errors are wrapped at the boundary where
they occur and never surface to session code unwrapped.

Classes:
  InternalError   – Base for all internal errors.
  TransportError  – WebSocket open/send/receive failures.
  ConfigError     – Unreadable or invalid configuration.

Protocol-level rejections from the server are not exceptions; the session
turns them into events.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base for client errors; ``data`` carries structured context for logs.

    Args:
        message: Short category shown to users.
        data: Optional context (url, underlying error text, file path).
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        self.data = dict(data) if data else {}


class TransportError(InternalError):
    """Raised by a transport when the underlying socket fails.

    The message is a short human-readable category ("Connection Failed",
    "WebSocket Error") suitable for an ``error`` event.
    """


class ConfigError(InternalError):
    """Raised when the configuration file cannot be loaded or validated."""


__all__ = [
    "InternalError",
    "TransportError",
    "ConfigError",
]
