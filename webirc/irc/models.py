"""Shared IRC session models."""

from __future__ import annotations

from enum import Enum, auto


class ConnectionPhase(Enum):
    IDLE = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    DISCONNECTED = auto()


class Status(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
