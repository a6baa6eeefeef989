"""
Tunable constants for the web IRC client.

Every value below can be overridden by an environment variable of the same
name; unparsable overrides fall back to the default with a warning.
"""

import os
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T", int, float)


def _get_env_number(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        print(f"Warning: Invalid {cast.__name__} value for {name}='{raw}', using default {default}")
        return default


def _get_env_int(name: str, default: int) -> int:
    """Integer override for ``name``; ``default`` when unset or not an int."""
    return _get_env_number(name, default, int)


def _get_env_float(name: str, default: float) -> float:
    return _get_env_number(name, default, float)


def _get_env_str(name: str, default: str) -> str:
    return os.getenv(name) or default


# Transport
CONNECT_TIMEOUT = _get_env_float("CONNECT_TIMEOUT", 15.0)  # WebSocket handshake, seconds
DEFAULT_PORT = _get_env_int("DEFAULT_PORT", 6667)

# Nickname negotiation
NICK_COLLISION_SUFFIX = _get_env_str("NICK_COLLISION_SUFFIX", "_")  # appended on 433
MAX_NICK_RETRIES = _get_env_int("MAX_NICK_RETRIES", 0)  # 0 = keep trying

# Session
DEFAULT_QUIT_MESSAGE = _get_env_str("DEFAULT_QUIT_MESSAGE", "Web Client Disconnecting")

# Configuration file
CONFIG_FILE_ENV = "WEBIRC_CONF_FILE"
DEFAULT_CONFIG_FILE = "webirc.conf"
