from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import DEFAULT_PORT, DEFAULT_QUIT_MESSAGE


def _normalize_channels(channels: list[str] | tuple[str, ...] | Any) -> list[str]:
    """Strip channel names, drop empties and duplicates, keep listed order.

    Unlike nicknames, channel names keep their prefix character and case
    because the auto-join order and spelling are sent to the server verbatim.
    """
    if not isinstance(channels, (list, tuple)):
        raise ValueError("channels must be a list")
    seen: set[str] = set()
    normalized: list[str] = []
    for ch in channels:
        if not isinstance(ch, str):
            continue
        stripped = ch.strip()
        if not stripped or stripped.lower() in seen:
            continue
        seen.add(stripped.lower())
        normalized.append(stripped)
    return normalized


class SessionConfig(BaseModel):
    """Connection settings for one IRC server.

    Attributes:
        name: Display label used in logs and for ``--server`` selection.
        host: Hostname, or a full ``ws://``/``wss://`` URL.
        port: Port used when ``host`` is a bare hostname.
        tls: Use ``wss://`` when building the URL from ``host``/``port``.
        nick: Desired nickname.
        username: Ident sent in ``USER`` (defaults to the nick).
        realname: Real name sent in ``USER`` (defaults to the nick).
        password: Optional server password sent with ``PASS``.
        channels: Channels joined after registration, in order.
        quit_message: Reason sent with ``QUIT`` on disconnect.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    host: str = Field(min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    tls: bool = False
    nick: str = Field(min_length=1)
    username: str = ""
    realname: str = ""
    password: str | None = None
    channels: tuple[str, ...] = ()
    quit_message: str = DEFAULT_QUIT_MESSAGE

    @field_validator("host", "nick", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("nick")
    @classmethod
    def validate_nick(cls, v: str) -> str:
        if " " in v or v.startswith(":"):
            raise ValueError("nick must be a single token not starting with ':'")
        return v

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> tuple[str, ...]:
        return tuple(_normalize_channels(v))

    @field_validator("password", mode="before")
    @classmethod
    def empty_password_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="before")
    @classmethod
    def fill_identity_defaults(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        nick = str(data.get("nick") or "").strip()
        for key in ("username", "realname"):
            if not str(data.get(key) or "").strip():
                data[key] = nick
        if not data.get("name"):
            data["name"] = str(data.get("host") or "").strip()
        return data

    @property
    def url(self) -> str:
        """WebSocket URL for this server."""
        if self.host.startswith(("ws://", "wss://")):
            return self.host
        scheme = "wss" if self.tls else "ws"
        return f"{scheme}://{self.host}:{self.port}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionConfig:
        return cls.model_validate(dict(data))
