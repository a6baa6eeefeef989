"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..constants import CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE
from ..errors import ConfigError
from ..logs.logger import logger
from .model import SessionConfig


def default_config_path() -> str:
    return os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)


def load_raw(path: str | os.PathLike[str]) -> list[dict[str, Any]]:
    """Load raw server entries from a JSON file.

    Accepts a single server object, a list of them, or ``{"servers": [...]}``.

    Raises:
        ConfigError: If the file is missing, unreadable, or not one of the
            accepted shapes.
    """
    p = Path(path)
    try:
        with p.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"configuration file not found: {p}", data={"path": str(p)}) from e
    except (OSError, ValueError) as e:
        raise ConfigError(f"cannot read {p}: {e}", data={"path": str(p)}) from e

    if isinstance(data, dict) and "servers" in data:
        data = data["servers"]
    elif isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
        raise ConfigError(
            f"{p}: expected a server object or a list of them", data={"path": str(p)}
        )
    return data


def load_server_configs(path: str | os.PathLike[str] | None = None) -> list[SessionConfig]:
    """Load and validate every server entry in the configuration file.

    Raises:
        ConfigError: On any unreadable file or invalid entry; the message names
            the offending entry index.
    """
    path = path if path is not None else default_config_path()
    entries = load_raw(path)
    if not entries:
        raise ConfigError(f"{path}: no servers configured", data={"path": str(path)})
    configs: list[SessionConfig] = []
    for index, entry in enumerate(entries):
        try:
            configs.append(SessionConfig.from_dict(entry))
        except ValidationError as e:
            raise ConfigError(
                f"{path}: server #{index} is invalid: {e.errors()[0]['msg']}",
                data={"path": str(path), "index": index},
            ) from e
    logger.log_event(
        "app", "config_loaded", level=logging.DEBUG, count=len(configs), path=str(path)
    )
    return configs


def select_server(configs: list[SessionConfig], name: str | None) -> SessionConfig | None:
    if not name:
        return configs[0] if configs else None
    for cfg in configs:
        if cfg.name == name or cfg.host == name:
            return cfg
    return None
