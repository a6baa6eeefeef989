"""Configuration package exports."""

from .loader import default_config_path, load_raw, load_server_configs, select_server
from .model import SessionConfig

__all__ = [
    "SessionConfig",
    "default_config_path",
    "load_raw",
    "load_server_configs",
    "select_server",
]
