"""Project logging package.

Contains internal logging utilities (event catalog + ClientLogger). Avoid
importing stdlib logging through this package name externally.
"""

from .event_catalog import EVENT_TEMPLATES, load_templates, reload_event_templates  # noqa: F401
from .logger import ClientLogger, logger  # noqa: F401

__all__ = [
    "ClientLogger",
    "EVENT_TEMPLATES",
    "load_templates",
    "logger",
    "reload_event_templates",
]
