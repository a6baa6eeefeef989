"""Human-readable text for logged events.

Templates live in ``event_templates.json`` next to this module, grouped as
``{"domain": {"action": "template with {fields}"}}``. They are flattened into
``EVENT_TEMPLATES`` keyed by ``(domain, action)``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")
LOAD_ERROR_KEY = ("app", "load_error")

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}


def _flatten(raw: Any) -> dict[tuple[str, str], str]:
    if not isinstance(raw, Mapping):
        raise ValueError("top level must be an object of domains")
    flat: dict[tuple[str, str], str] = {}
    for domain, actions in raw.items():
        if not isinstance(actions, Mapping):
            continue
        # anything that is not a string template is skipped, not fatal
        flat.update(
            ((domain, action), text)
            for action, text in actions.items()
            if isinstance(text, str)
        )
    return flat


def load_templates(path: Path | str | None = None) -> dict[tuple[str, str], str]:
    """Read and flatten a template file.

    A missing or unreadable file yields a catalog holding only an
    ``app/load_error`` entry describing the problem, so logging keeps working
    with derived text.
    """
    source = Path(path) if path is not None else TEMPLATES_PATH
    try:
        return _flatten(json.loads(source.read_text(encoding="utf-8")))
    except FileNotFoundError:
        return {LOAD_ERROR_KEY: f"Event templates file missing: {source.name}"}
    except (OSError, ValueError) as e:
        return {LOAD_ERROR_KEY: f"Failed to load event templates: {e}"[:200]}


def reload_event_templates(path: Path | str | None = None) -> None:
    """Replace the module catalog in place so imported references stay valid."""
    templates = load_templates(path)
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(templates)


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "load_templates", "reload_event_templates"]
