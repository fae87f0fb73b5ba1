"""Read-only JSON settings.

Settings live in ``config.json`` under the platform config directory. All
access is defensive: a missing or malformed file falls back to defaults, and
the app never writes the file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "mqtui"
CONFIG_FILENAME = "config.json"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))
CONFIG_PATH = CONFIG_DIR / CONFIG_FILENAME

DEFAULT_STYLE = "monokai"
DEFAULT_TICK_MS = 100


@dataclass(frozen=True)
class Settings:
    """Resolved settings after file values are validated."""

    theme: str | None = None
    style: str = DEFAULT_STYLE
    tick_ms: int = DEFAULT_TICK_MS


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the settings JSON object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = CONFIG_PATH if path is None else path
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_name(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _coerce_positive_int(value: object) -> int | None:
    """Accept only real positive integers; booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def load_settings(path: Path | None = None) -> Settings:
    """Return validated settings, using defaults for invalid values."""
    data = load_config(path)
    return Settings(
        theme=_coerce_name(data.get("theme")),
        style=_coerce_name(data.get("style")) or DEFAULT_STYLE,
        tick_ms=_coerce_positive_int(data.get("tick_ms")) or DEFAULT_TICK_MS,
    )


__all__ = [
    "APP_NAME",
    "CONFIG_DIR",
    "CONFIG_PATH",
    "DEFAULT_STYLE",
    "DEFAULT_TICK_MS",
    "Settings",
    "load_config",
    "load_settings",
]
