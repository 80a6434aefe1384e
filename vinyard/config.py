"""Persistent JSON config helpers.

Stores editor tunables such as tab stop, quit confirmations, and key timeouts.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "vinyard"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


@dataclass(frozen=True)
class EditorConfig:
    tab_stop: int = 2
    quit_times: int = 2
    message_ttl_seconds: float = 5.0
    escape_timeout_ms: int = 100
    leader_timeout_ms: int = 1000
    poll_timeout_ms: int = 100


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _positive_int(value: object, default: int) -> int:
    """Accept strictly positive ints; booleans and other types use ``default``."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def load_editor_config() -> EditorConfig:
    """Build an ``EditorConfig`` from the config file, key by key."""
    data = load_config()
    defaults = EditorConfig()
    return EditorConfig(
        tab_stop=_positive_int(data.get("tab_stop"), defaults.tab_stop),
        quit_times=_positive_int(data.get("quit_times"), defaults.quit_times),
        message_ttl_seconds=_positive_float(data.get("message_ttl_seconds"), defaults.message_ttl_seconds),
        escape_timeout_ms=_positive_int(data.get("escape_timeout_ms"), defaults.escape_timeout_ms),
        leader_timeout_ms=_positive_int(data.get("leader_timeout_ms"), defaults.leader_timeout_ms),
        poll_timeout_ms=_positive_int(data.get("poll_timeout_ms"), defaults.poll_timeout_ms),
    )

