"""Persistent JSON settings for the current-symbol tracker.

All access is defensive: malformed or missing config falls back to defaults
field by field.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..tags.config import (
    DEFAULT_CTAGS_COMMAND,
    DEFAULT_EXTRACT_TIMEOUT_SECONDS,
    DEFAULT_LANGUAGE,
    comment_marker_for,
)

logger = logging.getLogger(__name__)

APP_NAME = "caretscope"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_IDLE_DELAY_MS = 300


@dataclass(frozen=True)
class TrackerSettings:
    """User-tunable tracker behavior."""

    ctags_command: str = DEFAULT_CTAGS_COMMAND
    language: str = DEFAULT_LANGUAGE
    comment_marker: str = "#"
    idle_delay_ms: int = DEFAULT_IDLE_DELAY_MS
    extract_timeout_seconds: float = DEFAULT_EXTRACT_TIMEOUT_SECONDS


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _nonempty_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _positive_int(value: object) -> int | None:
    """Booleans and non-integers are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def _positive_float(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if value > 0 else None


def load_settings() -> TrackerSettings:
    """Build settings from persisted config, validating each key independently.

    ``comment_marker`` defaults to the configured language's marker.
    """
    data = load_config()
    language = _nonempty_str(data.get("language")) or DEFAULT_LANGUAGE
    comment_marker = data.get("comment_marker")
    if not isinstance(comment_marker, str) or not comment_marker.strip():
        comment_marker = comment_marker_for(language)
    return TrackerSettings(
        ctags_command=_nonempty_str(data.get("ctags_command")) or DEFAULT_CTAGS_COMMAND,
        language=language,
        comment_marker=comment_marker.strip(),
        idle_delay_ms=_positive_int(data.get("idle_delay_ms")) or DEFAULT_IDLE_DELAY_MS,
        extract_timeout_seconds=(
            _positive_float(data.get("extract_timeout_seconds")) or DEFAULT_EXTRACT_TIMEOUT_SECONDS
        ),
    )


def save_settings(settings: TrackerSettings) -> None:
    """Merge settings into the persisted config, keeping unrelated keys."""
    config = load_config()
    config.update(
        {
            "ctags_command": settings.ctags_command,
            "language": settings.language,
            "comment_marker": settings.comment_marker,
            "idle_delay_ms": int(settings.idle_delay_ms),
            "extract_timeout_seconds": float(settings.extract_timeout_seconds),
        }
    )
    save_config(config)
