# SPDX-License-Identifier: MIT
"""Configuration reader for notesync.

Settings live in a single JSON document (settings.json in the config
directory, or the file named by NOTESYNC_SETTINGS). Keys are read with
dot-notation, e.g. "notesync.pollIntervalMs".
"""
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from notesync.models import (
    DEFAULT_AUTOSAVE_INTERVAL_MS,
    DEFAULT_IDLE_THRESHOLD_MS,
    DEFAULT_POLL_INTERVAL_MS,
    RESTORE_BLACKOUT_MS,
    SESSION_SAVE_DEBOUNCE_MS,
)
from notesync.paths import PathResolver


def get_settings_path() -> Path:
    """Get path to settings.json.

    Returns:
        Path to settings.json, respecting NOTESYNC_SETTINGS env var.
    """
    custom = os.environ.get("NOTESYNC_SETTINGS")
    if custom:
        return Path(custom)
    return PathResolver.config_dir() / "settings.json"


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value by dot-notation key.

    Args:
        key: Dot-notation key like "notesync.debugLevel"
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    settings_path = get_settings_path()

    if not settings_path.exists():
        return default

    try:
        with open(settings_path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError):
        return default

    # Navigate dot-notation path
    parts = key.split(".")
    current = data
    for part in parts:
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]

    return current


def get_bool_setting(key: str, default: bool = False) -> bool:
    """Get a boolean setting.

    Args:
        key: Dot-notation key
        default: Default value if key not found

    Returns:
        Boolean value. Converts string "true", "1", "yes" to True.
    """
    value = get_setting(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def get_int_setting(key: str, default: int = 0, minimum: int = 0) -> int:
    """Get an integer setting.

    Args:
        key: Dot-notation key
        default: Default value if key not found or invalid
        minimum: Values below this fall back to the default

    Returns:
        Integer value or default if conversion fails.
    """
    value = get_setting(key, default)
    if isinstance(value, bool):
        return default
    try:
        result = int(value)
    except (TypeError, ValueError):
        return default
    return result if result >= minimum else default


@dataclass(frozen=True)
class SyncSettings:
    """Timing knobs for the engine, all in milliseconds."""

    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    idle_threshold_ms: int = DEFAULT_IDLE_THRESHOLD_MS
    autosave_interval_ms: int = DEFAULT_AUTOSAVE_INTERVAL_MS
    autosave_enabled: bool = True
    session_debounce_ms: int = SESSION_SAVE_DEBOUNCE_MS
    restore_blackout_ms: int = RESTORE_BLACKOUT_MS

    @classmethod
    def load(cls) -> "SyncSettings":
        """Read settings.json, falling back to defaults key by key."""
        return cls(
            poll_interval_ms=get_int_setting(
                "notesync.pollIntervalMs", DEFAULT_POLL_INTERVAL_MS, minimum=100
            ),
            idle_threshold_ms=get_int_setting(
                "notesync.idleThresholdMs", DEFAULT_IDLE_THRESHOLD_MS
            ),
            autosave_interval_ms=get_int_setting(
                "notesync.autosaveIntervalMs", DEFAULT_AUTOSAVE_INTERVAL_MS, minimum=100
            ),
            autosave_enabled=get_bool_setting("notesync.autosaveEnabled", True),
            session_debounce_ms=get_int_setting(
                "notesync.sessionDebounceMs", SESSION_SAVE_DEBOUNCE_MS
            ),
            restore_blackout_ms=get_int_setting(
                "notesync.restoreBlackoutMs", RESTORE_BLACKOUT_MS
            ),
        )
