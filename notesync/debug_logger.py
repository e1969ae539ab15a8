#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Debug logger for notesync.

Writes one JSON object per line to <state dir>/debug.log. The level comes
from NOTESYNC_DEBUG (or the notesync.debugLevel setting):

- 0: disabled
- 1: sync decisions, reloads, session writes, errors (default)
- 2: also skipped saves, history moves, autosave ticks
- 3: also every poll tick

Logging must never break the engine, so every write swallows OSError.
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from notesync.config import get_int_setting
from notesync.paths import PathResolver

MAX_MESSAGE_LEN = 500
DEFAULT_LEVEL = 1


def _resolve_level() -> int:
    env_level = os.environ.get("NOTESYNC_DEBUG")
    if env_level is not None:
        try:
            return max(0, int(env_level))
        except ValueError:
            return DEFAULT_LEVEL
    return get_int_setting("notesync.debugLevel", DEFAULT_LEVEL)


class DebugLogger:
    """Structured JSON-lines logger for sync events."""

    def __init__(self, log_path: Optional[Path] = None):
        self.level = _resolve_level()
        self.log_path = Path(log_path) if log_path else PathResolver.debug_log()
        self.folder: Optional[str] = None
        self.pid = os.getpid()

    def set_folder(self, folder: Optional[str]) -> None:
        """Tag subsequent events with the open root folder name."""
        self.folder = folder

    def _write(self, event: Dict[str, Any]) -> None:
        record = {
            "event": event.pop("event"),
            "level": event.pop("level", "info"),
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "pid": self.pid,
            "folder": self.folder,
        }
        record.update(event)
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a") as f:
                f.write(json.dumps(record, default=str) + "\n")
        except OSError:
            pass

    def _emit(self, min_level: int, event: str, **fields: Any) -> None:
        if self.level < min_level:
            return
        self._write({"event": event, **fields})

    # ------------------------------------------------------------------
    # Reconciler
    # ------------------------------------------------------------------

    def sync_check(self, filename: str, disk_modified: int, last_known: Optional[int]) -> None:
        self._emit(3, "sync_check", file=filename, disk_modified=disk_modified,
                   last_known=last_known)

    def file_reloaded(self, filename: str, external_modified: int, size: int) -> None:
        self._emit(1, "file_reloaded", file=filename, external_modified=external_modified,
                   size=size)

    def sync_skipped(self, filename: str, reason: str, **details: Any) -> None:
        self._emit(1, "sync_skipped", file=filename, reason=reason, **details)

    def sync_error(self, filename: str, error: BaseException, permanent: bool) -> None:
        self._emit(1, "sync_error", level="error", file=filename,
                   error_type=type(error).__name__,
                   message=str(error)[:MAX_MESSAGE_LEN], permanent=permanent)

    # ------------------------------------------------------------------
    # Session store
    # ------------------------------------------------------------------

    def session_saved(self, path: str, cursor_line: int, cursor_column: int, mode: str) -> None:
        self._emit(1, "session_saved", path=path, cursor_line=cursor_line,
                   cursor_column=cursor_column, mode=mode)

    def session_skipped(self, reason: str, **details: Any) -> None:
        self._emit(2, "session_skipped", reason=reason, **details)

    def session_restored(self, path: Optional[str], found: bool) -> None:
        self._emit(1, "session_restored", path=path, found=found)

    # ------------------------------------------------------------------
    # Navigation and autosave
    # ------------------------------------------------------------------

    def history_moved(self, action: str, index: int, length: int, target: str) -> None:
        self._emit(2, "history_moved", action=action, index=index, length=length,
                   target=target)

    def autosave(self, filename: str, saved: bool) -> None:
        self._emit(2, "autosave", file=filename, saved=saved)

    def unsaved_kept(self, path: Optional[str]) -> None:
        self._emit(1, "unsaved_kept", level="warning", path=path)

    def user_cancelled(self, op: str) -> None:
        self._emit(2, "user_cancelled", op=op)

    def error(self, op: str, err: Any) -> None:
        self._emit(1, "error", level="error", op=op, err=str(err)[:MAX_MESSAGE_LEN])


_logger: Optional[DebugLogger] = None


def get_logger() -> DebugLogger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = DebugLogger()
    return _logger


def reset_logger() -> None:
    """Forget the singleton so the next get_logger() re-reads the environment."""
    global _logger
    _logger = None
