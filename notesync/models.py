#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Data models for the sync engine.

Contains the dataclasses, enums, and constants shared by the reconciler,
session store, navigation history and the workspace controller.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


# =============================================================================
# Constants
# =============================================================================

DEFAULT_POLL_INTERVAL_MS = 2500
DEFAULT_IDLE_THRESHOLD_MS = 4000
DEFAULT_AUTOSAVE_INTERVAL_MS = 2000
SESSION_SAVE_DEBOUNCE_MS = 2000
RESTORE_BLACKOUT_MS = 1000  # Scroll-into-view settles well inside this

SESSION_FILE_NAME = ".session_properties.HN"
SESSION_VERSION = "1.0"

MARKDOWN_EXTENSIONS = (".md", ".markdown")


# =============================================================================
# Enums
# =============================================================================


class EditorMode(str, Enum):
    """How the open document is rendered."""
    SOURCE = "source"
    RICH = "rich"

    @classmethod
    def parse(cls, value: Any, default: "EditorMode" = None) -> "EditorMode":
        """Parse a stored mode string, accepting the legacy 'wysiwyg' alias."""
        if isinstance(value, EditorMode):
            return value
        if value == "wysiwyg":
            return cls.RICH
        try:
            return cls(value)
        except ValueError:
            return default if default is not None else cls.SOURCE


class ReconcileOutcome(str, Enum):
    """Result of a single reconciliation attempt."""
    RELOADED = "reloaded"
    SKIPPED = "skipped"  # Local edits are newer than the external change
    BUSY = "busy"  # Another reconciliation was already in flight
    STALE = "stale"  # The open file changed while we were reading
    FAILED = "failed"


def is_markdown_file(filename: Optional[str]) -> bool:
    """Markdown documents are the only ones offering rich mode."""
    if not filename:
        return False
    return filename.lower().endswith(MARKDOWN_EXTENSIONS)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class FileMetadata:
    """On-disk facts about a file, as reported by the file handle."""
    last_modified: int
    size: int


@dataclass(frozen=True)
class EditorSnapshot:
    """Cursor, scroll and mode captured from the active editor.

    Immutable once captured. A fresh snapshot is taken every time state must
    survive an operation that destroys and recreates the editor.
    """
    cursor_line: int = 0
    cursor_column: int = 0
    scroll_top: float = 0
    scroll_left: float = 0
    mode: EditorMode = EditorMode.SOURCE

    @classmethod
    def create(
        cls,
        cursor_line: Any = 0,
        cursor_column: Any = 0,
        scroll_top: Any = 0,
        scroll_left: Any = 0,
        mode: Any = EditorMode.SOURCE,
    ) -> "EditorSnapshot":
        """Build a snapshot from loosely-typed values, clamping negatives to 0."""
        return cls(
            cursor_line=max(0, _as_int(cursor_line)),
            cursor_column=max(0, _as_int(cursor_column)),
            scroll_top=max(0, _as_number(scroll_top)),
            scroll_left=max(0, _as_number(scroll_left)),
            mode=EditorMode.parse(mode),
        )

    def with_mode(self, mode: EditorMode) -> "EditorSnapshot":
        return replace(self, mode=mode)


@dataclass
class SyncState:
    """Timestamps the reconciler compares on every poll.

    last_known_modified only moves after a successful read from or write to
    disk; last_modified_local only moves on in-memory edits and is cleared
    whenever content is reloaded from or written to disk.
    """
    last_known_modified: Optional[int] = None
    last_modified_local: Optional[int] = None
    last_user_activity: int = 0
    paused: bool = False


@dataclass(frozen=True)
class LastOpenFile:
    """The file a folder's session was last looking at."""
    path: str
    snapshot: EditorSnapshot = field(default_factory=EditorSnapshot)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "cursorLine": self.snapshot.cursor_line,
            "cursorColumn": self.snapshot.cursor_column,
            "scrollTop": self.snapshot.scroll_top,
            "scrollLeft": self.snapshot.scroll_left,
            "mode": self.snapshot.mode.value,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["LastOpenFile"]:
        if not isinstance(data, dict):
            return None
        path = data.get("path")
        if not isinstance(path, str) or not path.strip("/"):
            return None
        snapshot = EditorSnapshot.create(
            cursor_line=data.get("cursorLine", 0),
            cursor_column=data.get("cursorColumn", 0),
            scroll_top=data.get("scrollTop", 0),
            scroll_left=data.get("scrollLeft", 0),
            # Older records wrote "editorMode"
            mode=data.get("mode", data.get("editorMode", EditorMode.SOURCE.value)),
        )
        return cls(path=path, snapshot=snapshot)


@dataclass
class SessionRecord:
    """Sidecar record describing one root folder's editing session."""
    folder_name: str
    version: str = SESSION_VERSION
    last_modified_timestamp: int = 0
    last_open_file: Optional[LastOpenFile] = None
    # Keys we do not understand (e.g. comments) survive a rewrite untouched
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "version": self.version,
            "folderName": self.folder_name,
            "lastModifiedTimestamp": self.last_modified_timestamp,
            "lastOpenFile": self.last_open_file.to_dict() if self.last_open_file else None,
        })
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Optional["SessionRecord"]:
        """Parse a decoded sidecar document, or None if it is not one."""
        if not isinstance(data, dict):
            return None
        folder_name = data.get("folderName")
        if not isinstance(folder_name, str):
            return None

        if "lastOpenFile" in data:
            raw_last = data.get("lastOpenFile")
        else:
            # Legacy layout nested the file under "session"
            session = data.get("session")
            raw_last = session.get("lastOpenFile") if isinstance(session, dict) else None

        timestamp = data.get("lastModifiedTimestamp", data.get("lastModified", 0))
        known = {"version", "folderName", "lastModifiedTimestamp", "lastModified",
                 "lastOpenFile", "session"}
        return cls(
            folder_name=folder_name,
            version=str(data.get("version", SESSION_VERSION)),
            last_modified_timestamp=_as_int(timestamp),
            last_open_file=LastOpenFile.from_dict(raw_last),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True)
class HistoryEntry:
    """One visited location plus the editor state needed to resume it."""
    path: Tuple[str, ...]
    directory: Any
    file: Any = None
    filename: str = ""
    snapshot: Optional[EditorSnapshot] = None
    folders: Tuple[Any, ...] = ()  # Directory handles, root first

    @property
    def has_file(self) -> bool:
        return self.file is not None

    def with_snapshot(self, snapshot: Optional[EditorSnapshot]) -> "HistoryEntry":
        return replace(self, snapshot=snapshot)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return value if isinstance(value, (int, float)) else number
