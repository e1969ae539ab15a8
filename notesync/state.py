# SPDX-License-Identifier: MIT
"""State containers shared by the engine components.

One AppState instance is created per editor window and handed to every
component constructor. Mutation goes through the named setters below so the
reconciler, session store and navigation history all see the same state at
the start of each operation:

- DocumentState: the open file, its folder chain, dirty tracking
- NavigationState: the history stack and its index
- RestoreState: session-restore bookkeeping (blackout stamp)
- AppState: top-level container
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from notesync.models import HistoryEntry


@dataclass
class DocumentState:
    """Where the user is and what they have open."""

    root: Any = None  # Directory the session record belongs to
    folders: List[Any] = field(default_factory=list)  # root first, current dir last
    file: Any = None
    filename: str = ""
    dirty: bool = False
    original_content: str = ""  # Last content read from / written to disk

    @property
    def directory(self) -> Any:
        return self.folders[-1] if self.folders else None

    @property
    def path_names(self) -> Tuple[str, ...]:
        return tuple(folder.name for folder in self.folders)


@dataclass
class NavigationState:
    """Back/forward stack. historyIndex stays in [-1, len(entries) - 1]."""

    entries: List[HistoryEntry] = field(default_factory=list)
    index: int = -1
    replaying_native: bool = False  # Set while a host back/forward is replayed


@dataclass
class RestoreState:
    """Bookkeeping for the post-restore blackout window."""

    restoring_session: bool = False
    last_restoration_time: int = 0  # 0 means "never restored"


@dataclass
class AppState:
    """Top-level state container."""

    document: DocumentState = field(default_factory=DocumentState)
    navigation: NavigationState = field(default_factory=NavigationState)
    restore: RestoreState = field(default_factory=RestoreState)

    # ------------------------------------------------------------------
    # Document setters
    # ------------------------------------------------------------------

    @property
    def has_open_file(self) -> bool:
        return self.document.file is not None

    def set_root(self, root: Any) -> None:
        """Start a fresh folder session rooted at `root`."""
        self.document = DocumentState(root=root, folders=[root] if root is not None else [])
        self.navigation = NavigationState()
        self.restore = RestoreState()

    def set_location(self, folders: List[Any], file: Any = None, filename: str = "") -> None:
        self.document.folders = list(folders)
        self.document.file = file
        self.document.filename = filename if file is not None else ""
        self.document.dirty = False

    def set_file(self, file: Any, original_content: str) -> None:
        self.document.file = file
        self.document.filename = file.name
        self.document.original_content = original_content
        self.document.dirty = False

    def clear_file(self) -> None:
        self.document.file = None
        self.document.filename = ""
        self.document.original_content = ""
        self.document.dirty = False

    def mark_dirty(self, dirty: bool = True) -> None:
        self.document.dirty = dirty

    def mark_saved(self, content: str) -> None:
        self.document.original_content = content
        self.document.dirty = False

    def relative_file_path(self) -> Optional[str]:
        """Open file's path relative to the root folder, or None."""
        if self.document.file is None:
            return None
        parts = list(self.document.path_names[1:])
        parts.append(self.document.filename)
        return "/".join(parts)

    # ------------------------------------------------------------------
    # Restore setters
    # ------------------------------------------------------------------

    def set_restoring_session(self, value: bool) -> None:
        self.restore.restoring_session = value

    def set_last_restoration_time(self, timestamp: int) -> None:
        self.restore.last_restoration_time = timestamp
