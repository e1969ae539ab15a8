#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Session Persistence Store.

Each root folder carries a sidecar record (.session_properties.HN) naming
the file that was last open there, with its cursor, scroll and mode, so a
later visit can resume exactly where the user left off.

Writes are read-merge-write: only lastOpenFile and the timestamp change,
every other key in the record survives. Saves requested in a burst are
debounced into one trailing write, and saves landing inside the blackout
window right after a restore are dropped so the restore's own scroll
events cannot overwrite the record it was restored from.
"""

import json
from typing import Optional

from notesync.clock import Clock, now_ms
from notesync.debug_logger import get_logger
from notesync.errors import SyncError
from notesync.fs import DirectoryHandle
from notesync.models import (
    RESTORE_BLACKOUT_MS,
    SESSION_FILE_NAME,
    SESSION_SAVE_DEBOUNCE_MS,
    EditorMode,
    EditorSnapshot,
    LastOpenFile,
    SessionRecord,
)
from notesync.prefs import PreferenceStore
from notesync.state import AppState
from notesync.timers import Debouncer


class SessionStore:
    """Loads and saves per-folder session records."""

    def __init__(
        self,
        state: Optional[AppState] = None,
        prefs: Optional[PreferenceStore] = None,
        clock: Optional[Clock] = None,
        debounce_ms: int = SESSION_SAVE_DEBOUNCE_MS,
        blackout_ms: int = RESTORE_BLACKOUT_MS,
    ):
        self.state = state or AppState()
        self.prefs = prefs or PreferenceStore()
        self._clock = clock or now_ms
        self.blackout_ms = blackout_ms
        self._debounced = Debouncer(self.save, debounce_ms, name="session_save")

    @property
    def debounce_ms(self) -> int:
        return self._debounced.wait_ms

    @property
    def save_pending(self) -> bool:
        return self._debounced.pending

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    async def load(self, root: DirectoryHandle) -> Optional[SessionRecord]:
        """Read the root folder's session record.

        Returns:
            The parsed record, or None when it is missing, unreadable or
            malformed.
        """
        try:
            handle = await root.get_child(SESSION_FILE_NAME)
            raw = await handle.read()
        except (SyncError, OSError):
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            get_logger().session_skipped("malformed_record", folder=root.name, error=str(e))
            return None

        try:
            record = SessionRecord.from_dict(data)
        except (TypeError, ValueError, OverflowError) as e:
            get_logger().session_skipped("malformed_record", folder=root.name, error=str(e))
            return None
        if record is None:
            get_logger().session_skipped("malformed_record", folder=root.name)
        return record

    def create_empty(self, folder_name: str) -> SessionRecord:
        return SessionRecord(folder_name=folder_name, last_modified_timestamp=self._clock())

    async def ensure_session(self, root: DirectoryHandle) -> SessionRecord:
        """Load the record, writing an empty one the first time a folder is opened."""
        record = await self.load(root)
        if record is not None:
            return record
        record = self.create_empty(root.name)
        await self._write(root, record)
        return record

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def mark_restored(self) -> None:
        """Open the blackout window; call once a restore has been applied."""
        self.state.set_last_restoration_time(self._clock())

    def in_blackout(self) -> bool:
        restored_at = self.state.restore.last_restoration_time
        if not restored_at:
            return False
        return self._clock() - restored_at < self.blackout_ms

    async def save(
        self,
        root: DirectoryHandle,
        relative_path: Optional[str],
        snapshot: Optional[EditorSnapshot] = None,
    ) -> bool:
        """Persist the open file and its position into the root's record.

        Args:
            root: Root folder owning the record
            relative_path: Open file relative to root, or None for no file
            snapshot: Editor state for that file

        Returns:
            True when the record was written; False when the save was
            dropped by the blackout window or failed.
        """
        if self.in_blackout():
            elapsed = self._clock() - self.state.restore.last_restoration_time
            get_logger().session_skipped("restore_blackout", elapsed_ms=elapsed)
            return False

        record = await self.load(root) or self.create_empty(root.name)
        if relative_path:
            record.last_open_file = LastOpenFile(relative_path, snapshot or EditorSnapshot())
        else:
            record.last_open_file = None
        record.last_modified_timestamp = self._clock()

        if not await self._write(root, record):
            return False

        snap = record.last_open_file.snapshot if record.last_open_file else EditorSnapshot()
        get_logger().session_saved(relative_path or "", snap.cursor_line,
                                   snap.cursor_column, snap.mode.value)
        return True

    def request_save(
        self,
        root: DirectoryHandle,
        relative_path: Optional[str],
        snapshot: Optional[EditorSnapshot] = None,
    ) -> None:
        """Debounced save; a burst of requests writes once with the last arguments."""
        self._debounced(root, relative_path, snapshot)

    async def flush(self) -> None:
        await self._debounced.flush()

    def cancel(self) -> None:
        self._debounced.cancel()

    async def _write(self, root: DirectoryHandle, record: SessionRecord) -> bool:
        try:
            handle = await root.create_child(SESSION_FILE_NAME)
            await handle.write(json.dumps(record.to_dict(), indent=2))
        except (SyncError, OSError) as e:
            get_logger().error("session_write", e)
            return False
        return True

    # ------------------------------------------------------------------
    # Per-file mode preference
    # ------------------------------------------------------------------

    def remember_mode(self, filename: str, mode: EditorMode) -> None:
        self.prefs.set_mode(filename, mode)

    def preferred_mode(self, filename: str) -> Optional[EditorMode]:
        return self.prefs.get_mode(filename)
