#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
External Change Reconciler.

Polls the open file's metadata and, when another process has modified it,
decides whether to reload it into the editor. The rule is "last edit wins":
local edits newer than the external change keep the editor untouched,
otherwise the file is re-read and swapped in with cursor and scroll kept.

Per tick:

    Idle -> Polling -> (Skip | Reconciling) -> Idle

A tick only does work when a file is open, polling is not paused and the
user has been idle for longer than the idle threshold. Only one
reconciliation may be in flight; overlapping attempts are dropped.
"""

from typing import Any, Callable, Optional

from notesync.activity import ActivityTracker
from notesync.clock import Clock, now_ms
from notesync.debug_logger import get_logger
from notesync.editor_adapter import EditorStateAdapter
from notesync.errors import FileGoneError, SyncError, classify_os_error
from notesync.models import (
    DEFAULT_IDLE_THRESHOLD_MS,
    DEFAULT_POLL_INTERVAL_MS,
    ReconcileOutcome,
    SyncState,
)
from notesync.state import AppState
from notesync.timers import IntervalTimer


def _noop(*_args: Any) -> None:
    return None


class ExternalChangeReconciler:
    """Detects and resolves on-disk changes to the open file."""

    def __init__(
        self,
        state: AppState,
        adapter: EditorStateAdapter,
        tracker: Optional[ActivityTracker] = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        idle_threshold_ms: int = DEFAULT_IDLE_THRESHOLD_MS,
        clock: Optional[Clock] = None,
        on_file_reloaded: Optional[Callable[[str], None]] = None,
        on_sync_error: Optional[Callable[[SyncError], None]] = None,
        on_sync_start: Optional[Callable[[], None]] = None,
        on_sync_end: Optional[Callable[[], None]] = None,
    ):
        self.state = state
        self.adapter = adapter
        self._clock = clock or now_ms
        self.tracker = tracker or ActivityTracker(self._clock)
        self.idle_threshold_ms = idle_threshold_ms
        self.sync = SyncState(last_user_activity=self.tracker.last_activity)
        self.on_file_reloaded = on_file_reloaded if on_file_reloaded is not None else _noop
        self.on_sync_error = on_sync_error if on_sync_error is not None else _noop
        self.on_sync_start = on_sync_start if on_sync_start is not None else _noop
        self.on_sync_end = on_sync_end if on_sync_end is not None else _noop
        self._timer = IntervalTimer(self.check_for_external_changes, poll_interval_ms,
                                    name="file_sync")
        self._busy = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def poll_interval_ms(self) -> int:
        return self._timer.interval_ms

    @property
    def is_running(self) -> bool:
        return self._timer.is_running

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def paused(self) -> bool:
        return self.sync.paused

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def pause(self) -> None:
        """Suppress polling (e.g. while a file picker is open)."""
        self.sync.paused = True

    def resume(self) -> None:
        self.sync.paused = False

    def set_poll_interval(self, interval_ms: int) -> None:
        self._timer.set_interval(interval_ms)

    def set_idle_threshold(self, threshold_ms: int) -> None:
        self.idle_threshold_ms = threshold_ms

    def reset(self) -> None:
        """Stop polling and forget every timestamp."""
        self.stop()
        self.tracker.record_activity()
        self.sync = SyncState(last_user_activity=self.tracker.last_activity)
        self._busy = False

    # ------------------------------------------------------------------
    # Notifications from the editor and the save path
    # ------------------------------------------------------------------

    def record_activity(self) -> None:
        self.tracker.record_activity()
        self.sync.last_user_activity = self.tracker.last_activity

    def note_local_edit(self, timestamp: Optional[int] = None) -> None:
        """The in-memory document just changed."""
        self.record_activity()
        self.sync.last_modified_local = self._clock() if timestamp is None else timestamp

    def note_disk_write(self, timestamp: int) -> None:
        """We just wrote the file; its new mtime is ours, not external."""
        self.sync.last_known_modified = timestamp
        self.sync.last_modified_local = None

    def note_file_loaded(self, timestamp: Optional[int]) -> None:
        """A file was (re)opened from disk with the given mtime."""
        self.sync.last_known_modified = timestamp
        self.sync.last_modified_local = None

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def should_poll(self) -> bool:
        return (
            self.state.has_open_file
            and not self.sync.paused
            and self.tracker.is_idle(self.idle_threshold_ms)
        )

    async def check_for_external_changes(self) -> Optional[ReconcileOutcome]:
        """Run one poll tick.

        Returns:
            The reconciliation outcome, FAILED on an I/O error, or None when
            the guard failed or nothing changed on disk.
        """
        if not self.should_poll():
            return None

        file = self.state.document.file
        try:
            metadata = await file.get_metadata()
        except (SyncError, OSError) as e:
            self._report(file, e)
            return ReconcileOutcome.FAILED

        last_known = self.sync.last_known_modified
        get_logger().sync_check(file.name, metadata.last_modified, last_known)
        if last_known is None or metadata.last_modified <= last_known:
            return None
        if self.state.document.file is not file:
            # Navigation moved on while we were waiting for metadata
            return None
        return await self.reconcile(metadata.last_modified, file)

    async def reconcile(self, external_modified: int, file: Any = None) -> ReconcileOutcome:
        """Resolve an external change with last-edit-wins.

        Args:
            external_modified: On-disk modification time (epoch ms)
            file: The handle that was polled; defaults to the open file

        Returns:
            RELOADED, SKIPPED (local edits are newer), BUSY (another
            reconciliation is running), STALE (the open file changed under
            us) or FAILED.
        """
        if self._busy:
            get_logger().sync_skipped(getattr(file, "name", ""), "busy")
            return ReconcileOutcome.BUSY

        local = self.sync.last_modified_local
        if local is not None and local > external_modified:
            get_logger().sync_skipped(
                self.state.document.filename, "local_newer",
                local_modified=local, external_modified=external_modified,
            )
            return ReconcileOutcome.SKIPPED

        file = file if file is not None else self.state.document.file
        if file is None:
            return ReconcileOutcome.STALE

        self._busy = True
        self.on_sync_start()
        try:
            snapshot = self.adapter.capture()
            fresh_content = await file.read()

            if self.state.document.file is not file:
                get_logger().sync_skipped(file.name, "file_changed_during_read")
                return ReconcileOutcome.STALE
            local = self.sync.last_modified_local
            if local is not None and local > external_modified:
                get_logger().sync_skipped(
                    file.name, "local_edit_during_read",
                    local_modified=local, external_modified=external_modified,
                )
                return ReconcileOutcome.SKIPPED

            await self.adapter.replace_content(fresh_content, snapshot)
            self.state.mark_saved(fresh_content)
            self.sync.last_known_modified = external_modified
            self.sync.last_modified_local = None

            get_logger().file_reloaded(file.name, external_modified, len(fresh_content))
            self.on_file_reloaded(fresh_content)
            return ReconcileOutcome.RELOADED
        except (SyncError, OSError) as e:
            self._report(file, e)
            return ReconcileOutcome.FAILED
        finally:
            self._busy = False
            self.on_sync_end()

    def _report(self, file: Any, error: BaseException) -> None:
        error = classify_os_error(error, str(getattr(file, "path", "")) or None)
        permanent = isinstance(error, FileGoneError)
        get_logger().sync_error(getattr(file, "name", ""), error, permanent)
        if permanent:
            # No retry for a file that is gone or no longer ours to read
            self.stop()
        self.on_sync_error(error)
