#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Workspace controller.

Ties the engine components to one editing window: the shared AppState, the
editor adapter, the external change reconciler, the session store, the
navigation history and the autosave trigger. Hosts (the Textual app, tests)
drive the workspace; the workspace drives the components.

Every folder/file navigation goes through the same three steps:

1. leave the current location (save a dirty file, or hold its text in
   memory when the save fails; refresh the history entry's snapshot)
2. materialize the new location (read the file, mount an editor)
3. record it (history push, debounced session save)
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from notesync.activity import ActivityTracker
from notesync.autosave import AutosaveTrigger
from notesync.clock import Clock, now_ms
from notesync.config import SyncSettings
from notesync.debug_logger import get_logger
from notesync.editor_adapter import EditorFactory, EditorStateAdapter
from notesync.errors import SyncError, UserCancelled
from notesync.fs import DirectoryHandle, FileHandle, open_file_by_path
from notesync.history import HostHistory, NavigationHistory
from notesync.location import build_query, parse_query
from notesync.models import EditorMode, EditorSnapshot, HistoryEntry, is_markdown_file
from notesync.prefs import PreferenceStore
from notesync.reconciler import ExternalChangeReconciler
from notesync.session import SessionStore
from notesync.state import AppState

# notify(message, severity) with severity in "information", "warning", "error"
Notifier = Callable[[str, str], None]

# Returns the chosen root folder; raises UserCancelled when dismissed
FolderPicker = Callable[[], Awaitable[DirectoryHandle]]


def _silent(_message: str, _severity: str) -> None:
    return None


class Workspace:
    """One root folder, one open file, and everything that keeps them in sync."""

    def __init__(
        self,
        editor_factory: EditorFactory,
        settings: Optional[SyncSettings] = None,
        prefs: Optional[PreferenceStore] = None,
        host_history: Optional[HostHistory] = None,
        clock: Optional[Clock] = None,
        notify: Optional[Notifier] = None,
    ):
        self.settings = settings or SyncSettings.load()
        self._clock = clock or now_ms
        self.notify = notify if notify is not None else _silent
        self.state = AppState()
        self.prefs = prefs or PreferenceStore()

        self.adapter = EditorStateAdapter(editor_factory)
        self.tracker = ActivityTracker(self._clock)
        self.reconciler = ExternalChangeReconciler(
            self.state,
            self.adapter,
            self.tracker,
            poll_interval_ms=self.settings.poll_interval_ms,
            idle_threshold_ms=self.settings.idle_threshold_ms,
            clock=self._clock,
            on_file_reloaded=self._on_file_reloaded,
            on_sync_error=self._on_sync_error,
        )
        self.sessions = SessionStore(
            self.state,
            self.prefs,
            clock=self._clock,
            debounce_ms=self.settings.session_debounce_ms,
            blackout_ms=self.settings.restore_blackout_ms,
        )
        self.history = NavigationHistory(self.state, host_history)
        self.autosave = AutosaveTrigger(
            should_save=self._needs_save,
            on_save=self._write_file,
            interval_ms=self.settings.autosave_interval_ms,
            name="workspace",
        )
        self._polling = False
        # (root, relative path) -> editor text whose save failed on the way out
        self._unsaved: Dict[Tuple[Any, str], str] = {}

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def root(self) -> Optional[DirectoryHandle]:
        return self.state.document.root

    @property
    def directory(self) -> Optional[DirectoryHandle]:
        return self.state.document.directory

    @property
    def file(self) -> Optional[FileHandle]:
        return self.state.document.file

    @property
    def is_dirty(self) -> bool:
        return self.state.document.dirty

    def relative_file_path(self) -> Optional[str]:
        return self.state.relative_file_path()

    def location_query(self) -> str:
        root = self.root
        workdir = f"/{root.name}" if root is not None else None
        return build_query(workdir, self.relative_file_path())

    async def list_directory(self) -> List[Any]:
        """Entries of the current directory, or [] when it cannot be listed."""
        directory = self.directory
        if directory is None:
            return []
        try:
            return await directory.list_entries()
        except SyncError as e:
            get_logger().error("list_directory", e)
            self.notify(f"Cannot list {directory.name}: {e}", "error")
            return []

    # ------------------------------------------------------------------
    # Folder navigation
    # ------------------------------------------------------------------

    async def open_folder(self, root: DirectoryHandle) -> bool:
        """Make `root` the workspace root and resume its last session.

        Returns:
            True when the session's last open file was restored.
        """
        await self._leave_current()
        self.reconciler.reset()
        self.sessions.cancel()
        self.adapter.unmount()

        self.state.set_root(root)
        get_logger().set_folder(root.name)
        self.prefs.last_folder_name = root.name

        record = await self.sessions.ensure_session(root)
        restored = False
        last = record.last_open_file
        if last is not None:
            restored = await self._restore_last_file(root, last.path, last.snapshot)

        self.history.push(self._current_entry())
        self._start_timers()
        return restored

    async def choose_folder(self, picker: FolderPicker) -> Optional[bool]:
        """Ask `picker` for a root folder and open it.

        Returns:
            None when the picker was dismissed or failed, otherwise the
            result of open_folder.
        """
        try:
            root = await picker()
        except UserCancelled:
            get_logger().user_cancelled("choose_folder")
            return None
        except SyncError as e:
            self.notify(str(e), "error")
            return None
        return await self.open_folder(root)

    async def open_location(self, query: str) -> bool:
        """Show the folder/file named by a "?workdir=...&file=..." query.

        The workdir must name the open root; the file is relative to it.
        """
        location = parse_query(query)
        root = self.root
        if root is None or location.workdir is None:
            return False
        if location.workdir.strip("/") != root.name:
            self.notify(f"Location is not in {root.name}: {location.workdir}", "warning")
            return False
        if location.file is None:
            return True

        await self._leave_current()
        if not await self._open_relative(root, location.file):
            self.notify(f"Could not find: {location.file}", "warning")
            return False
        self.history.push(self._current_entry())
        self._request_session_save()
        return True

    async def _open_relative(self, root: DirectoryHandle, path: str) -> bool:
        result = await open_file_by_path(root, path)
        if result is None:
            return False
        file, _directory, chain = result
        self.state.set_location([root] + chain)
        if not await self._load_file(file):
            self._close_editor()
            return False
        return True

    async def _restore_last_file(
        self, root: DirectoryHandle, path: str, snapshot: EditorSnapshot
    ) -> bool:
        filename = path.rstrip("/").split("/")[-1]
        self.state.set_restoring_session(True)
        try:
            # Mode goes in first so the editor is built in it
            if is_markdown_file(filename):
                self.sessions.remember_mode(filename, snapshot.mode)
            loaded = await self._open_relative(root, path)
        finally:
            self.state.set_restoring_session(False)

        get_logger().session_restored(path, loaded)
        if not loaded:
            self.notify(f"Could not find: {filename}", "warning")
            return False

        await self.adapter.restore(snapshot)
        self.adapter.focus()
        self.sessions.mark_restored()
        return True

    async def enter_folder(self, name: str) -> bool:
        directory = self.directory
        if directory is None:
            return False
        try:
            child = await directory.get_child(name, directory=True)
        except SyncError as e:
            self.notify(str(e), "error")
            return False

        await self._leave_current()
        self.state.set_location(self.state.document.folders + [child])
        self._close_editor()
        self.history.push(self._current_entry())
        return True

    async def folder_up(self) -> bool:
        """Close the open file, or move to the parent folder when none is open."""
        folders = self.state.document.folders
        if self.state.has_open_file:
            target = folders
        elif len(folders) > 1:
            target = folders[:-1]
        else:
            return False
        await self._leave_current()
        self.state.set_location(target)
        self._close_editor()
        self.history.push(self._current_entry())
        return True

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def open_file(self, name: str) -> bool:
        """Open a file from the current directory."""
        directory = self.directory
        if directory is None:
            return False
        try:
            file = await directory.get_child(name)
        except SyncError as e:
            self.notify(str(e), "error")
            return False

        await self._leave_current()
        if not await self._load_file(file):
            self._close_editor()
            return False
        self.history.push(self._current_entry())
        self._request_session_save()
        return True

    async def save_file(self) -> bool:
        """Write the open document to disk.

        Returns:
            True when content was written; False when there was nothing to
            save or the write failed (the failure is reported via notify).
        """
        if not self._needs_save():
            return False
        try:
            await self._write_file()
        except SyncError as e:
            get_logger().error("save_file", e)
            self.notify(f"Error saving file: {e}", "error")
            return False
        return True

    def _needs_save(self) -> bool:
        return self.state.has_open_file and self.state.document.dirty

    async def _write_file(self) -> None:
        file = self.state.document.file
        if file is None:
            return
        content = self.adapter.get_content()
        await file.write(content)
        metadata = await file.get_metadata()

        if self.state.document.file is not file:
            return
        self.state.mark_saved(content)
        self.reconciler.note_disk_write(metadata.last_modified)
        if self.adapter.get_content() != content:
            # Typed while the write was in flight
            self.state.mark_dirty()
            self.reconciler.note_local_edit()

    async def _load_file(self, file: FileHandle, mode: Optional[EditorMode] = None) -> bool:
        try:
            content = await file.read()
            metadata = await file.get_metadata()
        except SyncError as e:
            get_logger().error("open_file", e)
            self.notify(f"Cannot open {file.name}: {e}", "error")
            return False

        self.state.set_file(file, content)
        unsaved = self._unsaved.pop((self.root, self.relative_file_path()), None)
        await self.adapter.mount(
            unsaved if unsaved is not None else content, mode or self._mode_for(file.name)
        )
        self.reconciler.note_file_loaded(metadata.last_modified)
        if unsaved is not None and unsaved != content:
            self.state.mark_dirty()
            self.reconciler.note_local_edit()
        if self._polling and not self.reconciler.is_running:
            # Polling halts when a file disappears; a new file resumes it
            self.reconciler.start()
        return True

    def _mode_for(self, filename: str) -> EditorMode:
        if not is_markdown_file(filename):
            return EditorMode.SOURCE
        return self.sessions.preferred_mode(filename) or EditorMode.RICH

    def _close_editor(self) -> None:
        self.state.clear_file()
        self.adapter.unmount()

    async def toggle_mode(self) -> Optional[EditorMode]:
        """Flip a markdown document between source and rich mode."""
        if not self.state.has_open_file or not is_markdown_file(self.state.document.filename):
            return None
        await self.adapter.toggle_mode()
        self.sessions.remember_mode(self.state.document.filename, self.adapter.mode)
        self._request_session_save()
        return self.adapter.mode

    # ------------------------------------------------------------------
    # Editor events
    # ------------------------------------------------------------------

    def on_content_changed(self, content: str) -> None:
        doc = self.state.document
        if not self.state.has_open_file or self.adapter.is_swapping:
            return
        if content == doc.original_content and not doc.dirty:
            # Echo of a load, not an edit
            return
        self.state.mark_dirty(content != doc.original_content)
        self.reconciler.note_local_edit()
        self._request_session_save()

    def on_cursor_activity(self) -> None:
        self.reconciler.record_activity()
        if self.state.has_open_file and not self.adapter.is_swapping:
            self._request_session_save()

    def _request_session_save(self) -> None:
        if self.root is None:
            return
        self.sessions.request_save(self.root, self.relative_file_path(), self.adapter.capture())

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def go_back(self) -> Optional[HistoryEntry]:
        """Step back; with a host history the host moves and we follow it."""
        if not self.history.can_go_back:
            return None
        host = self.history.host
        if host is not None:
            return await self._follow_host(host.back())
        await self._leave_current()
        entry = self.history.go_back()
        await self._show_entry(entry)
        return entry

    async def go_forward(self) -> Optional[HistoryEntry]:
        if not self.history.can_go_forward:
            return None
        host = self.history.host
        if host is not None:
            return await self._follow_host(host.forward())
        await self._leave_current()
        entry = self.history.go_forward()
        await self._show_entry(entry)
        return entry

    async def _follow_host(self, target_index: Optional[int]) -> Optional[HistoryEntry]:
        if target_index is None:
            return None
        return await self.on_native_navigation(target_index)

    async def on_native_navigation(self, target_index: Optional[int]) -> Optional[HistoryEntry]:
        """The host moved its own history; follow it to `target_index`."""
        if self.history.is_replaying:
            return None
        await self._leave_current()
        return await self.history.replay_native(target_index, self._show_entry)

    async def _show_entry(self, entry: HistoryEntry) -> None:
        self.state.set_location(list(entry.folders) or [entry.directory])
        if not entry.has_file:
            self._close_editor()
            return
        mode = entry.snapshot.mode if entry.snapshot is not None else None
        if not await self._load_file(entry.file, mode):
            self._close_editor()
            return
        if entry.snapshot is not None:
            await self.adapter.restore(entry.snapshot)

    def _current_entry(self) -> HistoryEntry:
        doc = self.state.document
        return HistoryEntry(
            path=doc.path_names,
            directory=doc.directory,
            file=doc.file,
            filename=doc.filename,
            snapshot=self.adapter.capture() if doc.file is not None else None,
            folders=tuple(doc.folders),
        )

    async def _leave_current(self) -> None:
        if not self.state.has_open_file:
            return
        if self.state.document.dirty and not await self.save_file():
            # Held until the file is opened again
            path = self.relative_file_path()
            self._unsaved[(self.root, path)] = self.adapter.get_content()
            get_logger().unsaved_kept(path)
            self.notify(f"Unsaved changes to {self.state.document.filename} kept in memory",
                        "warning")
        self.history.refresh_current(self.adapter.capture())

    # ------------------------------------------------------------------
    # Sync control and lifecycle
    # ------------------------------------------------------------------

    def toggle_sync_pause(self) -> bool:
        """Pause or resume external change polling; returns the new paused state."""
        if self.reconciler.paused:
            self.reconciler.resume()
        else:
            self.reconciler.pause()
        return self.reconciler.paused

    def _start_timers(self) -> None:
        self._polling = True
        self.reconciler.start()
        if self.settings.autosave_enabled:
            self.autosave.start()

    def _on_file_reloaded(self, _content: str) -> None:
        self.notify("Reloaded from disk", "information")

    def _on_sync_error(self, error: SyncError) -> None:
        self.notify(f"Sync error: {error}", "error")

    async def close(self) -> None:
        """Stop every timer and write out a pending session save."""
        self._polling = False
        self.autosave.stop()
        self.reconciler.stop()
        await self.sessions.flush()
