#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Textual host application for notesync.

A folder listing on the left, the editor on the right. The app owns no sync
logic: it forwards editor events to the Workspace and renders whatever the
Workspace's AppState says is open.
"""

from pathlib import Path
from typing import Iterable, Optional

from textual.app import App, ComposeResult, SystemCommand
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Footer, Header, Input, OptionList, Static, TextArea
from textual.widgets.option_list import Option

from notesync.config import SyncSettings
from notesync.errors import FileGoneError, UserCancelled
from notesync.fs import LocalDirectoryHandle
from notesync.models import EditorMode
from notesync.prefs import PreferenceStore
from notesync.tui.editors import TextAreaEditor, make_editor
from notesync.workspace import Workspace

PARENT_OPTION = ".."
DIR_PREFIX = "d:"
FILE_PREFIX = "f:"


class FolderPickerScreen(ModalScreen[str]):
    """Prompt for a folder path; dismisses with "" when cancelled."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, initial: str = "") -> None:
        super().__init__()
        self.initial = initial

    def compose(self) -> ComposeResult:
        with Vertical(id="folder-picker"):
            yield Static("Open folder", classes="modal-title")
            yield Input(value=self.initial, placeholder="/path/to/folder", id="folder-path")
            yield Static("[dim][Enter] Open  [Esc] Cancel[/dim]")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value.strip())

    def action_cancel(self) -> None:
        self.dismiss("")


class NotesyncApp(App):
    """Edit the files of one folder while keeping them in sync with disk."""

    TITLE = "notesync"

    CSS = """
    #entries {
        width: 32;
        height: 1fr;
    }
    #editor-column {
        width: 1fr;
    }
    #location {
        height: 1;
        padding: 0 1;
        background: $boost;
    }
    #editor-pane {
        height: 1fr;
    }
    #editor-pane TextArea {
        height: 1fr;
    }
    FolderPickerScreen {
        align: center middle;
    }
    #folder-picker {
        width: 60;
        height: auto;
        padding: 1 2;
        border: thick $primary;
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+s", "save", "Save"),
        Binding("ctrl+o", "open_folder", "Open"),
        Binding("f2", "toggle_mode", "Mode"),
        Binding("alt+left", "go_back", "Back"),
        Binding("alt+right", "go_forward", "Forward"),
        Binding("alt+up", "folder_up", "Up"),
        Binding("f5", "toggle_sync", "Pause sync"),
    ]

    def __init__(
        self,
        folder: Path,
        settings: Optional[SyncSettings] = None,
        prefs: Optional[PreferenceStore] = None,
        location: Optional[str] = None,
    ) -> None:
        """
        Initialize the app.

        Args:
            folder: Root folder to open on mount
            settings: Timing settings (default: read from settings.json)
            prefs: Preference store (default: state directory)
            location: "?workdir=...&file=..." query to show after the folder opens
        """
        super().__init__()
        self.folder = Path(folder)
        self.location = location
        self.workspace = Workspace(
            self._make_editor,
            settings=settings,
            prefs=prefs,
            notify=self._notify,
        )

    def get_system_commands(self, screen: Screen) -> Iterable[SystemCommand]:
        """Add workspace commands to the command palette."""
        yield from super().get_system_commands(screen)
        yield SystemCommand("Save", "Write the open file to disk", self.action_save)
        yield SystemCommand(
            "Open Folder", "Switch to another root folder", self.action_open_folder
        )
        yield SystemCommand(
            "Toggle Mode", "Switch markdown between source and rich mode", self.action_toggle_mode
        )
        yield SystemCommand(
            "Toggle Sync", "Pause or resume external change polling", self.action_toggle_sync
        )

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        with Horizontal():
            yield OptionList(id="entries")
            with Vertical(id="editor-column"):
                yield Static("", id="location")
                yield Vertical(id="editor-pane")
        yield Footer()

    async def on_mount(self) -> None:
        await self.workspace.open_folder(LocalDirectoryHandle(self.folder))
        if self.location:
            await self.workspace.open_location(self.location)
        await self._refresh_view()

    async def on_unmount(self) -> None:
        await self.workspace.close()

    # ------------------------------------------------------------------
    # Workspace plumbing
    # ------------------------------------------------------------------

    def _make_editor(self, content: str, mode: EditorMode) -> TextAreaEditor:
        pane = self.query_one("#editor-pane", Vertical)
        return make_editor(pane, content, mode, self.workspace.state.document.filename)

    def _notify(self, message: str, severity: str) -> None:
        self.notify(message, severity=severity)

    def _is_current_editor(self, area: TextArea) -> bool:
        component = self.workspace.adapter.component
        return isinstance(component, TextAreaEditor) and component.area is area

    async def _refresh_view(self) -> None:
        """Re-render the listing and location line from workspace state."""
        entries = self.query_one("#entries", OptionList)
        entries.clear_options()
        if len(self.workspace.state.document.folders) > 1 or self.workspace.file is not None:
            entries.add_option(Option("../", id=PARENT_OPTION))
        for entry in await self.workspace.list_directory():
            if isinstance(entry, LocalDirectoryHandle):
                entries.add_option(Option(f"{entry.name}/", id=f"{DIR_PREFIX}{entry.name}"))
            else:
                entries.add_option(Option(entry.name, id=f"{FILE_PREFIX}{entry.name}"))
        self._update_location()

    def _update_location(self) -> None:
        doc = self.workspace.state.document
        parts = list(doc.path_names)
        if doc.filename:
            parts.append(doc.filename)
        marker = " *" if doc.dirty else ""
        mode = f"  [{self.workspace.adapter.mode.value}]" if doc.file is not None else ""
        self.query_one("#location", Static).update("/".join(parts) + marker + mode)
        self.sub_title = self.workspace.location_query()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    async def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        option_id = event.option.id or ""
        if option_id == PARENT_OPTION:
            await self.workspace.folder_up()
        elif option_id.startswith(DIR_PREFIX):
            await self.workspace.enter_folder(option_id[len(DIR_PREFIX):])
        elif option_id.startswith(FILE_PREFIX):
            await self.workspace.open_file(option_id[len(FILE_PREFIX):])
        await self._refresh_view()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if not self._is_current_editor(event.text_area):
            return
        self.workspace.on_content_changed(event.text_area.text)
        self._update_location()

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if self._is_current_editor(event.text_area):
            self.workspace.on_cursor_activity()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def action_save(self) -> None:
        if await self.workspace.save_file():
            self.notify(f"Saved {self.workspace.state.document.filename}")
        self._update_location()

    def action_open_folder(self) -> None:
        root = self.workspace.root
        initial = str(root.path) if isinstance(root, LocalDirectoryHandle) else ""
        self.push_screen(FolderPickerScreen(initial), callback=self._on_folder_picked)

    async def _on_folder_picked(self, result: str) -> None:
        async def picker() -> LocalDirectoryHandle:
            if not result:
                raise UserCancelled("folder picker dismissed")
            path = Path(result).expanduser()
            if not path.is_dir():
                raise FileGoneError(f"Not a folder: {path}", str(path))
            return LocalDirectoryHandle(path.resolve())

        if await self.workspace.choose_folder(picker) is not None:
            self.folder = Path(self.workspace.root.path)
            await self._refresh_view()

    async def action_toggle_mode(self) -> None:
        mode = await self.workspace.toggle_mode()
        if mode is None:
            self.notify("Only markdown files have a rich mode", severity="warning")
        self._update_location()

    async def action_go_back(self) -> None:
        if await self.workspace.go_back() is not None:
            await self._refresh_view()

    async def action_go_forward(self) -> None:
        if await self.workspace.go_forward() is not None:
            await self._refresh_view()

    async def action_folder_up(self) -> None:
        if await self.workspace.folder_up():
            await self._refresh_view()

    def action_toggle_sync(self) -> None:
        paused = self.workspace.toggle_sync_pause()
        self.notify(f"External sync: {'PAUSED' if paused else 'RUNNING'}")
