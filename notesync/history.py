#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Navigation History Stack.

An in-app back/forward stack of visited locations, each carrying the editor
snapshot needed to resume it. Every push is mirrored into the host's own
history (browser-style session history) so the host's back/forward buttons
stay usable; when the host navigates on its own, replay_native() walks the
internal stack one step at a time to the host's target.

The stack performs no I/O. Re-materializing an entry (reopening its file,
restoring its snapshot) is the caller's job, passed in as a step callback.
"""

from typing import Awaitable, Callable, List, Optional, Protocol, Tuple

from notesync.debug_logger import get_logger
from notesync.location import build_query
from notesync.models import EditorSnapshot, HistoryEntry
from notesync.state import AppState

DEFAULT_TITLE = "notesync"


class HostHistory(Protocol):
    """The host environment's own back/forward history."""

    def push_state(self, index: int, title: str, url: str) -> None: ...

    def back(self) -> Optional[int]: ...

    def forward(self) -> Optional[int]: ...


class InMemoryHostHistory:
    """Session history the way a browser keeps it.

    Each state is (history index, title, url). Pushing drops every state
    after the current one; back() and forward() return the history index
    stored in the state they land on, or None at either end.
    """

    def __init__(self):
        self.states: List[Tuple[int, str, str]] = []
        self.position = -1

    def push_state(self, index: int, title: str, url: str) -> None:
        del self.states[self.position + 1:]
        self.states.append((index, title, url))
        self.position = len(self.states) - 1

    def back(self) -> Optional[int]:
        if self.position <= 0:
            return None
        self.position -= 1
        return self.states[self.position][0]

    def forward(self) -> Optional[int]:
        if self.position >= len(self.states) - 1:
            return None
        self.position += 1
        return self.states[self.position][0]

    @property
    def current(self) -> Optional[Tuple[int, str, str]]:
        if self.position < 0:
            return None
        return self.states[self.position]


def entry_location(entry: HistoryEntry) -> Tuple[Optional[str], Optional[str]]:
    """(workdir, root-relative file path) for an entry's location query."""
    if not entry.path:
        return None, None
    workdir = f"/{entry.path[0]}"
    if not entry.has_file:
        return workdir, None
    parts = list(entry.path[1:])
    parts.append(entry.filename)
    return workdir, "/".join(parts)


StepCallback = Callable[[HistoryEntry], Awaitable[None]]


class NavigationHistory:
    """Back/forward stack stored in AppState.navigation."""

    def __init__(self, state: AppState, host: Optional[HostHistory] = None):
        self.state = state
        self.host = host

    @property
    def entries(self) -> List[HistoryEntry]:
        return self.state.navigation.entries

    @property
    def index(self) -> int:
        return self.state.navigation.index

    @property
    def is_replaying(self) -> bool:
        return self.state.navigation.replaying_native

    def __len__(self) -> int:
        return len(self.state.navigation.entries)

    @property
    def current(self) -> Optional[HistoryEntry]:
        nav = self.state.navigation
        if nav.index < 0:
            return None
        return nav.entries[nav.index]

    @property
    def can_go_back(self) -> bool:
        return self.state.navigation.index > 0

    @property
    def can_go_forward(self) -> bool:
        nav = self.state.navigation
        return nav.index < len(nav.entries) - 1

    def push(self, entry: HistoryEntry) -> None:
        """Append a location, discarding anything ahead of the current one."""
        nav = self.state.navigation
        del nav.entries[nav.index + 1:]
        nav.entries.append(entry)
        nav.index = len(nav.entries) - 1

        if self.host is not None and not nav.replaying_native:
            workdir, file = entry_location(entry)
            title = entry.filename or DEFAULT_TITLE
            self.host.push_state(nav.index, title, build_query(workdir, file))

        get_logger().history_moved("push", nav.index, len(nav.entries), self._describe(entry))

    def go_back(self) -> Optional[HistoryEntry]:
        if not self.can_go_back:
            return None
        return self._move(-1, "back")

    def go_forward(self) -> Optional[HistoryEntry]:
        if not self.can_go_forward:
            return None
        return self._move(1, "forward")

    def _move(self, delta: int, action: str) -> HistoryEntry:
        nav = self.state.navigation
        nav.index += delta
        entry = nav.entries[nav.index]
        get_logger().history_moved(action, nav.index, len(nav.entries), self._describe(entry))
        return entry

    def refresh_current(self, snapshot: Optional[EditorSnapshot]) -> None:
        """Store a fresh snapshot on the current entry before leaving it."""
        nav = self.state.navigation
        if nav.index < 0 or snapshot is None:
            return
        nav.entries[nav.index] = nav.entries[nav.index].with_snapshot(snapshot)

    async def replay_native(
        self, target_index: Optional[int], step: StepCallback
    ) -> Optional[HistoryEntry]:
        """Follow a host back/forward to `target_index`, one step at a time.

        Every intermediate entry is handed to `step` so the caller restores
        it exactly as an in-app back/forward would. Pushes made while
        replaying are not mirrored to the host.

        Returns:
            The entry landed on, or None when there is nothing to replay or
            a replay is already running.
        """
        nav = self.state.navigation
        if nav.replaying_native or not nav.entries:
            return None
        if target_index is None:
            target_index = 0
        target_index = min(max(0, target_index), len(nav.entries) - 1)

        nav.replaying_native = True
        try:
            while nav.index != target_index:
                entry = self.go_back() if target_index < nav.index else self.go_forward()
                await step(entry)
        finally:
            nav.replaying_native = False
        return self.current

    def clear(self) -> None:
        nav = self.state.navigation
        nav.entries.clear()
        nav.index = -1

    @staticmethod
    def _describe(entry: HistoryEntry) -> str:
        return "/".join(entry.path + ((entry.filename,) if entry.has_file else ()))
