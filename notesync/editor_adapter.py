#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Editor State Adapter.

A narrow facade over whichever editor component is mounted. Callers read and
write cursor, scroll, content and mode through the adapter and never branch
on the kind of editor behind it.

Content swaps run as an explicit, observable sequence:

    CAPTURING -> SWAPPING_CONTENT -> RESTORING -> SETTLED

Out-of-range positions are clamped to the new document's bounds, never
raised.
"""

from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple, runtime_checkable

from notesync.models import EditorMode, EditorSnapshot


@runtime_checkable
class EditorComponent(Protocol):
    """Contract every mounted editor (source or rich) must satisfy."""

    def get_content(self) -> str: ...

    def set_content(self, content: str) -> None: ...

    def get_cursor(self) -> Tuple[int, int]: ...

    def set_cursor(self, line: int, column: int) -> None: ...

    def get_scroll_offset(self) -> Tuple[float, float]: ...

    def set_scroll_offset(self, top: float, left: float) -> None: ...

    def get_max_scroll_offset(self) -> Tuple[float, float]: ...

    def focus(self) -> None: ...

    def destroy(self) -> None: ...

    async def ready(self) -> None: ...


EditorFactory = Callable[[str, EditorMode], EditorComponent]


class RestorePhase(str, Enum):
    CAPTURING = "capturing"
    SWAPPING_CONTENT = "swapping-content"
    RESTORING = "restoring"
    SETTLED = "settled"


def document_lines(content: str) -> List[str]:
    return content.split("\n")


def clamp_snapshot(
    snapshot: EditorSnapshot,
    content: str,
    max_scroll: Tuple[float, float] = (float("inf"), float("inf")),
) -> EditorSnapshot:
    """Clamp a snapshot into the bounds of a document.

    Args:
        snapshot: Desired cursor/scroll state
        content: Document the state will be applied to
        max_scroll: Largest (top, left) scroll offsets the view accepts

    Returns:
        A snapshot whose line exists, whose column fits that line, and whose
        scroll offsets lie in [0, max].
    """
    lines = document_lines(content)
    line = min(max(0, snapshot.cursor_line), len(lines) - 1)
    column = min(max(0, snapshot.cursor_column), len(lines[line]))
    top = min(max(0, snapshot.scroll_top), max(0, max_scroll[0]))
    left = min(max(0, snapshot.scroll_left), max(0, max_scroll[1]))
    return EditorSnapshot(
        cursor_line=line,
        cursor_column=column,
        scroll_top=top,
        scroll_left=left,
        mode=snapshot.mode,
    )


class EditorStateAdapter:
    """Reads and writes editor state through one interface."""

    def __init__(self, factory: EditorFactory):
        self._factory = factory
        self.component: Optional[EditorComponent] = None
        self.mode = EditorMode.SOURCE
        self.phase = RestorePhase.SETTLED

    @property
    def is_mounted(self) -> bool:
        return self.component is not None

    @property
    def is_swapping(self) -> bool:
        return self.phase is not RestorePhase.SETTLED

    async def mount(self, content: str, mode: EditorMode = EditorMode.SOURCE) -> EditorComponent:
        """Destroy the current editor (if any) and build a fresh one."""
        self.unmount()
        self.mode = EditorMode.parse(mode)
        self.component = self._factory(content, self.mode)
        await self.component.ready()
        return self.component

    def unmount(self) -> None:
        if self.component is not None:
            self.component.destroy()
            self.component = None

    def get_content(self) -> str:
        return self.component.get_content() if self.component else ""

    def capture(self) -> Optional[EditorSnapshot]:
        """Take a snapshot of the mounted editor, or None with nothing mounted."""
        if self.component is None:
            return None
        line, column = self.component.get_cursor()
        top, left = self.component.get_scroll_offset()
        return EditorSnapshot.create(line, column, top, left, self.mode)

    async def restore(self, snapshot: EditorSnapshot) -> Optional[EditorSnapshot]:
        """Apply cursor then scroll from a snapshot, clamped to the document.

        Returns:
            The snapshot actually applied, or None with nothing mounted.
        """
        if self.component is None:
            return None
        await self.component.ready()
        applied = clamp_snapshot(
            snapshot,
            self.component.get_content(),
            self.component.get_max_scroll_offset(),
        )
        # Cursor first: placing it may scroll the view, the explicit offset wins
        self.component.set_cursor(applied.cursor_line, applied.cursor_column)
        self.component.set_scroll_offset(applied.scroll_top, applied.scroll_left)
        return applied

    async def replace_content(
        self, content: str, snapshot: Optional[EditorSnapshot] = None
    ) -> Optional[EditorSnapshot]:
        """Swap the document text while keeping the user's place.

        Args:
            content: New document text
            snapshot: State to restore; captured from the editor when omitted

        Returns:
            The snapshot applied after the swap, or None with nothing mounted.
        """
        if self.component is None:
            return None
        try:
            self.phase = RestorePhase.CAPTURING
            if snapshot is None:
                snapshot = self.capture()

            self.phase = RestorePhase.SWAPPING_CONTENT
            self.component.set_content(content)
            await self.component.ready()

            self.phase = RestorePhase.RESTORING
            return await self.restore(snapshot)
        finally:
            self.phase = RestorePhase.SETTLED

    async def switch_mode(self, new_mode: EditorMode) -> Optional[EditorSnapshot]:
        """Rebuild the editor in another mode, carrying content and position over."""
        new_mode = EditorMode.parse(new_mode)
        if self.component is None or new_mode == self.mode:
            return None
        try:
            self.phase = RestorePhase.CAPTURING
            content = self.component.get_content()
            snapshot = self.capture().with_mode(new_mode)

            self.phase = RestorePhase.SWAPPING_CONTENT
            await self.mount(content, new_mode)

            self.phase = RestorePhase.RESTORING
            applied = await self.restore(snapshot)
            self.component.focus()
            return applied
        finally:
            self.phase = RestorePhase.SETTLED

    async def toggle_mode(self) -> Optional[EditorSnapshot]:
        target = EditorMode.SOURCE if self.mode == EditorMode.RICH else EditorMode.RICH
        return await self.switch_mode(target)

    def focus(self) -> None:
        if self.component is not None:
            self.component.focus()


class BufferEditor:
    """Headless editor component keeping text, cursor and scroll in memory.

    Scroll offsets are measured in lines; the viewport shows
    `viewport_height` lines and `viewport_width` columns.
    """

    def __init__(
        self,
        content: str = "",
        mode: EditorMode = EditorMode.SOURCE,
        viewport_height: int = 20,
        viewport_width: int = 80,
        on_change: Optional[Callable[[str], None]] = None,
    ):
        self.mode = mode
        self.viewport_height = viewport_height
        self.viewport_width = viewport_width
        self.on_change = on_change
        self._content = content
        self._cursor = (0, 0)
        self._scroll = (0, 0)
        self.destroyed = False
        self.focused = False

    def get_content(self) -> str:
        return self._content

    def set_content(self, content: str) -> None:
        self._content = content
        # Keep the cursor valid for the new text
        line, column = self._cursor
        lines = document_lines(content)
        line = min(line, len(lines) - 1)
        self._cursor = (line, min(column, len(lines[line])))

    def type_text(self, text: str) -> None:
        """Insert text at the cursor as if the user typed it."""
        lines = document_lines(self._content)
        line, column = self._cursor
        current = lines[line]
        lines[line] = current[:column] + text + current[column:]
        self._content = "\n".join(lines)
        inserted = document_lines(text)
        if len(inserted) == 1:
            self._cursor = (line, column + len(text))
        else:
            self._cursor = (line + len(inserted) - 1, len(inserted[-1]))
        if self.on_change:
            self.on_change(self._content)

    def get_cursor(self) -> Tuple[int, int]:
        return self._cursor

    def set_cursor(self, line: int, column: int) -> None:
        lines = document_lines(self._content)
        line = min(max(0, line), len(lines) - 1)
        self._cursor = (line, min(max(0, column), len(lines[line])))

    def get_scroll_offset(self) -> Tuple[float, float]:
        return self._scroll

    def set_scroll_offset(self, top: float, left: float) -> None:
        max_top, max_left = self.get_max_scroll_offset()
        self._scroll = (min(max(0, top), max_top), min(max(0, left), max_left))

    def get_max_scroll_offset(self) -> Tuple[float, float]:
        lines = document_lines(self._content)
        widest = max(len(line) for line in lines)
        return (
            max(0, len(lines) - self.viewport_height),
            max(0, widest - self.viewport_width),
        )

    def focus(self) -> None:
        self.focused = True

    def destroy(self) -> None:
        self.destroyed = True
        self.on_change = None

    async def ready(self) -> None:
        return None
