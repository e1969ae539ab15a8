# SPDX-License-Identifier: MIT
"""TextArea-backed editor components for the Textual host.

Both variants satisfy notesync.editor_adapter.EditorComponent:

- SourceEditor: code style, line numbers, no wrapping, syntax highlighting
  where a grammar is available
- RichEditor: soft-wrapped markdown without gutter

Scroll offsets are in terminal cells (rows, columns).
"""

from pathlib import PurePath
from typing import Optional, Tuple

from textual.widget import Widget
from textual.widgets import TextArea

from notesync.models import EditorMode


LANGUAGES = {
    ".bash": "bash",
    ".css": "css",
    ".go": "go",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".markdown": "markdown",
    ".md": "markdown",
    ".py": "python",
    ".rs": "rust",
    ".sh": "bash",
    ".sql": "sql",
    ".toml": "toml",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def language_for(filename: str) -> Optional[str]:
    return LANGUAGES.get(PurePath(filename).suffix.lower())


class TextAreaEditor:
    """Wraps a TextArea mounted into `container`."""

    mode = EditorMode.SOURCE

    def __init__(self, container: Widget, content: str, filename: str = ""):
        self.area = self._build(content)
        language = language_for(filename)
        if language in self.area.available_languages:
            self.area.language = language
        self._mounting = container.mount(self.area)

    def _build(self, content: str) -> TextArea:
        raise NotImplementedError

    async def ready(self) -> None:
        if self._mounting is not None:
            await self._mounting
            self._mounting = None

    def get_content(self) -> str:
        return self.area.text

    def set_content(self, content: str) -> None:
        self.area.load_text(content)

    def get_cursor(self) -> Tuple[int, int]:
        row, column = self.area.cursor_location
        return row, column

    def set_cursor(self, line: int, column: int) -> None:
        self.area.move_cursor((line, column))

    def get_scroll_offset(self) -> Tuple[float, float]:
        return self.area.scroll_y, self.area.scroll_x

    def set_scroll_offset(self, top: float, left: float) -> None:
        self.area.scroll_to(x=left, y=top, animate=False, immediate=True)

    def get_max_scroll_offset(self) -> Tuple[float, float]:
        return self.area.max_scroll_y, self.area.max_scroll_x

    def focus(self) -> None:
        self.area.focus()

    def destroy(self) -> None:
        self.area.remove()


class SourceEditor(TextAreaEditor):
    mode = EditorMode.SOURCE

    def _build(self, content: str) -> TextArea:
        return TextArea(
            content,
            soft_wrap=False,
            show_line_numbers=True,
            tab_behavior="indent",
            classes="source",
        )


class RichEditor(TextAreaEditor):
    mode = EditorMode.RICH

    def _build(self, content: str) -> TextArea:
        return TextArea(
            content,
            soft_wrap=True,
            show_line_numbers=False,
            classes="rich",
        )


def make_editor(container: Widget, content: str, mode: EditorMode, filename: str = ""):
    cls = RichEditor if mode == EditorMode.RICH else SourceEditor
    return cls(container, content, filename)
