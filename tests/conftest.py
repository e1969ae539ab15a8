"""
Pytest configuration and fixtures for notesync tests.
"""

import sys
from pathlib import Path

# Ensure project root is in sys.path for 'notesync' imports
# This must happen before any imports from notesync
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import os
import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "tui: marks TUI tests")


@pytest.fixture
def temp_state_dir(tmp_path: Path, monkeypatch) -> Path:
    """Create and return a temporary state directory.

    Sets NOTESYNC_STATE, points settings at a missing file and resets the
    debug logger so it picks up the new path.
    """
    state_dir = tmp_path / ".local" / "state" / "notesync"
    state_dir.mkdir(parents=True)
    monkeypatch.setenv("NOTESYNC_STATE", str(state_dir))
    monkeypatch.setenv("NOTESYNC_SETTINGS", str(tmp_path / "no-settings.json"))
    monkeypatch.delenv("NOTESYNC_DEBUG", raising=False)

    from notesync.debug_logger import reset_logger
    reset_logger()

    return state_dir


@pytest.fixture(autouse=True)
def isolate_state_dir(temp_state_dir: Path):
    """Autouse fixture that keeps every test out of the real ~/.local/state/notesync."""
    yield temp_state_dir

    from notesync.debug_logger import reset_logger
    reset_logger()


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """A small folder tree to edit.

    notes/
        notes.md      (10 lines)
        todo.txt
        src/
            app.js
    """
    root = tmp_path / "notes"
    (root / "src").mkdir(parents=True)
    (root / "notes.md").write_text("\n".join(f"line {i}: some text" for i in range(10)))
    (root / "todo.txt").write_text("buy milk\n")
    (root / "src" / "app.js").write_text("const a = 1;\nconsole.log(a);\n")
    return root


def set_mtime_ms(path: Path, ms: int) -> None:
    """Set a file's modification time to an exact epoch-millisecond value."""
    os.utime(path, ns=(ms * 1_000_000, ms * 1_000_000))


@pytest.fixture
def set_mtime():
    return set_mtime_ms
