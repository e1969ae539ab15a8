# SPDX-License-Identifier: MIT
"""Tests for the sync error taxonomy."""

import pytest

from notesync.errors import (
    FileGoneError,
    SyncError,
    TransientIOError,
    UserCancelled,
    classify_os_error,
)


class TestClassifyOsError:
    @pytest.mark.parametrize("exc", [
        FileNotFoundError("gone"),
        NotADirectoryError("nope"),
        PermissionError("revoked"),
    ])
    def test_permanent_errors(self, exc):
        err = classify_os_error(exc, "/notes/a.md")
        assert isinstance(err, FileGoneError)
        assert err.path == "/notes/a.md"
        assert type(exc).__name__ in str(err)

    @pytest.mark.parametrize("exc", [OSError("disk hiccup"), UnicodeDecodeError("utf-8", b"\xff", 0, 1, "bad")])
    def test_transient_errors(self, exc):
        assert isinstance(classify_os_error(exc), TransientIOError)

    def test_sync_errors_pass_through(self):
        original = FileGoneError("already classified")
        assert classify_os_error(original) is original

    def test_hierarchy(self):
        for cls in (FileGoneError, TransientIOError, UserCancelled):
            assert issubclass(cls, SyncError)
