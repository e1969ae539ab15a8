#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Error taxonomy for the sync engine.

Components never let these escape a timer task. They are classified at the
I/O boundary (see notesync.fs) and reported upward through coarse callbacks:

- FileGoneError: permanent (deleted, permission revoked, handle invalidated)
- TransientIOError: anything else that went wrong while touching the disk
- UserCancelled: a picker or prompt was dismissed, a normal no-op outcome
"""

from typing import Optional


class SyncError(Exception):
    """Base class for errors raised by notesync components."""


class FileGoneError(SyncError):
    """The file or directory no longer exists or access was revoked."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class TransientIOError(SyncError):
    """A read/write/metadata hiccup that may succeed on the next attempt."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class UserCancelled(SyncError):
    """The user dismissed a selection UI."""


def classify_os_error(exc: BaseException, path: Optional[str] = None) -> SyncError:
    """Map an OS-level exception onto the sync error taxonomy.

    Args:
        exc: The exception raised by the underlying I/O call
        path: Path involved, if known

    Returns:
        FileGoneError for not-found / not-a-directory / permission errors,
        TransientIOError for everything else.
    """
    if isinstance(exc, SyncError):
        return exc
    message = f"{type(exc).__name__}: {exc}"
    if isinstance(exc, (FileNotFoundError, NotADirectoryError, PermissionError)):
        return FileGoneError(message, path)
    return TransientIOError(message, path)
