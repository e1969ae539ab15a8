# SPDX-License-Identifier: MIT
"""notesync: keeps an editor, its files on disk and its session in sync."""

from notesync._version import __version__
from notesync.activity import ActivityTracker
from notesync.autosave import AutosaveTrigger
from notesync.editor_adapter import BufferEditor, EditorStateAdapter, RestorePhase
from notesync.errors import FileGoneError, SyncError, TransientIOError, UserCancelled
from notesync.history import InMemoryHostHistory, NavigationHistory
from notesync.models import EditorMode, EditorSnapshot, ReconcileOutcome, SessionRecord
from notesync.reconciler import ExternalChangeReconciler
from notesync.session import SessionStore
from notesync.state import AppState
from notesync.workspace import Workspace

__all__ = [
    "__version__",
    "ActivityTracker",
    "AppState",
    "AutosaveTrigger",
    "BufferEditor",
    "EditorMode",
    "EditorSnapshot",
    "EditorStateAdapter",
    "ExternalChangeReconciler",
    "FileGoneError",
    "InMemoryHostHistory",
    "NavigationHistory",
    "ReconcileOutcome",
    "RestorePhase",
    "SessionRecord",
    "SessionStore",
    "SyncError",
    "TransientIOError",
    "UserCancelled",
    "Workspace",
]
