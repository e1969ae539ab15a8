# SPDX-License-Identifier: MIT
"""Centralized path resolution for notesync.

All path resolution should go through this module to ensure consistency.
"""
import os
from pathlib import Path


class PathResolver:
    """Resolves paths for notesync components."""

    @staticmethod
    def config_dir() -> Path:
        """Get the directory holding settings.json.

        Resolution order:
        1. NOTESYNC_CONFIG env var
        2. XDG_CONFIG_HOME/notesync
        3. ~/.config/notesync
        """
        config = os.environ.get("NOTESYNC_CONFIG")
        if config:
            return Path(config)
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "notesync"
        return Path.home() / ".config" / "notesync"

    @staticmethod
    def state_dir() -> Path:
        """Get the state directory for mutable data (debug log, preferences).

        Resolution order:
        1. NOTESYNC_STATE env var
        2. XDG_STATE_HOME/notesync
        3. ~/.local/state/notesync
        """
        state = os.environ.get("NOTESYNC_STATE")
        if state:
            return Path(state)
        xdg_state = os.environ.get("XDG_STATE_HOME")
        if xdg_state:
            return Path(xdg_state) / "notesync"
        return Path.home() / ".local" / "state" / "notesync"

    @staticmethod
    def debug_log() -> Path:
        return PathResolver.state_dir() / "debug.log"

    @staticmethod
    def preferences_file() -> Path:
        return PathResolver.state_dir() / "preferences.json"
