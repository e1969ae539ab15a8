# SPDX-License-Identifier: MIT
"""
Persistent key-value store for small UI preferences.

Backed by a JSON object file in the state directory. Holds scalars only:
per-file edit mode (mode_<filename>), the last opened folder name, panel
sizing. Document content and session records never go here.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from notesync.debug_logger import get_logger
from notesync.models import EditorMode
from notesync.paths import PathResolver

_SCALARS = (str, int, float, bool, type(None))


class PreferenceStore:
    """Synchronous, application-scoped preference storage."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else PathResolver.preferences_file()
        self._data: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.path.read_text())
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            get_logger().error("prefs_read", e)
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data, indent=2, sort_keys=True))
        except OSError as e:
            get_logger().error("prefs_write", e)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if not isinstance(value, _SCALARS):
            raise TypeError(f"preference {key!r} must be a scalar, got {type(value).__name__}")
        self._data[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    # Typed helpers

    def get_mode(self, filename: str) -> Optional[EditorMode]:
        raw = self.get(f"mode_{filename}")
        if raw is None:
            return None
        return EditorMode.parse(raw)

    def set_mode(self, filename: str, mode: EditorMode) -> None:
        self.set(f"mode_{filename}", EditorMode.parse(mode).value)

    @property
    def last_folder_name(self) -> Optional[str]:
        return self.get("lastFolderName")

    @last_folder_name.setter
    def last_folder_name(self, name: Optional[str]) -> None:
        self.set("lastFolderName", name)
