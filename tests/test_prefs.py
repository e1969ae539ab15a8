# SPDX-License-Identifier: MIT
"""Tests for the preference store."""

import json

import pytest

from notesync.models import EditorMode
from notesync.prefs import PreferenceStore


class TestPreferenceStore:
    def test_defaults_to_state_dir(self, temp_state_dir):
        store = PreferenceStore()
        store.set("panelWidth", 40)
        assert json.loads((temp_state_dir / "preferences.json").read_text()) == {"panelWidth": 40}

    def test_values_persist_across_instances(self, tmp_path):
        path = tmp_path / "prefs.json"
        PreferenceStore(path).set("lastFolderName", "notes")
        assert PreferenceStore(path).get("lastFolderName") == "notes"

    def test_rejects_non_scalars(self, tmp_path):
        store = PreferenceStore(tmp_path / "prefs.json")
        with pytest.raises(TypeError):
            store.set("content", ["not", "allowed"])

    def test_remove(self, tmp_path):
        path = tmp_path / "prefs.json"
        store = PreferenceStore(path)
        store.set("panelWidth", 40)
        store.remove("panelWidth")
        assert PreferenceStore(path).get("panelWidth") is None

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{broken")
        assert PreferenceStore(path).get("anything", "default") == "default"

    def test_mode_helpers(self, tmp_path):
        store = PreferenceStore(tmp_path / "prefs.json")
        assert store.get_mode("notes.md") is None
        store.set_mode("notes.md", EditorMode.RICH)
        assert store.get("mode_notes.md") == "rich"
        assert store.get_mode("notes.md") is EditorMode.RICH

    def test_last_folder_name(self, tmp_path):
        store = PreferenceStore(tmp_path / "prefs.json")
        store.last_folder_name = "notes"
        assert store.last_folder_name == "notes"
