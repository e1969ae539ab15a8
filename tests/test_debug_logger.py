#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for the JSON-lines debug logger."""

import json

import pytest

from notesync.debug_logger import DebugLogger, get_logger, reset_logger


def read_events(path):
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines()]


class TestDebugLogger:
    def test_writes_one_json_object_per_line(self, temp_state_dir):
        logger = get_logger()
        logger.set_folder("notes")
        logger.file_reloaded("notes.md", 1700000000000, 42)
        logger.session_saved("notes.md", 3, 5, "source")

        events = read_events(temp_state_dir / "debug.log")
        assert [e["event"] for e in events] == ["file_reloaded", "session_saved"]
        first = events[0]
        assert first["folder"] == "notes"
        assert first["file"] == "notes.md"
        assert first["level"] == "info"
        assert first["timestamp"].endswith("Z")
        assert isinstance(first["pid"], int)

    def test_level_zero_disables_logging(self, temp_state_dir, monkeypatch):
        monkeypatch.setenv("NOTESYNC_DEBUG", "0")
        reset_logger()

        get_logger().error("op", "boom")

        assert not (temp_state_dir / "debug.log").exists()

    def test_verbose_events_need_higher_level(self, temp_state_dir, monkeypatch):
        get_logger().session_skipped("restore_blackout", elapsed_ms=10)
        get_logger().sync_check("a.md", 2, 1)
        assert read_events(temp_state_dir / "debug.log") == []

        monkeypatch.setenv("NOTESYNC_DEBUG", "3")
        reset_logger()
        get_logger().session_skipped("restore_blackout", elapsed_ms=10)
        get_logger().sync_check("a.md", 2, 1)
        events = read_events(temp_state_dir / "debug.log")
        assert [e["event"] for e in events] == ["session_skipped", "sync_check"]

    def test_level_from_settings(self, temp_state_dir, tmp_path, monkeypatch):
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"notesync": {"debugLevel": 2}}))
        monkeypatch.setenv("NOTESYNC_SETTINGS", str(settings))
        reset_logger()

        assert get_logger().level == 2

    def test_invalid_env_level_uses_default(self, monkeypatch):
        monkeypatch.setenv("NOTESYNC_DEBUG", "loud")
        reset_logger()
        assert get_logger().level == 1

    def test_error_messages_are_truncated(self, temp_state_dir):
        get_logger().sync_error("a.md", OSError("x" * 2000), permanent=False)

        event = read_events(temp_state_dir / "debug.log")[0]
        assert event["level"] == "error"
        assert event["error_type"] == "OSError"
        assert len(event["message"]) == 500

    def test_unwritable_log_does_not_raise(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        logger = DebugLogger(log_path=blocker / "debug.log")

        logger.error("op", "still fine")

    def test_singleton(self):
        assert get_logger() is get_logger()
        first = get_logger()
        reset_logger()
        assert get_logger() is not first
