# SPDX-License-Identifier: MIT
"""Tests for location query strings."""

from notesync.location import Location, build_query, parse_query


class TestBuildQuery:
    def test_folder_only(self):
        assert build_query("/notes") == "?workdir=/notes"

    def test_folder_and_file_keep_slashes(self):
        assert build_query("/notes", "src/app.js") == "?workdir=/notes&file=src/app.js"

    def test_special_characters_are_encoded(self):
        assert build_query("/my notes", "a&b.md") == "?workdir=/my%20notes&file=a%26b.md"

    def test_file_without_workdir_is_dropped(self):
        assert build_query(None, "a.md") == ""
        assert build_query("", "a.md") == ""


class TestParseQuery:
    def test_parses_built_query(self):
        assert parse_query(build_query("/my notes", "src/a&b.md")) == Location("/my notes", "src/a&b.md")

    def test_file_requires_workdir(self):
        assert parse_query("?file=a.md") == Location(None, None)

    def test_empty(self):
        assert parse_query("") == Location(None, None)
        assert parse_query("?workdir=") == Location(None, None)
