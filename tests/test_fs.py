# SPDX-License-Identifier: MIT
"""Tests for the local file-system adapter."""

import pytest

from notesync.errors import FileGoneError
from notesync.fs import (
    DirectoryHandle,
    FileHandle,
    LocalDirectoryHandle,
    LocalFileHandle,
    open_file_by_path,
    split_relative_path,
)
from notesync.models import SESSION_FILE_NAME

pytest_plugins = ("pytest_asyncio",)


class TestLocalFileHandle:
    @pytest.mark.asyncio
    async def test_read_write_metadata(self, tmp_path, set_mtime):
        path = tmp_path / "a.md"
        handle = LocalFileHandle(path)
        path.write_text("")

        await handle.write("hello\n")
        set_mtime(path, 1_700_000_123_456)

        assert await handle.read() == "hello\n"
        metadata = await handle.get_metadata()
        assert metadata.last_modified == 1_700_000_123_456
        assert metadata.size == 6
        assert isinstance(handle, FileHandle)

    @pytest.mark.asyncio
    async def test_missing_file_is_gone(self, tmp_path):
        handle = LocalFileHandle(tmp_path / "missing.md")
        with pytest.raises(FileGoneError):
            await handle.read()
        with pytest.raises(FileGoneError):
            await handle.get_metadata()

    def test_equality_by_path(self, tmp_path):
        assert LocalFileHandle(tmp_path / "a") == LocalFileHandle(tmp_path / "a")
        assert LocalFileHandle(tmp_path / "a") != LocalFileHandle(tmp_path / "b")
        assert len({LocalFileHandle(tmp_path / "a"), LocalFileHandle(tmp_path / "a")}) == 1


class TestLocalDirectoryHandle:
    @pytest.mark.asyncio
    async def test_listing_order_hides_session_file(self, notes_dir):
        (notes_dir / SESSION_FILE_NAME).write_text("{}")
        (notes_dir / "Zeta").mkdir()

        root = LocalDirectoryHandle(notes_dir)
        names = [entry.name for entry in await root.list_entries()]

        assert names == ["src", "Zeta", "notes.md", "todo.txt"]
        assert isinstance(root, DirectoryHandle)

    @pytest.mark.asyncio
    async def test_get_child(self, notes_dir):
        root = LocalDirectoryHandle(notes_dir)
        src = await root.get_child("src", directory=True)
        assert isinstance(src, LocalDirectoryHandle)
        app = await src.get_child("app.js")
        assert isinstance(app, LocalFileHandle)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,directory", [
        ("missing.md", False),
        ("src", False),
        ("notes.md", True),
        ("..", True),
        ("a/b", False),
        ("", False),
    ])
    async def test_get_child_missing_or_invalid(self, notes_dir, name, directory):
        with pytest.raises(FileGoneError):
            await LocalDirectoryHandle(notes_dir).get_child(name, directory=directory)

    @pytest.mark.asyncio
    async def test_create_child(self, tmp_path):
        root = LocalDirectoryHandle(tmp_path)
        handle = await root.create_child("new.md")
        assert (tmp_path / "new.md").is_file()
        await handle.write("x")
        # Existing files are returned untouched
        again = await root.create_child("new.md")
        assert await again.read() == "x"
        sub = await root.create_child("sub", directory=True)
        assert isinstance(sub, LocalDirectoryHandle)


class TestOpenFileByPath:
    def test_split_relative_path(self):
        assert split_relative_path("./a//b\\c.md") == ["a", "b", "c.md"]

    @pytest.mark.asyncio
    async def test_resolves_nested_file(self, notes_dir):
        root = LocalDirectoryHandle(notes_dir)
        file, directory, chain = await open_file_by_path(root, "src/app.js")
        assert file == LocalFileHandle(notes_dir / "src" / "app.js")
        assert directory == LocalDirectoryHandle(notes_dir / "src")
        assert [d.name for d in chain] == ["src"]

    @pytest.mark.asyncio
    async def test_root_level_file(self, notes_dir):
        file, directory, chain = await open_file_by_path(LocalDirectoryHandle(notes_dir), "notes.md")
        assert file.name == "notes.md"
        assert directory.path == notes_dir
        assert chain == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["", "missing.md", "nope/app.js", "../notes/notes.md", "src"])
    async def test_unresolvable_returns_none(self, notes_dir, path):
        assert await open_file_by_path(LocalDirectoryHandle(notes_dir), path) is None
