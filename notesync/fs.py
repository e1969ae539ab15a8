#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
File handle capability and its local-disk implementation.

The engine only ever talks to the FileHandle / DirectoryHandle protocols.
LocalFileHandle and LocalDirectoryHandle implement them over pathlib, with
blocking calls pushed to a worker thread so the event loop keeps ticking.
Every OS error is classified at this boundary (see notesync.errors).
"""

import asyncio
import os
from pathlib import Path
from typing import List, Optional, Protocol, Tuple, Union, runtime_checkable

from notesync.errors import FileGoneError, SyncError, classify_os_error
from notesync.models import SESSION_FILE_NAME, FileMetadata


@runtime_checkable
class FileHandle(Protocol):
    name: str

    async def read(self) -> str: ...

    async def write(self, content: str) -> None: ...

    async def get_metadata(self) -> FileMetadata: ...


@runtime_checkable
class DirectoryHandle(Protocol):
    name: str

    async def list_entries(self) -> List[Union["DirectoryHandle", FileHandle]]: ...

    async def get_child(self, name: str, directory: bool = False): ...

    async def create_child(self, name: str, directory: bool = False): ...


class LocalFileHandle:
    """A file on the local disk."""

    kind = "file"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.name = self.path.name

    def __repr__(self) -> str:
        return f"LocalFileHandle({str(self.path)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LocalFileHandle) and other.path == self.path

    def __hash__(self) -> int:
        return hash(("file", self.path))

    def _read(self) -> str:
        with open(self.path, encoding="utf-8") as f:
            return f.read()

    def _write(self, content: str) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(content)

    def _stat(self) -> FileMetadata:
        st = os.stat(self.path)
        return FileMetadata(last_modified=st.st_mtime_ns // 1_000_000, size=st.st_size)

    async def read(self) -> str:
        try:
            return await asyncio.to_thread(self._read)
        except (OSError, UnicodeDecodeError) as e:
            raise classify_os_error(e, str(self.path)) from e

    async def write(self, content: str) -> None:
        try:
            await asyncio.to_thread(self._write, content)
        except OSError as e:
            raise classify_os_error(e, str(self.path)) from e

    async def get_metadata(self) -> FileMetadata:
        try:
            return await asyncio.to_thread(self._stat)
        except OSError as e:
            raise classify_os_error(e, str(self.path)) from e


class LocalDirectoryHandle:
    """A directory on the local disk."""

    kind = "directory"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.name = self.path.name or str(self.path)

    def __repr__(self) -> str:
        return f"LocalDirectoryHandle({str(self.path)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LocalDirectoryHandle) and other.path == self.path

    def __hash__(self) -> int:
        return hash(("directory", self.path))

    def _list(self) -> List[Union["LocalDirectoryHandle", LocalFileHandle]]:
        dirs, files = [], []
        for child in self.path.iterdir():
            if child.name == SESSION_FILE_NAME:
                continue
            if child.is_dir():
                dirs.append(LocalDirectoryHandle(child))
            else:
                files.append(LocalFileHandle(child))
        # Directories first, then files, each alphabetical
        dirs.sort(key=lambda h: h.name.lower())
        files.sort(key=lambda h: h.name.lower())
        return dirs + files

    async def list_entries(self) -> List[Union["LocalDirectoryHandle", LocalFileHandle]]:
        try:
            return await asyncio.to_thread(self._list)
        except OSError as e:
            raise classify_os_error(e, str(self.path)) from e

    async def get_child(self, name: str, directory: bool = False):
        """Look up an existing child; raises FileGoneError when absent."""
        if not name or "/" in name or name in (".", ".."):
            raise FileGoneError(f"invalid entry name: {name!r}", str(self.path))
        child = self.path / name
        exists = await asyncio.to_thread(child.is_dir if directory else child.is_file)
        if not exists:
            kind = "directory" if directory else "file"
            raise FileGoneError(f"no such {kind}: {name}", str(child))
        return LocalDirectoryHandle(child) if directory else LocalFileHandle(child)

    async def create_child(self, name: str, directory: bool = False):
        """Return the named child, creating it when it does not exist yet."""
        if not name or "/" in name or name in (".", ".."):
            raise FileGoneError(f"invalid entry name: {name!r}", str(self.path))
        child = self.path / name
        try:
            if directory:
                await asyncio.to_thread(child.mkdir, exist_ok=True)
                return LocalDirectoryHandle(child)
            await asyncio.to_thread(child.touch, exist_ok=True)
            return LocalFileHandle(child)
        except OSError as e:
            raise classify_os_error(e, str(child)) from e


def split_relative_path(relative_path: str) -> List[str]:
    """Split "a/b/c.md" into segments, dropping empty and '.' parts."""
    return [p for p in relative_path.replace("\\", "/").split("/") if p and p != "."]


async def open_file_by_path(
    root: DirectoryHandle, relative_path: str
) -> Optional[Tuple[FileHandle, DirectoryHandle, List[DirectoryHandle]]]:
    """Resolve a root-relative path to a file handle.

    Args:
        root: Root directory handle
        relative_path: Path relative to root, e.g. "src/index.js"

    Returns:
        (file, containing directory, directory chain below root), or None if
        any segment is missing or inaccessible.
    """
    parts = split_relative_path(relative_path)
    if not parts or ".." in parts:
        return None
    filename = parts.pop()

    directory = root
    chain: List[DirectoryHandle] = []
    try:
        for dir_name in parts:
            directory = await directory.get_child(dir_name, directory=True)
            chain.append(directory)
        file = await directory.get_child(filename)
    except (SyncError, OSError):
        return None
    return file, directory, chain
