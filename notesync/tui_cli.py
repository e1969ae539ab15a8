#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Command line entry point for notesync.

Usage:
    notesync edit FOLDER          # Open FOLDER in the editor TUI
    notesync edit FOLDER -l QUERY # ...showing "?workdir=/FOLDER&file=a.md"
    notesync session FOLDER       # Print FOLDER's session record
    notesync log [--lines N]      # Show the last N debug log events
"""

import argparse
import asyncio
import json
import sys
from collections import deque
from pathlib import Path
from typing import List, Optional

from notesync._version import __version__
from notesync.fs import LocalDirectoryHandle
from notesync.paths import PathResolver
from notesync.session import SessionStore

CORE_EVENT_KEYS = ("event", "level", "timestamp", "pid", "folder")


def format_log_line(line: str) -> str:
    """Render one JSON log line as "time event [folder] key=value ..."."""
    try:
        record = json.loads(line)
    except json.JSONDecodeError:
        return line.rstrip("\n")
    if not isinstance(record, dict):
        return line.rstrip("\n")
    timestamp = str(record.get("timestamp", ""))[11:19]
    details = " ".join(
        f"{key}={value}" for key, value in record.items() if key not in CORE_EVENT_KEYS
    )
    folder = f" [{record['folder']}]" if record.get("folder") else ""
    return f"{timestamp} {record.get('event', '?')}{folder} {details}".rstrip()


def tail_log(log_path: Path, lines: int) -> List[str]:
    if not log_path.exists():
        return []
    with open(log_path) as f:
        return [format_log_line(line) for line in deque(f, maxlen=lines)]


def show_session(folder: Path) -> int:
    if not folder.is_dir():
        print(f"Error: not a directory: {folder}", file=sys.stderr)
        return 1
    record = asyncio.run(SessionStore().load(LocalDirectoryHandle(folder)))
    if record is None:
        print(f"No session record in {folder}")
        return 1
    print(json.dumps(record.to_dict(), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="notesync - edit a folder while keeping it in sync with disk",
    )
    parser.add_argument("--version", action="version", version=f"notesync {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    edit_parser = subparsers.add_parser("edit", help="Open a folder in the editor TUI")
    edit_parser.add_argument("folder", nargs="?", default=".", help="Folder to open")
    edit_parser.add_argument(
        "--location", "-l",
        help="Location to show, e.g. \"?workdir=/notes&file=src/app.js\"",
    )

    session_parser = subparsers.add_parser("session", help="Print a folder's session record")
    session_parser.add_argument("folder", help="Root folder")

    log_parser = subparsers.add_parser("log", help="Show recent debug log events")
    log_parser.add_argument("--lines", "-n", type=int, default=50, help="Number of events")

    args = parser.parse_args(argv)

    # Default to edit of the current directory
    if not args.command:
        args.command = "edit"
        args.folder = "."
        args.location = None

    if args.command == "edit":
        folder = Path(args.folder).expanduser().resolve()
        if not folder.is_dir():
            print(f"Error: not a directory: {folder}", file=sys.stderr)
            return 1
        from notesync.tui.app import NotesyncApp

        NotesyncApp(folder, location=args.location).run()
        return 0

    if args.command == "session":
        return show_session(Path(args.folder).expanduser())

    if args.command == "log":
        log_path = PathResolver.debug_log()
        lines = tail_log(log_path, args.lines)
        if not lines:
            print(f"No events in {log_path}")
        for line in lines:
            print(line)
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
