# SPDX-License-Identifier: MIT
"""Location query strings for host history entries.

Schema:
    ?workdir=/notes                     (folder only)
    ?workdir=/notes&file=src/app.js     (folder + file)

A file without a workdir is invalid and treated as no location at all.
Forward slashes are kept readable instead of being percent-encoded.
"""

from typing import NamedTuple, Optional
from urllib.parse import parse_qs, quote


class Location(NamedTuple):
    workdir: Optional[str]
    file: Optional[str]


def _encode(value: str) -> str:
    return quote(value, safe="/")


def build_query(workdir: Optional[str], file: Optional[str] = None) -> str:
    """Build "?workdir=...&file=..." or "" when there is no valid location."""
    workdir = workdir or None
    file = file or None
    if not workdir:
        return ""
    query = f"?workdir={_encode(workdir)}"
    if file:
        query += f"&file={_encode(file)}"
    return query


def parse_query(query: str) -> Location:
    """Parse a query string back into a validated Location."""
    params = parse_qs(query.lstrip("?"), keep_blank_values=True)
    workdir = (params.get("workdir") or [""])[0] or None
    file = (params.get("file") or [""])[0] or None
    if file and not workdir:
        return Location(None, None)
    return Location(workdir, file)
