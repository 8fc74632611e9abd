"""
Path helpers for the repository namespace.

Paths are `/`-separated segment lists without leading or trailing slashes.
The repository root is the empty path.
"""
from __future__ import annotations

import re
from typing import List, Optional
from uuid import uuid4

from fcrepo_ref_server.ports.storage import InvalidPath

ROOT = ""
RESERVED_PREFIX = "fcr:"

_SEGMENT_RE = re.compile(r"^[^\s/?#\[\]]+$")


def is_valid_segment(segment: str) -> bool:
    if not segment or segment in (".", ".."):
        return False
    if segment.startswith(RESERVED_PREFIX):
        return False
    return bool(_SEGMENT_RE.match(segment))


def normalize(path: Optional[str]) -> str:
    """Strip surrounding slashes and validate every segment."""
    p = (path or "").strip("/")
    if p == ROOT:
        return ROOT
    for segment in p.split("/"):
        if not is_valid_segment(segment):
            raise InvalidPath(f"Invalid path segment {segment!r} in {path!r}")
    return p


def parent_of(path: str) -> Optional[str]:
    if path == ROOT:
        return None
    head, _, _ = path.rpartition("/")
    return head


def ancestors(path: str) -> List[str]:
    """Proper ancestors, nearest last, excluding the root."""
    if path == ROOT:
        return []
    parts = path.split("/")
    return ["/".join(parts[:i]) for i in range(1, len(parts))]


def join(parent: str, segment: str) -> str:
    return f"{parent}/{segment}" if parent else segment


def is_within(path: str, ancestor: str) -> bool:
    """True when `path` equals `ancestor` or lies beneath it."""
    if ancestor == ROOT:
        return True
    return path == ancestor or path.startswith(ancestor + "/")


def rebase(path: str, old_prefix: str, new_prefix: str) -> str:
    return new_prefix + path[len(old_prefix):]


def mint_segment() -> str:
    return str(uuid4())
