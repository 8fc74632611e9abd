from __future__ import annotations

from typing import Optional
from urllib.parse import quote, unquote


def normalize(path: Optional[str]) -> str:
    return (path or "").strip("/")


def join(*segments: str) -> str:
    return "/".join(s.strip("/") for s in segments if s and s.strip("/"))


def quote_segment(segment: str) -> str:
    """Percent-encode one segment so it reaches the server unchanged."""
    return quote(segment, safe=":")


def quote_path(path: Optional[str]) -> str:
    return "/".join(quote_segment(s) for s in normalize(path).split("/") if s)


def path_from_url(repository_url: str, url: str) -> str:
    """Repository path addressed by an absolute resource URL."""
    if not url.startswith(repository_url):
        raise ValueError(f"{url!r} is not inside repository {repository_url!r}")
    return normalize(unquote(url[len(repository_url):]))
