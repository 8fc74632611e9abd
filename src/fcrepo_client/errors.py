"""Typed errors raised by the repository client."""
from __future__ import annotations

from typing import Optional


class RepositoryError(Exception):
    """Base class for every failure reported by the client."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


class NotFoundError(RepositoryError):
    """Nothing exists at the path (never created, or force-removed)."""


class GoneError(RepositoryError):
    """The path is occupied by a tombstone."""


class ConflictError(RepositoryError):
    """Already exists, duplicate version name, or the current version cannot be removed."""


class ParseError(RepositoryError):
    """The server rejected a property update as malformed."""


class TransportError(RepositoryError):
    """Network failure or timeout before a response was received."""


_BY_STATUS = {
    404: NotFoundError,
    409: ConflictError,
    410: GoneError,
}


def error_for_status(status_code: int, message: str, url: Optional[str] = None, patch: bool = False) -> RepositoryError:
    if patch and status_code == 400:
        return ParseError(message, status_code, url)
    if status_code == 410 and "410 Gone" not in message:
        message = f"410 Gone: {message}"
    cls = _BY_STATUS.get(status_code, RepositoryError)
    return cls(message, status_code, url)
