# src/fcrepo_ref_server/ports/storage.py
"""
RepositoryStore: the hexagonal 'port' interface for repository backends.

Adapters signal failures with the typed errors below; the routers in
`fcrepo_ref_server.api` translate them into HTTP status codes.
"""

from __future__ import annotations

from typing import Protocol, Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from rdflib.term import URIRef
    from fcrepo_ref_server.models import ContentRecord, PathState, ResourceKind, ResourceRecord, VersionRecord


class StorageError(Exception):
    """Base class for repository storage failures."""


class ResourceNotFound(StorageError):
    """Nothing lives at the path (never existed, or tombstone removed)."""


class ResourceGone(StorageError):
    """The path, or one of its ancestors, is occupied by a tombstone."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Resource at {path!r} has been deleted")
        self.path = path


class ResourceConflict(StorageError):
    """Already exists, duplicate version name, or state forbids the change."""


class InvalidPath(StorageError, ValueError):
    pass


class InvalidPatch(StorageError, ValueError):
    pass


class RepositoryStore(Protocol):
    """
    Contract that all storage adapters must implement.

    Lifecycle per path: absent -> live -> tombstoned | absent.
      - create / mint       -> live resource (conflict if live, gone if tombstoned)
      - delete              -> subtree removed, tombstone left at the path
      - remove_tombstone    -> tombstone cleared, path absent again
      - move                -> subtree relocated, tombstone left at the source
      - copy                -> independent duplicate of the current subtree
    Versions are full snapshots ordered by creation.
    """

    def state_of(self, path: str) -> Optional["PathState"]:
        ...

    def get(self, path: str) -> "ResourceRecord":
        ...

    def children(self, path: str) -> List["ResourceRecord"]:
        ...

    def create(
        self,
        path: str,
        kind: "ResourceKind",
        content: Optional["ContentRecord"] = None,
    ) -> "ResourceRecord":
        ...

    def mint(
        self,
        parent: str,
        kind: "ResourceKind",
        slug: Optional[str] = None,
        content: Optional["ContentRecord"] = None,
    ) -> "ResourceRecord":
        ...

    def update_properties(self, path: str, subject: "URIRef", sparql_update: str) -> "ResourceRecord":
        ...

    def update_content(self, path: str, content: "ContentRecord") -> "ResourceRecord":
        ...

    def delete(self, path: str) -> None:
        ...

    def remove_tombstone(self, path: str) -> None:
        ...

    def move(self, source: str, destination: str) -> "ResourceRecord":
        ...

    def copy(self, source: str, destination: str) -> "ResourceRecord":
        ...

    def create_version(self, path: str, name: str) -> "VersionRecord":
        ...

    def list_versions(self, path: str) -> List["VersionRecord"]:
        ...

    def get_version(self, path: str, name: str) -> "VersionRecord":
        ...

    def revert_to_version(self, path: str, name: str) -> "ResourceRecord":
        ...

    def delete_version(self, path: str, name: str) -> None:
        ...
