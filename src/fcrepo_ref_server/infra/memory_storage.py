# src/fcrepo_ref_server/infra/memory_storage.py
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from rdflib.term import URIRef

from fcrepo_ref_server.infra import paths
from fcrepo_ref_server.infra.rdf import apply_update
from fcrepo_ref_server.models import (
    ContentRecord,
    PathEntry,
    PathState,
    ResourceKind,
    ResourceRecord,
    VersionRecord,
)
from fcrepo_ref_server.models.records import copy_properties
from fcrepo_ref_server.ports.storage import (
    InvalidPath,
    RepositoryStore,
    ResourceConflict,
    ResourceGone,
    ResourceNotFound,
)

logger = logging.getLogger(__name__)


class MemoryStore(RepositoryStore):
    """
    Dev-only in-memory adapter (ephemeral).

    Every occupied path has exactly one PathEntry, tagged live or tombstoned.
    Absent paths have no entry. The root object always exists.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, PathEntry] = {
            paths.ROOT: PathEntry.live(ResourceRecord(path=paths.ROOT, kind=ResourceKind.OBJECT)),
        }
        self._lock = threading.RLock()

    # --- path resolution ---
    def _check_tombstones(self, path: str) -> None:
        """Raise ResourceGone if `path` or any ancestor is a tombstone."""
        for p in paths.ancestors(path) + [path]:
            entry = self._entries.get(p)
            if entry is not None and entry.state == PathState.TOMBSTONED:
                raise ResourceGone(p)

    def _live(self, path: str) -> ResourceRecord:
        self._check_tombstones(path)
        entry = self._entries.get(path)
        if entry is None or entry.resource is None:
            raise ResourceNotFound(path)
        return entry.resource

    def _subtree(self, path: str) -> List[str]:
        return sorted(p for p in self._entries if paths.is_within(p, path))

    def _ensure_free(self, path: str) -> None:
        self._check_tombstones(path)
        if path in self._entries:
            raise ResourceConflict(f"Resource already exists at {path!r}")

    def _ensure_parents(self, path: str) -> None:
        """Create missing intermediate objects; datastreams cannot hold children."""
        for p in paths.ancestors(path):
            entry = self._entries.get(p)
            if entry is None:
                self._entries[p] = PathEntry.live(ResourceRecord(path=p, kind=ResourceKind.OBJECT))
                logger.debug("Created intermediate object %s", p)
            elif entry.resource is not None and entry.resource.is_datastream:
                raise ResourceConflict(f"Datastream {p!r} cannot contain children")

    def _insert(self, path: str, kind: ResourceKind, content: Optional[ContentRecord]) -> ResourceRecord:
        if kind == ResourceKind.DATASTREAM and content is None:
            content = ContentRecord()
        rec = ResourceRecord(path=path, kind=kind, content=content)
        self._entries[path] = PathEntry.live(rec)
        logger.info("Created %s %s", kind.value, path)
        return rec

    # --- Port methods ---
    def state_of(self, path: str) -> Optional[PathState]:
        with self._lock:
            entry = self._entries.get(path)
            return entry.state if entry is not None else None

    def get(self, path: str) -> ResourceRecord:
        with self._lock:
            return self._live(path)

    def children(self, path: str) -> List[ResourceRecord]:
        with self._lock:
            self._live(path)
            return [
                e.resource
                for p, e in sorted(self._entries.items())
                if p != path and paths.parent_of(p) == path and e.resource is not None
            ]

    def create(
        self,
        path: str,
        kind: ResourceKind,
        content: Optional[ContentRecord] = None,
    ) -> ResourceRecord:
        path = paths.normalize(path)
        if path == paths.ROOT:
            raise ResourceConflict("The repository root already exists")
        with self._lock:
            self._ensure_free(path)
            self._ensure_parents(path)
            return self._insert(path, kind, content)

    def mint(
        self,
        parent: str,
        kind: ResourceKind,
        slug: Optional[str] = None,
        content: Optional[ContentRecord] = None,
    ) -> ResourceRecord:
        parent = paths.normalize(parent)
        with self._lock:
            container = self._live(parent)
            if container.is_datastream:
                raise ResourceConflict(f"Datastream {parent!r} cannot contain children")
            path = None
            if slug and paths.is_valid_segment(slug):
                candidate = paths.join(parent, slug)
                if candidate not in self._entries:
                    path = candidate
            while path is None or path in self._entries:
                path = paths.join(parent, paths.mint_segment())
            return self._insert(path, kind, content)

    def update_properties(self, path: str, subject: URIRef, sparql_update: str) -> ResourceRecord:
        with self._lock:
            rec = self._live(path)
            # apply_update works on a scratch graph; assignment is the commit
            rec.properties = apply_update(rec.properties, subject, sparql_update)
            rec.touch()
            return rec

    def update_content(self, path: str, content: ContentRecord) -> ResourceRecord:
        with self._lock:
            rec = self._live(path)
            if not rec.is_datastream:
                raise ResourceConflict(f"{path!r} is not a datastream")
            rec.content = content
            rec.touch()
            logger.debug("Replaced content of %s (%d bytes)", path, len(content.data))
            return rec

    def delete(self, path: str) -> None:
        with self._lock:
            self._live(path)
            if path == paths.ROOT:
                raise ResourceConflict("The repository root cannot be deleted")
            for p in self._subtree(path):
                del self._entries[p]
            self._entries[path] = PathEntry.tombstone()
            logger.info("Deleted %s (tombstone left)", path)

    def remove_tombstone(self, path: str) -> None:
        with self._lock:
            for p in paths.ancestors(path):
                entry = self._entries.get(p)
                if entry is not None and entry.state == PathState.TOMBSTONED:
                    raise ResourceGone(p)
            entry = self._entries.get(path)
            if entry is None or entry.state != PathState.TOMBSTONED:
                raise ResourceNotFound(f"No tombstone at {path!r}")
            del self._entries[path]
            logger.info("Removed tombstone at %s", path)

    def _prepare_destination(self, source: str, destination: str) -> str:
        destination = paths.normalize(destination)
        if destination == paths.ROOT:
            raise InvalidPath("Destination cannot be the repository root")
        self._live(source)
        if source == paths.ROOT:
            raise ResourceConflict("The repository root cannot be moved or copied")
        if paths.is_within(destination, source):
            raise ResourceConflict(f"Destination {destination!r} lies within {source!r}")
        self._ensure_free(destination)
        self._ensure_parents(destination)
        return destination

    def move(self, source: str, destination: str) -> ResourceRecord:
        with self._lock:
            destination = self._prepare_destination(source, destination)
            moved = {p: self._entries.pop(p) for p in self._subtree(source)}
            for p, entry in moved.items():
                new_path = paths.rebase(p, source, destination)
                if entry.resource is not None:
                    entry.resource.path = new_path
                    entry.resource.touch()
                self._entries[new_path] = entry
            self._entries[source] = PathEntry.tombstone()
            logger.info("Moved %s -> %s (tombstone left)", source, destination)
            return self._entries[destination].resource

    def copy(self, source: str, destination: str) -> ResourceRecord:
        with self._lock:
            destination = self._prepare_destination(source, destination)
            for p in self._subtree(source):
                entry = self._entries[p]
                if entry.resource is None:
                    continue
                new_path = paths.rebase(p, source, destination)
                self._entries[new_path] = PathEntry.live(entry.resource.duplicate(new_path))
            logger.info("Copied %s -> %s", source, destination)
            return self._entries[destination].resource

    # --- versions ---
    def create_version(self, path: str, name: str) -> VersionRecord:
        if not paths.is_valid_segment(name):
            raise InvalidPath(f"Invalid version name {name!r}")
        with self._lock:
            rec = self._live(path)
            if path == paths.ROOT:
                raise ResourceConflict("The repository root is not versionable")
            if rec.find_version(name) is not None:
                raise ResourceConflict(f"Version {name!r} already exists for {path!r}")
            version = VersionRecord(
                name=name,
                properties=copy_properties(rec.properties),
                content=rec.content.model_copy() if rec.content is not None else None,
            )
            rec.versions.append(version)
            logger.info("Created version %s of %s", name, path)
            return version

    def list_versions(self, path: str) -> List[VersionRecord]:
        with self._lock:
            return list(self._live(path).versions)

    def get_version(self, path: str, name: str) -> VersionRecord:
        with self._lock:
            version = self._live(path).find_version(name)
            if version is None:
                raise ResourceNotFound(f"No version {name!r} of {path!r}")
            return version

    def revert_to_version(self, path: str, name: str) -> ResourceRecord:
        with self._lock:
            rec = self._live(path)
            version = rec.find_version(name)
            if version is None:
                raise ResourceNotFound(f"No version {name!r} of {path!r}")
            rec.properties = copy_properties(version.properties)
            if rec.is_datastream and version.content is not None:
                rec.content = version.content.model_copy()
            rec.touch()
            logger.info("Reverted %s to version %s", path, name)
            return rec

    def delete_version(self, path: str, name: str) -> None:
        with self._lock:
            rec = self._live(path)
            version = rec.find_version(name)
            if version is None:
                raise ResourceNotFound(f"No version {name!r} of {path!r}")
            # the newest snapshot is the current version; this also covers the sole one
            if rec.versions[-1].name == name:
                raise ResourceConflict(f"Cannot remove current version {name!r} of {path!r}")
            rec.versions.remove(version)
            logger.info("Deleted version %s of %s", name, path)
