from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field
from rdflib.term import Identifier, URIRef


# predicate -> values (URIRef | Literal)
Properties = Dict[URIRef, Set[Identifier]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def copy_properties(properties: Properties) -> Properties:
    return {p: set(values) for p, values in properties.items()}


class ResourceKind(str, Enum):
    OBJECT = "object"
    DATASTREAM = "datastream"


class PathState(str, Enum):
    LIVE = "live"
    TOMBSTONED = "tombstoned"


class ContentRecord(BaseModel):
    """Datastream payload: stored bytes, or a redirect to an external URL."""

    data: bytes = b""
    content_type: str = "application/octet-stream"
    redirect_url: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_url is not None


class VersionRecord(BaseModel):
    """Full, independent snapshot of a resource at creation time."""

    name: str
    created_at: datetime = Field(default_factory=utcnow)
    properties: Properties = Field(default_factory=dict)
    content: Optional[ContentRecord] = None

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)


class ResourceRecord(BaseModel):
    path: str
    kind: ResourceKind
    created_at: datetime = Field(default_factory=utcnow)
    last_modified: datetime = Field(default_factory=utcnow)
    properties: Properties = Field(default_factory=dict)
    content: Optional[ContentRecord] = None
    versions: List[VersionRecord] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def is_datastream(self) -> bool:
        return self.kind == ResourceKind.DATASTREAM

    def touch(self) -> None:
        self.last_modified = utcnow()

    def find_version(self, name: str) -> Optional[VersionRecord]:
        for v in self.versions:
            if v.name == name:
                return v
        return None

    def view_at(self, version: VersionRecord) -> "ResourceRecord":
        """Read-only stand-in for this resource as captured by `version`."""
        return ResourceRecord(
            path=self.path,
            kind=self.kind,
            created_at=version.created_at,
            last_modified=version.created_at,
            properties=version.properties,
            content=version.content,
        )

    def duplicate(self, path: str) -> "ResourceRecord":
        """Independent copy of the current state at `path`; versions are not carried."""
        now = utcnow()
        return ResourceRecord(
            path=path,
            kind=self.kind,
            created_at=now,
            last_modified=now,
            properties=copy_properties(self.properties),
            content=self.content.model_copy() if self.content is not None else None,
        )


class PathEntry(BaseModel):
    """What currently occupies a path. Absent paths have no entry at all."""

    state: PathState
    resource: Optional[ResourceRecord] = None
    tombstoned_at: Optional[datetime] = None

    @classmethod
    def live(cls, resource: ResourceRecord) -> "PathEntry":
        return cls(state=PathState.LIVE, resource=resource)

    @classmethod
    def tombstone(cls) -> "PathEntry":
        return cls(state=PathState.TOMBSTONED, tombstoned_at=utcnow())
