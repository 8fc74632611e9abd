from .api import VersionListOut, VersionOut
from .records import (
    ContentRecord,
    PathEntry,
    PathState,
    Properties,
    ResourceKind,
    ResourceRecord,
    VersionRecord,
)
__all__ = [
    "ContentRecord",
    "PathEntry",
    "PathState",
    "Properties",
    "ResourceKind",
    "ResourceRecord",
    "VersionListOut",
    "VersionOut",
    "VersionRecord",
]
