from .content import Content, ContentStream
from .errors import (
    ConflictError,
    GoneError,
    NotFoundError,
    ParseError,
    RepositoryError,
    TransportError,
)
from .repository import Repository
from .resources import Datastream, RepoObject, Resource
__all__ = [
    "ConflictError",
    "Content",
    "ContentStream",
    "Datastream",
    "GoneError",
    "NotFoundError",
    "ParseError",
    "RepoObject",
    "Repository",
    "RepositoryError",
    "Resource",
    "TransportError",
]
