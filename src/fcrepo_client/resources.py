"""
Handles on repository resources.

A handle is just a repository plus a path (and optionally a version name);
every method goes to the server, nothing is cached locally.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

from rdflib import Graph, Namespace, URIRef
from rdflib.namespace import RDF
from rdflib.term import Node

from fcrepo_client import paths
from fcrepo_client.content import Content, ContentStream
from fcrepo_client.errors import RepositoryError

if TYPE_CHECKING:
    from fcrepo_client.repository import Repository

logger = logging.getLogger(__name__)

LDP = Namespace("http://www.w3.org/ns/ldp#")
NON_RDF_SOURCE_LINK = f'<{LDP.NonRDFSource}>;rel="type"'
SPARQL_UPDATE_MEDIA_TYPE = "application/sparql-update"
TURTLE_MEDIA_TYPE = "text/turtle"

Triple = Tuple[Node, Node, Node]


class Resource:
    """Capabilities shared by objects and datastreams."""

    def __init__(self, repository: "Repository", path: str, version: Optional[str] = None) -> None:
        self.repository = repository
        self.path = paths.normalize(path)
        self.version = version

    def __repr__(self) -> str:
        suffix = f" @{self.version}" if self.version else ""
        return f"<{type(self).__name__} {self.path!r}{suffix}>"

    @property
    def live_url(self) -> str:
        return self.repository.url_for(self.path)

    @property
    def url(self) -> str:
        if self.version is None:
            return self.live_url
        return self._version_url(self.version)

    @property
    def is_version(self) -> bool:
        return self.version is not None

    @property
    def _metadata_url(self) -> str:
        return self.url

    def _ensure_writable(self, action: str) -> None:
        if self.is_version:
            raise RepositoryError(f"Cannot {action} {self!r}: version views are read-only", url=self.url)

    def _request(self, method: str, url: str, **kwargs):
        return self.repository.transport.request(method, url, **kwargs)

    # --- properties ---
    def get_properties(self) -> Iterator[Triple]:
        """Current (or versioned) triples; each call fetches afresh."""
        response = self._request("GET", self._metadata_url, headers={"Accept": TURTLE_MEDIA_TYPE})
        graph = Graph().parse(data=response.text, format="turtle", publicID=self.url)
        return iter(graph.triples((None, None, None)))

    def update_properties(self, sparql_update: str) -> None:
        self._ensure_writable("update properties of")
        self._request(
            "PATCH",
            self._metadata_url,
            headers={"Content-Type": SPARQL_UPDATE_MEDIA_TYPE},
            content=sparql_update.encode("utf-8"),
            patch=True,
        )

    # --- lifecycle ---
    def delete(self) -> None:
        """Delete, leaving a tombstone at the path."""
        self._ensure_writable("delete")
        self._request("DELETE", self.url)
        logger.info("Deleted %s", self.path)

    def remove_tombstone(self) -> None:
        self._request("DELETE", f"{self.live_url}/fcr:tombstone")

    def force_delete(self) -> None:
        """Delete and clear the tombstone, leaving the path free."""
        self.delete()
        self.remove_tombstone()

    def _relocate(self, method: str, destination: str) -> "Resource":
        response = self._request(method, self.url, headers={"Destination": self.repository.url_for(destination)})
        new_path = self.repository.path_for(response.headers["location"])
        logger.info("%s %s -> %s", method, self.path, new_path)
        return type(self)(self.repository, new_path)

    def move(self, destination: str) -> "Resource":
        """Move the whole subtree; the source path is left tombstoned."""
        self._ensure_writable("move")
        return self._relocate("MOVE", destination)

    def force_move(self, destination: str) -> "Resource":
        moved = self.move(destination)
        self.remove_tombstone()
        return moved

    def copy(self, destination: str) -> "Resource":
        """Deep copy of the current subtree; the source is untouched."""
        self._ensure_writable("copy")
        return self._relocate("COPY", destination)

    # --- versions ---
    @property
    def _versions_url(self) -> str:
        return f"{self.live_url}/fcr:versions"

    def _version_url(self, name: str) -> str:
        return f"{self._versions_url}/{paths.quote_segment(name)}"

    def create_version_snapshot(self, name: str) -> None:
        self._ensure_writable("snapshot")
        self._request("POST", self._versions_url, headers={"Slug": name})

    def get_versions_name(self) -> List[str]:
        """Version names in creation order."""
        response = self._request("GET", self._versions_url)
        return [item["name"] for item in response.json()["items"]]

    def revert_to_version(self, name: str) -> None:
        self._ensure_writable("revert")
        self._request("PATCH", self._version_url(name))

    def delete_version(self, name: str) -> None:
        self._ensure_writable("delete a version of")
        self._request("DELETE", self._version_url(name))


class RepoObject(Resource):
    """A container: holds properties and child resources."""

    def create_object(self, slug: Optional[str] = None) -> "RepoObject":
        """Create a child object with a server-minted (or slug-suggested) name."""
        self._ensure_writable("add children to")
        headers = {"Slug": slug} if slug else None
        response = self._request("POST", self.url, headers=headers)
        return RepoObject(self.repository, self.repository.path_for(response.headers["location"]))

    def create_datastream(self, content: Content, slug: Optional[str] = None) -> "Datastream":
        self._ensure_writable("add children to")
        headers = {"Content-Type": content.content_type, "Link": NON_RDF_SOURCE_LINK}
        if slug:
            headers["Slug"] = slug
        response = self._request("POST", self.url, headers=headers, content=content.data)
        return Datastream(self.repository, self.repository.path_for(response.headers["location"]))

    def get_children(self, mixin: Optional[str] = None) -> List[Resource]:
        """Live children; `mixin` narrows to "object" or "datastream"."""
        graph = Graph()
        for triple in self.get_properties():
            graph.add(triple)
        children: List[Resource] = []
        for child in sorted(graph.objects(URIRef(self.url), LDP.contains)):
            is_datastream = (child, RDF.type, LDP.NonRDFSource) in graph
            if (mixin == "object" and is_datastream) or (mixin == "datastream" and not is_datastream):
                continue
            cls = Datastream if is_datastream else RepoObject
            children.append(cls(self.repository, self.repository.path_for(str(child))))
        return children


class Datastream(Resource):
    """A resource carrying content bytes (or a redirect) plus properties."""

    @property
    def _metadata_url(self) -> str:
        return f"{self.url}/fcr:metadata"

    def get_content(self) -> ContentStream:
        """
        Open the content for reading. Redirect datastreams are dereferenced,
        so the bytes are those of the target at read time.
        """
        return ContentStream(self.repository.transport.stream(self.url))

    def get_content_type(self) -> Optional[str]:
        response = self._request("HEAD", self.url)
        return response.headers.get("content-type")

    def update_content(self, content: Content) -> None:
        self._ensure_writable("update content of")
        self._request(
            "PUT",
            f"{self.url}/fcr:content",
            headers={"Content-Type": content.content_type},
            content=content.data,
        )
