from __future__ import annotations

import logging
from typing import Optional

import httpx

from fcrepo_client import paths
from fcrepo_client.content import Content
from fcrepo_client.errors import NotFoundError, RepositoryError
from fcrepo_client.resources import NON_RDF_SOURCE_LINK, LDP, Datastream, RepoObject, Resource
from fcrepo_client.transport import Transport

logger = logging.getLogger(__name__)

EXTERNAL_BODY_MEDIA_TYPE = "message/external-body"


class Repository:
    """
    Entry point of the client: addresses resources by path under a base URL.

        repo = Repository("http://localhost:8080/rest/")
        obj = repo.create_object("books/moby-dick")
        ds = repo.create_datastream("books/moby-dick/text", Content.from_text("Call me Ishmael."))

    Pass `http_client` to reuse an existing httpx.Client (for example a
    FastAPI TestClient); otherwise one is created with `timeout` seconds.
    """

    def __init__(
        self,
        repository_url: str,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._url = repository_url.rstrip("/") + "/"
        self.transport = Transport(http_client=http_client, timeout=timeout)

    def __enter__(self) -> "Repository":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    # --- addressing ---
    @property
    def repository_url(self) -> str:
        return self._url

    def url_for(self, path: Optional[str]) -> str:
        return self._url + paths.quote_path(path)

    def path_for(self, url: str) -> str:
        return paths.path_from_url(self._url, url)

    def exists(self, path: str) -> bool:
        """True if live, False if absent; tombstoned paths raise GoneError."""
        try:
            self.transport.request("HEAD", self.url_for(path))
        except NotFoundError:
            return False
        return True

    def _is_datastream(self, url: str) -> bool:
        response = self.transport.request("HEAD", url)
        return str(LDP.NonRDFSource) in response.headers.get("link", "")

    # --- reads ---
    def get_resource(self, path: str) -> Resource:
        if self._is_datastream(self.url_for(path)):
            return Datastream(self, path)
        return RepoObject(self, path)

    def get_object(self, path: str) -> RepoObject:
        url = self.url_for(path)
        if self._is_datastream(url):
            raise RepositoryError(f"{path!r} is a datastream, not an object", url=url)
        return RepoObject(self, path)

    def get_datastream(self, path: str) -> Datastream:
        url = self.url_for(path)
        if not self._is_datastream(url):
            raise RepositoryError(f"{path!r} is an object, not a datastream", url=url)
        return Datastream(self, path)

    def get_object_version(self, path: str, name: str) -> RepoObject:
        view = RepoObject(self, path, version=name)
        if self._is_datastream(view.url):
            raise RepositoryError(f"{path!r} is a datastream, not an object", url=view.url)
        return view

    def get_datastream_version(self, path: str, name: str) -> Datastream:
        view = Datastream(self, path, version=name)
        if not self._is_datastream(view.url):
            raise RepositoryError(f"{path!r} is an object, not a datastream", url=view.url)
        return view

    # --- creation ---
    def _created_path(self, response: httpx.Response) -> str:
        return self.path_for(response.headers["location"])

    def create_object(self, path: str) -> RepoObject:
        response = self.transport.request("PUT", self.url_for(path))
        logger.info("Created object %s", path)
        return RepoObject(self, self._created_path(response))

    def create_resource(self, path: Optional[str] = None) -> RepoObject:
        """Create an object at `path`, or at a server-minted root path when empty."""
        if paths.normalize(path):
            return self.create_object(path)
        response = self.transport.request("POST", self.url_for(None))
        return RepoObject(self, self._created_path(response))

    def create_datastream(self, path: str, content: Content) -> Datastream:
        response = self.transport.request(
            "PUT",
            self.url_for(path),
            headers={"Content-Type": content.content_type, "Link": NON_RDF_SOURCE_LINK},
            content=content.data,
        )
        logger.info("Created datastream %s (%s)", path, content.content_type)
        return Datastream(self, self._created_path(response))

    def create_or_update_redirect_datastream(self, path: str, url: str) -> Datastream:
        """Store a datastream whose content is fetched from `url` on every read."""
        content_type = f'{EXTERNAL_BODY_MEDIA_TYPE}; access-type=URL; URL="{url}"'
        if self.exists(path):
            datastream = Datastream(self, path)
            datastream.update_content(Content(content_type=content_type))
            return datastream
        return self.create_datastream(path, Content(content_type=content_type))
