from __future__ import annotations

from typing import Iterator, Optional

import httpx
from pydantic import BaseModel


class Content(BaseModel):
    """Bytes to upload plus their content type."""

    data: bytes = b""
    content_type: str = "application/octet-stream"

    @classmethod
    def from_text(cls, text: str, content_type: str = "text/plain") -> "Content":
        return cls(data=text.encode("utf-8"), content_type=content_type)


class ContentStream:
    """
    Readable body of a datastream (current or historical).

    Holds an open HTTP response; use it as a context manager, or call
    close(), so the connection is released on every exit path.

        with datastream.get_content() as stream:
            data = stream.read()
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def content_type(self) -> Optional[str]:
        return self._response.headers.get("content-type")

    @property
    def url(self) -> str:
        """Where the bytes were actually served from (after redirects)."""
        return str(self._response.url)

    def read(self) -> bytes:
        return self._response.read()

    def text(self, encoding: str = "utf-8") -> str:
        return self.read().decode(encoding)

    def iter_bytes(self, chunk_size: Optional[int] = None) -> Iterator[bytes]:
        return self._response.iter_bytes(chunk_size)

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    def close(self) -> None:
        self._response.close()

    def __enter__(self) -> "ContentStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
