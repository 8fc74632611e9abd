"""Thin wrapper over httpx that turns error responses into typed exceptions."""
from __future__ import annotations

import logging
import os
from typing import Dict, Optional

import httpx

from fcrepo_client.errors import TransportError, error_for_status

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = float(os.getenv("FCREPO_CLIENT_TIMEOUT", 30))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
        return body["error"]["message"]
    except Exception:
        text = response.text.strip()
        return text or response.reason_phrase


def raise_for_response(response: httpx.Response, patch: bool = False) -> None:
    if response.is_success:
        return
    prefix = f"{response.status_code} {response.reason_phrase}"
    detail = _error_message(response)
    message = detail if detail.startswith(prefix) else f"{prefix}: {detail}"
    raise error_for_status(response.status_code, message, url=str(response.request.url), patch=patch)


class Transport:
    """
    Owns (or borrows) an httpx.Client. Every call blocks until the server
    answers; nothing is cached.
    """

    def __init__(self, http_client: Optional[httpx.Client] = None, timeout: Optional[float] = None) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=httpx.Timeout(timeout or DEFAULT_TIMEOUT))

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
        patch: bool = False,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(
                method, url, headers=headers, content=content, follow_redirects=follow_redirects
            )
        except httpx.RequestError as e:
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e
        raise_for_response(response, patch=patch)
        return response

    def stream(self, url: str) -> httpx.Response:
        """GET with a streamed body; the caller must close the response."""
        logger.debug("GET %s (stream)", url)
        try:
            request = self._client.build_request("GET", url)
            response = self._client.send(request, stream=True, follow_redirects=True)
        except httpx.RequestError as e:
            raise TransportError(f"GET {url} failed: {e}", url=url) from e
        if not response.is_success:
            try:
                response.read()
                raise_for_response(response)
            finally:
                response.close()
        return response

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
