"""Shared HTTP plumbing for requesting upstream API resources."""

from __future__ import annotations

import logging

import httpx

from pipelines.auth import TokenResolver
from pipelines.errors import AuthError, TransportError

logger = logging.getLogger(__name__)

AUTHORIZATION_SCHEME = "token"


class HttpFetcher:
    """Issue single-attempt, optionally authenticated GET requests.

    The status code is never inspected: a non-2xx response is returned to the
    caller like any other. ``httpx.Client.get`` reads the body in full and
    releases the connection before returning, on success and failure alike.
    """

    def __init__(self, client: httpx.Client, resolver: TokenResolver) -> None:
        self._client = client
        self._resolver = resolver

    def _build_headers(self) -> dict[str, str]:
        try:
            credential = self._resolver.resolve()
        except (OSError, UnicodeDecodeError) as exc:
            raise AuthError(f"Unable to read API token file: {exc}") from exc

        if not credential:
            return {}
        return {"Authorization": f"{AUTHORIZATION_SCHEME} {credential}"}

    def fetch(self, url: str) -> httpx.Response:
        headers = self._build_headers()
        try:
            request = self._client.build_request("GET", url, headers=headers)
            response = self._client.send(request)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc

        logger.debug("GET %s -> %s", url, response.status_code)
        return response


def build_client(
    *,
    timeout: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create the client used for one gather cycle."""

    return httpx.Client(timeout=timeout, follow_redirects=True, transport=transport)


__all__ = ["HttpFetcher", "build_client", "AUTHORIZATION_SCHEME"]
