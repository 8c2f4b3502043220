"""Shared httpx plumbing for the remote clients."""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator

import httpx

from photogallery.errors import NetworkError


def validate_url(url: str) -> httpx.URL:
    """Parse ``url`` and require an absolute http(s) URL."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise NetworkError(url, f"invalid URL: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise NetworkError(url, "invalid URL: expected an absolute http(s) URL")
    return parsed


def check_status(url: str, response: httpx.Response) -> None:
    """Only 200 counts as success."""
    if response.status_code != 200:
        raise NetworkError(
            url,
            f"unexpected status {response.status_code}",
            status_code=response.status_code,
        )


class HttpClientMixin:
    """Reuses an injected ``httpx.AsyncClient`` or opens one per request."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
        user_agent: str = "photogallery/0.1",
    ) -> None:
        self._client = client
        self._timeout = timeout_seconds
        self._headers = {"User-Agent": user_agent}

    @contextlib.asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    async def _get(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        async with self._session() as client:
            try:
                response = await client.get(
                    url, params=params, headers=self._headers, follow_redirects=True
                )
            except httpx.HTTPError as exc:
                raise NetworkError(url, f"transport failure: {exc}") from exc
        check_status(url, response)
        return response
