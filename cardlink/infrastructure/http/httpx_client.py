"""Concrete HTTP client implementation using httpx (injected where AbstractHttpClient is needed)."""
from __future__ import annotations

from typing import Mapping

import httpx

from cardlink.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    HttpResponse,
)


class _HttpxResponseAdapter:
    """Adapts httpx.Response to the HttpResponse protocol."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._response.headers)

    @property
    def text(self) -> str:
        return self._response.text

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def url(self) -> str:
        return str(self._response.url)


class HttpxHttpClient(AbstractHttpClient):
    """AbstractHttpClient implementation using httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def get(
        self,
        url: str,
        *,
        timeout: float,
        follow_redirects: bool = True,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        try:
            response = await self._client.get(
                url,
                timeout=httpx.Timeout(timeout),
                follow_redirects=follow_redirects,
                headers=dict(headers or {}),
            )
            return _HttpxResponseAdapter(response)
        except httpx.TimeoutException as exc:
            raise HttpClientTimeoutError(f"timeout while fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise HttpClientError(f"http fetch failed for {url}: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()
