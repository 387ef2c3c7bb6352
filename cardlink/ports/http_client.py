"""HTTP client port: contract for performing GET requests.

Domain and application code depend on this port; infrastructure (e.g. httpx)
implements it. Keeps domain free of infrastructure imports.
"""
from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable


class HttpClientError(Exception):
    """Base for HTTP client transport failures."""


class HttpClientTimeoutError(HttpClientError):
    """Raised when the request times out."""


@runtime_checkable
class HttpResponse(Protocol):
    """Minimal read-only view of an HTTP response."""

    @property
    def headers(self) -> Mapping[str, str]: ...

    @property
    def text(self) -> str: ...

    @property
    def status_code(self) -> int: ...

    @property
    def url(self) -> str: ...


@runtime_checkable
class AbstractHttpClient(Protocol):
    """Port: perform GET requests. Implementations live in infrastructure."""

    async def get(
        self,
        url: str,
        *,
        timeout: float,
        follow_redirects: bool = True,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """Perform GET; raise HttpClientTimeoutError or HttpClientError on transport failure.

        Non-2xx responses are returned, not raised.
        """
        ...

    async def close(self) -> None:
        """Release resources (e.g. connection pool). No-op allowed if nothing to close."""
        ...
