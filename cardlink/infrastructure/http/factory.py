"""HTTP client factory: builds AbstractHttpClient from settings (no provider logic in composition)."""
from __future__ import annotations

import httpx

from cardlink.config.settings import Settings
from cardlink.infrastructure.http.httpx_client import HttpxHttpClient
from cardlink.ports.http_client import AbstractHttpClient


def create_http_client(settings: Settings) -> AbstractHttpClient:
    """Build an HTTP client from settings. Timeouts and headers are applied per-request."""
    async_client = httpx.AsyncClient(max_redirects=settings.fetch_max_redirects)
    return HttpxHttpClient(async_client)
