"""Metadata fetcher: HTTP GET with timeout and fixed-delay retry.

Uses the HTTP port (AbstractHttpClient); client is built in the composition root.
Domain depends only on ports, not on infrastructure. Any response the transport
returns counts as success; the status code is not used to reject pages.
"""
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger

from cardlink.core import SERVICE_NAME
from cardlink.core.backoff import fixed_delay_attempts
from cardlink.domain.errors import FetchTimeoutError, NetworkError
from cardlink.domain.models import FetchOptions, FetchResult
from cardlink.ports.http_client import AbstractHttpClient, HttpClientError, HttpClientTimeoutError


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (HttpClientTimeoutError, TimeoutError)):
        return True
    if isinstance(exc, HttpClientError):
        # adapter messages embed the url; only the underlying cause is inspected
        return exc.__cause__ is not None and _is_timeout(exc.__cause__)
    return "timeout" in str(exc).lower()


class MetadataFetcher:
    """Fetches page content using an injectable AbstractHttpClient.

    Makes up to ``max_retries + 1`` sequential attempts with a fixed
    ``retry_delay_seconds`` sleep between them. After the last failure the
    error is classified: timeouts raise FetchTimeoutError, anything else
    raises NetworkError. Stateless across calls.
    """

    def __init__(
        self,
        client: AbstractHttpClient,
        default_options: FetchOptions | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._default_options = default_options or FetchOptions()
        self._sleep = sleep

    @property
    def default_options(self) -> FetchOptions:
        return self._default_options

    async def fetch_content(self, url: str, options: FetchOptions | None = None) -> FetchResult:
        opts = options or self._default_options
        last_error: Exception | None = None

        async for attempt in fixed_delay_attempts(
            opts.retry_delay_seconds,
            opts.max_attempts,
            sleep=self._sleep,
        ):
            try:
                response = await self._client.get(
                    url,
                    timeout=opts.timeout_seconds,
                    follow_redirects=True,
                    headers=dict(opts.headers) or None,
                )
            except Exception as exc:
                last_error = exc
                _log(
                    "fetch_attempt_failed",
                    url=url,
                    attempt=attempt,
                    max_attempts=opts.max_attempts,
                    error=str(exc),
                )
                continue

            if response.status_code >= 400:
                logger.warning(
                    "fetched {} with status {}; passing body through", url, response.status_code
                )
            logger.debug(
                "fetched {} status={} final_url={} length={}",
                url,
                response.status_code,
                response.url,
                len(response.text or ""),
            )
            return FetchResult(
                status_code=int(response.status_code),
                text=response.text or "",
                final_url=str(response.url or url),
                headers=dict(response.headers),
            )

        _log("fetch_retries_exhausted", url=url, attempts=opts.max_attempts, error=str(last_error))
        if last_error is not None and _is_timeout(last_error):
            raise FetchTimeoutError(url, opts.timeout_seconds) from last_error
        message = str(last_error) if last_error is not None else "unknown network error"
        raise NetworkError(message or type(last_error).__name__, url) from last_error
