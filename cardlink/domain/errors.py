"""Typed errors raised by the link metadata pipeline.

Callers see exactly one of NetworkError, FetchTimeoutError, ParseError or
CacheError, or a valid LinkMetadata.
"""
from __future__ import annotations


class LinkMetadataError(Exception):
    """Base error for link metadata acquisition failures."""


class NetworkError(LinkMetadataError):
    """Raised when fetching a URL fails after all retries."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(f"failed to fetch {url}: {message}")
        self.reason = message
        self.url = url


class FetchTimeoutError(LinkMetadataError, TimeoutError):
    """Raised when the last fetch attempt for a URL timed out."""

    def __init__(self, url: str, timeout_seconds: float) -> None:
        super().__init__(f"request to {url} timed out ({timeout_seconds}s)")
        self.url = url
        self.timeout_seconds = timeout_seconds


class ParseError(LinkMetadataError):
    """Raised when HTML cannot be turned into a metadata record."""

    def __init__(self, message: str, source: str) -> None:
        super().__init__(f"failed to parse content: {message}")
        self.reason = message
        self.source = source


class CacheError(LinkMetadataError):
    """Raised on unexpected internal cache failures (a miss is not an error)."""

    def __init__(self, message: str) -> None:
        super().__init__(f"cache error: {message}")
        self.reason = message
