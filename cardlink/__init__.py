"""Link metadata acquisition pipeline for card-style link blocks."""
from __future__ import annotations

from cardlink.application.metadata_service import MetadataService
from cardlink.domain.errors import (
    CacheError,
    FetchTimeoutError,
    LinkMetadataError,
    NetworkError,
    ParseError,
)
from cardlink.domain.models import CacheOptions, FetchOptions, LinkMetadata, ServiceOptions

__all__ = [
    "CacheError",
    "CacheOptions",
    "FetchOptions",
    "FetchTimeoutError",
    "LinkMetadata",
    "LinkMetadataError",
    "MetadataService",
    "NetworkError",
    "ParseError",
    "ServiceOptions",
]
