"""Domain models."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Mapping

from cardlink.constants import (
    DEFAULT_CACHE_MAX_ITEMS,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_FETCH_MAX_RETRIES,
    DEFAULT_FETCH_RETRY_DELAY_SECONDS,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
)


@dataclass
class LinkMetadata:
    """Resolved metadata record for one URL.

    `image` may be rewritten to a local path after persistence; `local_image`
    always holds the persisted-copy reference when one exists.
    """

    url: str
    title: str
    description: str | None = None
    site_name: str | None = None
    host: str | None = None
    favicon: str | None = None
    image: str | None = None
    local_image: str | None = None
    indent: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.url, str) or not self.url:
            raise TypeError("metadata.url must be a non-empty str")
        if not isinstance(self.title, str):
            raise TypeError("metadata.title must be a str")
        if not isinstance(self.indent, int):
            raise TypeError("metadata.indent must be an int")

    def copy(self) -> "LinkMetadata":
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialisable dict without unset optional fields."""
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class FetchResult:
    """Raw response handed from the fetcher to the parser (value object)."""

    status_code: int
    text: str
    final_url: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FetchOptions:
    """Per-call fetch configuration. Durations are in seconds."""

    timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_FETCH_MAX_RETRIES
    retry_delay_seconds: float = DEFAULT_FETCH_RETRY_DELAY_SECONDS
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.retry_delay_seconds < 0:
            raise ValueError("retry_delay_seconds must be >= 0")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


@dataclass(frozen=True)
class CacheOptions:
    ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    max_items: int = DEFAULT_CACHE_MAX_ITEMS

    def __post_init__(self) -> None:
        if self.ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if self.max_items <= 0:
            raise ValueError("max_items must be a positive integer")


@dataclass(frozen=True)
class CacheItem:
    """One stored record; owned exclusively by MetadataCache."""

    data: LinkMetadata
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class ServiceOptions:
    """Configuration threaded into MetadataService at construction."""

    fetch: FetchOptions = field(default_factory=FetchOptions)
    cache: CacheOptions = field(default_factory=CacheOptions)
    enable_cache: bool = True
    download_images: bool = True
    prefer_local_images: bool = True
    indent_level: int = 0

    @staticmethod
    def from_settings(settings: Any) -> "ServiceOptions":
        headers: dict[str, str] = {}
        if settings.fetch_user_agent:
            headers["User-Agent"] = settings.fetch_user_agent
        return ServiceOptions(
            fetch=FetchOptions(
                timeout_seconds=float(settings.fetch_timeout_seconds),
                max_retries=int(settings.fetch_max_retries),
                retry_delay_seconds=float(settings.fetch_retry_delay_seconds),
                headers=headers,
            ),
            cache=CacheOptions(
                ttl_seconds=float(settings.cache_ttl_seconds),
                max_items=int(settings.cache_max_items),
            ),
            enable_cache=bool(settings.enable_cache),
            download_images=bool(settings.download_images),
            prefer_local_images=bool(settings.prefer_local_images),
            indent_level=int(settings.indent_level),
        )
