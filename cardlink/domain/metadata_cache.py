"""In-memory metadata cache with lazy TTL expiry and capacity-bounded eviction."""
from __future__ import annotations

import threading
import time
from typing import Any, Callable

from loguru import logger

from cardlink.core import SERVICE_NAME
from cardlink.domain.errors import CacheError
from cardlink.domain.models import CacheItem, CacheOptions, LinkMetadata


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).debug("")


class MetadataCache:
    """Stores resolved metadata keyed by a normalized URL.

    Keys are the trimmed, fully lower-cased URL, so URLs differing only by
    path casing share an entry. Expired items are dropped on the next ``get``
    for their key; there is no background sweep. When a ``set`` pushes the
    store over ``max_items``, the single item with the smallest ``created_at``
    is evicted. Records are copied on the way in and out so callers never
    hold a live reference to cached state.
    """

    def __init__(
        self,
        options: CacheOptions | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._options = options or CacheOptions()
        self._clock = clock
        self._items: dict[str, CacheItem] = {}
        self._lock = threading.Lock()

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    @staticmethod
    def cache_key(url: str) -> str:
        return url.strip().lower()

    def get(self, url: str) -> LinkMetadata | None:
        try:
            key = self.cache_key(url)
            with self._lock:
                item = self._items.get(key)
                if item is None:
                    return None
                if item.is_expired(self._clock()):
                    del self._items[key]
                    _log("cache_expired", key=key)
                    return None
                return item.data.copy()
        except Exception as exc:
            raise CacheError(f"failed to get cache entry for {url}: {exc}") from exc

    def set(self, url: str, metadata: LinkMetadata) -> None:
        try:
            key = self.cache_key(url)
            with self._lock:
                now = self._clock()
                self._items[key] = CacheItem(
                    data=metadata.copy(),
                    created_at=now,
                    expires_at=now + self._options.ttl_seconds,
                )
                if len(self._items) > self._options.max_items:
                    self._evict_oldest()
        except Exception as exc:
            raise CacheError(f"failed to set cache entry for {url}: {exc}") from exc

    def delete(self, url: str) -> None:
        try:
            with self._lock:
                self._items.pop(self.cache_key(url), None)
        except Exception as exc:
            raise CacheError(f"failed to delete cache entry for {url}: {exc}") from exc

    def clear(self) -> None:
        try:
            with self._lock:
                self._items.clear()
        except Exception as exc:
            raise CacheError(f"failed to clear cache: {exc}") from exc

    def get_stats(self) -> dict[str, Any]:
        try:
            with self._lock:
                return {"size": len(self._items), "keys": list(self._items)}
        except Exception as exc:
            raise CacheError(f"failed to read cache stats: {exc}") from exc

    def _evict_oldest(self) -> None:
        # Linear scan; ties resolve to the earliest inserted key.
        oldest_key = min(self._items, key=lambda k: self._items[k].created_at)
        del self._items[oldest_key]
        _log("cache_evicted", key=oldest_key)
