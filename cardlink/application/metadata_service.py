from __future__ import annotations

import hashlib
import time
from dataclasses import replace
from pathlib import PurePosixPath
from typing import Any
from urllib.parse import urlparse

from loguru import logger

from cardlink.constants import DEFAULT_IMAGE_EXTENSION
from cardlink.core import SERVICE_NAME
from cardlink.domain.errors import LinkMetadataError
from cardlink.domain.metadata_cache import MetadataCache
from cardlink.domain.metadata_fetcher import MetadataFetcher
from cardlink.domain.metadata_parser import MetadataParser
from cardlink.domain.models import LinkMetadata, ServiceOptions
from cardlink.ports.image_saver import ImageAttachmentSaver

_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".avif"}


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def image_file_name(page_url: str, image_url: str, *, now: float | None = None) -> str:
    """Attachment name derived from the page URL plus a millisecond timestamp."""
    digest = hashlib.sha1(page_url.encode("utf-8")).hexdigest()[:10]
    millis = int((time.time() if now is None else now) * 1000)
    suffix = PurePosixPath(urlparse(image_url).path).suffix.lower()
    if suffix not in _IMAGE_EXTENSIONS:
        suffix = DEFAULT_IMAGE_EXTENSION
    return f"image_{digest}_{millis}{suffix}"


class MetadataService:
    """
    Resolves link metadata: cache lookup, fetch, parse, optional image save, cache write.

    Fetch and parse errors propagate to the caller unchanged. Image persistence is
    best effort: a failing saver is logged and the remote image URL is kept.
    """

    def __init__(
        self,
        fetcher: MetadataFetcher,
        parser: MetadataParser | None = None,
        cache: MetadataCache | None = None,
        *,
        image_saver: ImageAttachmentSaver | None = None,
        options: ServiceOptions | None = None,
    ) -> None:
        self._options = options or ServiceOptions()
        self._fetcher = fetcher
        self._parser = parser if parser is not None else MetadataParser()
        self._cache = cache if cache is not None else MetadataCache(self._options.cache)
        self._image_saver = image_saver

    @property
    def options(self) -> ServiceOptions:
        return self._options

    async def get_metadata(self, url: str) -> LinkMetadata:
        if self._options.enable_cache:
            cached = self._cache.get(url)
            if cached is not None:
                _log("metadata_cache_hit", url=url)
                return cached

        response = await self._fetcher.fetch_content(url, self._options.fetch)
        metadata = self._parser.parse(url, response.text)
        if self._options.indent_level:
            metadata.indent = self._options.indent_level

        if metadata.image:
            metadata = await self._save_image(url, metadata)

        if self._options.enable_cache:
            self._cache.set(url, metadata)

        _log(
            "metadata_fetched",
            url=url,
            status_code=response.status_code,
            title=metadata.title,
            has_image=bool(metadata.image),
        )
        return metadata

    async def fetch_metadata(self, url: str) -> LinkMetadata | None:
        """Like get_metadata but returns None instead of raising pipeline errors."""
        try:
            return await self.get_metadata(url)
        except LinkMetadataError as exc:
            logger.warning("failed to fetch metadata for {}: {}", url, exc)
            return None

    def clear_cache(self, url: str | None = None) -> None:
        if url:
            self._cache.delete(url)
        else:
            self._cache.clear()

    def get_cache_stats(self) -> dict[str, Any]:
        return self._cache.get_stats()

    def update_options(self, **changes: Any) -> ServiceOptions:
        """Replace selected ServiceOptions fields.

        Changing the cache options starts an empty MetadataCache with the new
        options; the current cache's clock is carried over.
        """
        updated = replace(self._options, **changes)
        if updated.cache != self._options.cache:
            clock = getattr(self._cache, "clock", None)
            if clock is not None:
                self._cache = MetadataCache(updated.cache, clock=clock)
            else:
                self._cache = MetadataCache(updated.cache)
        self._options = updated
        return updated

    async def _save_image(self, url: str, metadata: LinkMetadata) -> LinkMetadata:
        if self._image_saver is None or not self._options.download_images:
            return metadata

        image_url = metadata.image or ""
        file_name = image_file_name(url, image_url)
        try:
            saved_path = await self._image_saver(image_url, file_name)
        except Exception as exc:
            logger.warning("image save failed for {} ({}): {}", url, image_url, exc)
            _log("image_save_failed", url=url, image=image_url, error=str(exc))
            return metadata

        if not saved_path:
            return metadata
        metadata.local_image = saved_path
        if self._options.prefer_local_images:
            metadata.image = saved_path
        _log("image_saved", url=url, image=image_url, local_image=saved_path)
        return metadata
