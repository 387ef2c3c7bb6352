"""Composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from loguru import logger

from cardlink.application.metadata_service import MetadataService
from cardlink.config.settings import Settings
from cardlink.core import SERVICE_NAME
from cardlink.domain.metadata_cache import MetadataCache
from cardlink.domain.metadata_fetcher import MetadataFetcher
from cardlink.domain.metadata_parser import MetadataParser
from cardlink.domain.models import ServiceOptions
from cardlink.infrastructure.http.factory import create_http_client
from cardlink.ports.http_client import AbstractHttpClient
from cardlink.ports.image_saver import ImageAttachmentSaver


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class MetadataDependencies:
    """Holds wired pipeline dependencies and their lifecycle."""

    def __init__(
        self,
        *,
        settings: Settings,
        image_saver: ImageAttachmentSaver | None = None,
        http_client: AbstractHttpClient | None = None,
    ) -> None:
        self._settings = settings
        self._image_saver = image_saver
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._metadata_service: MetadataService | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def metadata_service(self) -> MetadataService:
        if self._metadata_service is None:
            raise RuntimeError("metadata_service is not initialized")
        return self._metadata_service

    def connect(self) -> MetadataService:
        if self._http_client is None:
            self._http_client = create_http_client(self._settings)

        options = ServiceOptions.from_settings(self._settings)
        self._metadata_service = MetadataService(
            MetadataFetcher(self._http_client, options.fetch),
            MetadataParser(),
            MetadataCache(options.cache),
            image_saver=self._image_saver,
            options=options,
        )
        _log("metadata_service_ready", enable_cache=options.enable_cache)
        return self._metadata_service

    async def close(self) -> None:
        if self._http_client is not None and self._owns_http_client:
            try:
                await self._http_client.close()
            except Exception as exc:
                logger.warning("http client close failed: {}", exc)
            self._http_client = None
        self._metadata_service = None


@asynccontextmanager
async def create_metadata_service(
    settings: Settings | None = None,
    image_saver: ImageAttachmentSaver | None = None,
    *,
    http_client: AbstractHttpClient | None = None,
) -> AsyncIterator[MetadataService]:
    deps = MetadataDependencies(
        settings=settings or Settings(),
        image_saver=image_saver,
        http_client=http_client,
    )
    try:
        yield deps.connect()
    finally:
        await deps.close()
