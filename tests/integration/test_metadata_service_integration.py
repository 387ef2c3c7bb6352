"""
Integration tests for the metadata pipeline using real HTTP and curated test URLs.

Requires network. Run with:
  pytest tests/integration -m integration -v
"""
from __future__ import annotations

import pytest

from cardlink.composition import create_metadata_service
from cardlink.config.settings import Settings
from cardlink.domain.errors import NetworkError
from tests.test_data import (
    TEST_URL_ERROR_STATUS,
    TEST_URL_REDIRECT,
    TEST_URL_UNRESOLVABLE,
    TEST_URLS_WITH_CARDS,
)


@pytest.fixture
def settings() -> Settings:
    # Browser-like User-Agent so sites that block default clients return 2xx
    return Settings(
        _env_file=None,
        FETCH_USER_AGENT="cardlink-test/1.0 (integration tests)",
        FETCH_MAX_RETRIES=1,
        FETCH_RETRY_DELAY_SECONDS=0.5,
    )


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize("url", TEST_URLS_WITH_CARDS, ids=lambda u: u.replace("https://", "")[:40])
async def test_real_page_yields_title_host_and_favicon(settings, url):
    async with create_metadata_service(settings) as service:
        metadata = await service.get_metadata(url)

    assert metadata.url == url
    assert metadata.title
    assert metadata.host and metadata.host in url
    assert metadata.favicon and metadata.favicon.startswith("http")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_second_call_is_served_from_cache(settings):
    url = TEST_URLS_WITH_CARDS[0]
    async with create_metadata_service(settings) as service:
        first = await service.get_metadata(url)
        second = await service.get_metadata(url)
        stats = service.get_cache_stats()

    assert first == second
    assert stats["size"] == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_redirects_are_followed(settings):
    async with create_metadata_service(settings) as service:
        metadata = await service.get_metadata(TEST_URL_REDIRECT)

    assert metadata.host == "httpbin.org"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_error_status_page_is_still_parsed(settings):
    async with create_metadata_service(settings) as service:
        metadata = await service.get_metadata(TEST_URL_ERROR_STATUS)

    assert metadata.title == TEST_URL_ERROR_STATUS


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unresolvable_host_raises_network_error(settings):
    async with create_metadata_service(settings) as service:
        with pytest.raises(NetworkError) as excinfo:
            await service.get_metadata(TEST_URL_UNRESOLVABLE)

    assert excinfo.value.url == TEST_URL_UNRESOLVABLE
