"""Unit tests for MetadataFetcher retry and error classification."""
from __future__ import annotations

import asyncio

import pytest

from cardlink.domain.errors import FetchTimeoutError, NetworkError
from cardlink.domain.metadata_fetcher import MetadataFetcher
from cardlink.domain.models import FetchOptions
from cardlink.ports.http_client import HttpClientError, HttpClientTimeoutError
from tests.fakes import FakeResponse, ScriptedHttpClient

URL = "https://example.com"


def test_success_on_first_attempt_returns_response(fast_options):
    client = ScriptedHttpClient(FakeResponse("<html><body>Test Content</body></html>"))
    fetcher = MetadataFetcher(client)

    result = asyncio.run(fetcher.fetch_content(URL, fast_options))

    assert result.text == "<html><body>Test Content</body></html>"
    assert result.status_code == 200
    assert result.final_url == URL
    assert len(client.calls) == 1
    assert client.calls[0]["timeout"] == 5.0
    assert client.calls[0]["follow_redirects"] is True


def test_default_options_are_used_when_none_given(recording_sleep):
    client = ScriptedHttpClient(FakeResponse("ok"))
    fetcher = MetadataFetcher(client, sleep=recording_sleep)

    asyncio.run(fetcher.fetch_content(URL))

    assert client.calls[0]["timeout"] == 10.0
    assert fetcher.default_options == FetchOptions()


def test_fails_once_then_succeeds_invokes_client_twice(recording_sleep):
    client = ScriptedHttpClient(
        HttpClientError("Network error"),
        FakeResponse("<html><body>Retry Success</body></html>"),
    )
    fetcher = MetadataFetcher(client, sleep=recording_sleep)

    result = asyncio.run(fetcher.fetch_content(URL))

    assert result.text == "<html><body>Retry Success</body></html>"
    assert len(client.calls) == 2
    assert recording_sleep.delays == [1.0]


def test_always_failing_raises_network_error_after_all_attempts(recording_sleep):
    client = ScriptedHttpClient(HttpClientError("Persistent network error"))
    fetcher = MetadataFetcher(client, sleep=recording_sleep)

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(fetcher.fetch_content(URL))

    assert len(client.calls) == 3
    assert excinfo.value.url == URL
    assert URL in str(excinfo.value)
    assert "Persistent network error" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, HttpClientError)


def test_fixed_delay_between_attempts_and_none_after_last(recording_sleep):
    client = ScriptedHttpClient(HttpClientError("down"))
    fetcher = MetadataFetcher(client, sleep=recording_sleep)
    options = FetchOptions(max_retries=4, retry_delay_seconds=0.5)

    with pytest.raises(NetworkError):
        asyncio.run(fetcher.fetch_content(URL, options))

    assert len(client.calls) == 5
    assert recording_sleep.delays == [0.5, 0.5, 0.5, 0.5]


def test_zero_retries_makes_single_attempt(recording_sleep):
    client = ScriptedHttpClient(HttpClientError("down"))
    fetcher = MetadataFetcher(client, sleep=recording_sleep)

    with pytest.raises(NetworkError):
        asyncio.run(fetcher.fetch_content(URL, FetchOptions(max_retries=0)))

    assert len(client.calls) == 1
    assert recording_sleep.delays == []


def test_timeout_on_last_attempt_raises_timeout_error(fast_options):
    client = ScriptedHttpClient(HttpClientTimeoutError(f"timeout while fetching {URL}"))
    fetcher = MetadataFetcher(client)

    with pytest.raises(FetchTimeoutError) as excinfo:
        asyncio.run(fetcher.fetch_content(URL, fast_options))

    assert len(client.calls) == 3
    assert excinfo.value.url == URL
    assert excinfo.value.timeout_seconds == 5.0
    assert isinstance(excinfo.value, TimeoutError)


def test_timeout_classified_from_message(fast_options):
    client = ScriptedHttpClient(RuntimeError("Request Timeout exceeded"))
    fetcher = MetadataFetcher(client)

    with pytest.raises(FetchTimeoutError):
        asyncio.run(fetcher.fetch_content(URL, fast_options))


def test_only_last_failure_is_classified(fast_options):
    client = ScriptedHttpClient(
        HttpClientTimeoutError("timeout"),
        HttpClientTimeoutError("timeout"),
        HttpClientError("connection refused"),
    )
    fetcher = MetadataFetcher(client)

    with pytest.raises(NetworkError, match="connection refused"):
        asyncio.run(fetcher.fetch_content(URL, fast_options))


def test_error_status_is_passed_through_as_success(fast_options):
    client = ScriptedHttpClient(FakeResponse("<title>Not Found</title>", status_code=404))
    fetcher = MetadataFetcher(client)

    result = asyncio.run(fetcher.fetch_content(URL, fast_options))

    assert result.status_code == 404
    assert result.text == "<title>Not Found</title>"
    assert len(client.calls) == 1


def test_option_headers_are_sent(fast_options):
    client = ScriptedHttpClient(FakeResponse("ok"))
    fetcher = MetadataFetcher(client)
    options = FetchOptions(retry_delay_seconds=0, headers={"User-Agent": "cardlink-test/1.0"})

    asyncio.run(fetcher.fetch_content(URL, options))

    assert client.calls[0]["headers"] == {"User-Agent": "cardlink-test/1.0"}


def test_invalid_fetch_options_rejected():
    with pytest.raises(ValueError):
        FetchOptions(timeout_seconds=0)
    with pytest.raises(ValueError):
        FetchOptions(max_retries=-1)
    with pytest.raises(ValueError):
        FetchOptions(retry_delay_seconds=-0.1)


def test_url_containing_timeout_is_not_classified_as_timeout(fast_options):
    url = "https://example.com/blog/request-timeout-guide"
    client = ScriptedHttpClient(HttpClientError(f"http fetch failed for {url}: connection refused"))
    fetcher = MetadataFetcher(client)

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(fetcher.fetch_content(url, fast_options))

    assert not isinstance(excinfo.value, FetchTimeoutError)
    assert excinfo.value.url == url


def test_client_error_caused_by_timeout_is_classified_as_timeout(fast_options):
    error = HttpClientError("http fetch failed for https://example.com")
    error.__cause__ = TimeoutError("read timed out")
    client = ScriptedHttpClient(error)
    fetcher = MetadataFetcher(client)

    with pytest.raises(FetchTimeoutError):
        asyncio.run(fetcher.fetch_content(URL, fast_options))
