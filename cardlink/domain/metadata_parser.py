"""HTML metadata parser built from an ordered chain of extraction strategies.

The document is parsed once with BeautifulSoup and handed to each strategy in
registration order (Open Graph, Twitter Card, standard HTML tags). Every
strategy returns only the fields it found; results are merged so that a later
strategy overwrites any field an earlier one produced.
"""
from __future__ import annotations

import re
from typing import Any, Protocol
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from cardlink.domain.errors import ParseError
from cardlink.domain.models import LinkMetadata

_LINE_BREAKS = re.compile(r"\r\n|\n|\r")
_NORMALIZED_FIELDS = ("title", "description")


class MetadataStrategy(Protocol):
    """One extraction rule producing a partial metadata record."""

    name: str

    def extract(self, url: str, document: BeautifulSoup) -> dict[str, str]: ...


def _meta_content(document: BeautifulSoup, **attrs: str) -> str | None:
    tag = document.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = str(tag.get("content") or "").strip()
    return content or None


def _produced(**fields: str | None) -> dict[str, str]:
    return {key: value for key, value in fields.items() if value}


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


class OpenGraphStrategy:
    name = "open_graph"

    def extract(self, url: str, document: BeautifulSoup) -> dict[str, str]:
        return _produced(
            title=_meta_content(document, property="og:title"),
            description=_meta_content(document, property="og:description"),
            image=_meta_content(document, property="og:image"),
            site_name=_meta_content(document, property="og:site_name"),
        )


class TwitterCardStrategy:
    name = "twitter_card"

    def extract(self, url: str, document: BeautifulSoup) -> dict[str, str]:
        return _produced(
            title=_meta_content(document, name="twitter:title"),
            description=_meta_content(document, name="twitter:description"),
            image=_meta_content(document, name="twitter:image"),
        )


class StandardHtmlStrategy:
    """Plain <title>/<h1>, meta description and favicon link tags."""

    name = "standard_html"

    def extract(self, url: str, document: BeautifulSoup) -> dict[str, str]:
        title: str | None = None
        if document.title is not None:
            title = document.title.get_text().strip() or None
        if not title:
            h1 = document.find("h1")
            if h1 is not None:
                title = h1.get_text().strip() or None

        return _produced(
            title=title,
            description=_meta_content(document, name="description"),
            favicon=self._favicon(document, url),
        )

    def _favicon(self, document: BeautifulSoup, url: str) -> str:
        for link in document.find_all("link"):
            if not self._is_icon_rel(link.get("rel")):
                continue
            href = link.get("href")
            if not href:
                break
            href = str(href).strip()
            if urlparse(href).scheme:
                return href
            if href.startswith("/") and not href.startswith("//"):
                return f"{_origin(url)}{href}"
            return urljoin(url, href)
        return f"{_origin(url)}/favicon.ico"

    @staticmethod
    def _is_icon_rel(rel: Any) -> bool:
        # bs4 splits rel into a list of tokens
        if not rel:
            return False
        tokens = rel.split() if isinstance(rel, str) else list(rel)
        return " ".join(token.lower() for token in tokens) in ("icon", "shortcut icon")


def default_strategies() -> list[MetadataStrategy]:
    return [OpenGraphStrategy(), TwitterCardStrategy(), StandardHtmlStrategy()]


def normalize_text(value: str) -> str:
    """Make a string safe for a double-quoted scalar: no line breaks, escaped \\ and "."""
    value = _LINE_BREAKS.sub("", value)
    value = value.replace("\\", "\\\\").replace('"', '\\"')
    return value.strip()


class MetadataParser:
    """Turns (url, html) into a LinkMetadata record. Pure apart from the strategy list."""

    def __init__(self, strategies: list[MetadataStrategy] | None = None) -> None:
        self._strategies: list[MetadataStrategy] = (
            list(strategies) if strategies is not None else default_strategies()
        )

    @property
    def strategies(self) -> tuple[MetadataStrategy, ...]:
        return tuple(self._strategies)

    def register_strategy(self, strategy: MetadataStrategy) -> None:
        self._strategies.append(strategy)

    def parse(self, url: str, html_content: str) -> LinkMetadata:
        try:
            host = self._hostname(url)
            if not isinstance(html_content, str):
                raise TypeError(f"html content must be str, got {type(html_content).__name__}")
            document = BeautifulSoup(html_content, "html.parser")

            fields: dict[str, Any] = {"url": url, "host": host, "indent": 0}
            for strategy in self._strategies:
                fields.update(strategy.extract(url, document))

            for key in _NORMALIZED_FIELDS:
                if fields.get(key):
                    fields[key] = normalize_text(fields[key])
            if not fields.get("title"):
                fields["title"] = url
            if fields.get("image"):
                fields["image"] = urljoin(url, str(fields["image"]).strip())

            return LinkMetadata(**fields)
        except ParseError:
            raise
        except Exception as exc:
            source = html_content if isinstance(html_content, str) else repr(html_content)
            raise ParseError(str(exc), source) from exc

    @staticmethod
    def _hostname(url: str) -> str:
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.hostname:
            raise ValueError(f"invalid url: {url!r}")
        return parsed.hostname
