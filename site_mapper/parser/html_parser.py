# === FILE: site_mapper/parser/html_parser.py ===
"""HTML parsing utilities for SiteMapper.

Exposes :func:`parse_html` (used by the crawler for every fetched page) and
the :class:`ParsedPage` dataclass carrying the metadata a sitemap needs from
one page:

* title: ``<title>`` text, falling back to the first ``<h1>``; ``None`` if both
  are missing or blank.
* last_modified: ``<meta name="last-modified">`` or
  ``<meta property="article:modified_time">`` content, ``None`` if absent.

Outbound links are handled separately by
:func:`site_mapper.crawler.link_extractor.extract_links`.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("ParsedPage", "parse_html", "make_soup", "extract_title", "extract_last_modified")

HtmlInput = Union[str, bytes, BeautifulSoup]


@dataclass(slots=True, frozen=True)
class ParsedPage:
    """Metadata extracted from one HTML document."""

    url: str
    title: Optional[str]
    last_modified: Optional[str]


def make_soup(html: HtmlInput) -> BeautifulSoup:
    """Parse *html* unless it is already a soup."""
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html, "html.parser")


def _text_of(tag: object) -> Optional[str]:
    if not isinstance(tag, Tag):
        return None
    text = tag.get_text().strip()
    return text or None


def extract_title(soup: BeautifulSoup) -> Optional[str]:
    return _text_of(soup.find("title")) or _text_of(soup.find("h1"))


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if not isinstance(tag, Tag):
        return None
    content = tag.get("content")
    if not isinstance(content, str):
        return None
    return content.strip() or None


def extract_last_modified(soup: BeautifulSoup) -> Optional[str]:
    return _meta_content(soup, name="last-modified") or _meta_content(
        soup, property="article:modified_time"
    )


def parse_html(html: HtmlInput, url: str = "") -> ParsedPage:
    """Parse raw HTML (or an existing soup) into a :class:`ParsedPage`."""
    soup = make_soup(html)
    return ParsedPage(url=url, title=extract_title(soup), last_modified=extract_last_modified(soup))
