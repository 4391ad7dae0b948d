# site_mapper/crawler/link_extractor.py
"""
Link extraction for SiteMapper: same-host, normalized, not-yet-visited anchors.
"""
from __future__ import annotations

import re
from typing import Container, List
from urllib.parse import urljoin, urlsplit

from bs4.element import Tag

from site_mapper.crawler.normalizer import normalize_url
from site_mapper.errors import InvalidUrlError
from site_mapper.parser.html_parser import HtmlInput, make_soup

__all__ = ("SKIPPED_SCHEMES", "EXCLUDED_EXTENSIONS", "EXCLUDED_SEGMENTS", "is_excluded_path", "extract_links")

SKIPPED_SCHEMES = ("javascript:", "mailto:", "tel:")

EXCLUDED_EXTENSIONS = frozenset(
    {
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".zip", ".rar", ".tar", ".gz", ".7z",
        ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".svg", ".webp", ".ico",
        ".mp3", ".mp4", ".avi", ".mov", ".wmv", ".flv",
        ".css", ".js", ".json", ".xml", ".rss", ".atom",
        ".woff", ".woff2", ".ttf", ".eot", ".exe", ".dmg",
    }
)
EXCLUDED_SEGMENTS = frozenset({"admin", "login", "api"})

_EXT_RE = re.compile(r"(\.[a-z0-9]+)$")


def is_excluded_path(path: str) -> bool:
    """True for binary/document/asset files and ``/admin/``, ``/login/``, ``/api/`` segments."""
    lowered = path.lower()
    match = _EXT_RE.search(lowered.rsplit("/", 1)[-1])
    if match and match.group(1) in EXCLUDED_EXTENSIONS:
        return True
    return any(segment in EXCLUDED_SEGMENTS for segment in lowered.split("/"))


def _clean_href(raw: str) -> str:
    href = raw.strip()
    if href.lower().startswith(SKIPPED_SCHEMES):
        return ""
    href = href.split("#", 1)[0].split("?", 1)[0]
    if href in ("/", "."):
        return ""
    return href


def extract_links(
    html: HtmlInput,
    page_url: str,
    base_host: str,
    visited: Container[str] = (),
) -> List[str]:
    """
    Return normalized same-host links found in ``<a href>`` of *html*.

    Skips non-navigable schemes, empty and self links, other hosts (exact
    hostname match, no subdomain folding), excluded paths and anything in
    *visited*. Order is first-seen, without duplicates.
    """
    soup = make_soup(html)
    base_host = base_host.lower()
    links: dict[str, None] = {}
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        href = _clean_href(href_val)
        if not href:
            continue
        try:
            url = normalize_url(urljoin(page_url, href))
        except (InvalidUrlError, ValueError):
            continue
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or parts.hostname != base_host:
            continue
        if is_excluded_path(parts.path) or url in visited or url in links:
            continue
        links[url] = None
    return list(links)
