# site_mapper/sitemap/validator.py
"""Input and output validation for sitemap generation."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Sequence

from lxml import etree

from site_mapper.crawler.normalizer import is_http_url
from site_mapper.sitemap.models import (
    CHANGEFREQ_VALUES,
    MAX_SITEMAP_URLS,
    SITEMAP_NAMESPACE,
    SitemapEntry,
)

__all__ = ("ValidationResult", "validate_entries", "is_valid_lastmod", "validate_xml")


@dataclass(slots=True)
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def is_valid_lastmod(value: str) -> bool:
    """Accept ISO 8601 dates and datetimes (``2024-01-01``, ``2024-01-01T10:00:00Z``)."""
    try:
        datetime.fromisoformat(value.strip())
    except ValueError:
        return False
    return True


def _valid_priority(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return 0.0 <= value <= 1.0


def validate_entries(entries: Sequence[SitemapEntry]) -> ValidationResult:
    """
    Check every entry and collect all problems instead of stopping at the first.

    An empty list is rejected outright; every other check reports
    ``Page N: ...`` with a 1-based index.
    """
    errors: List[str] = []
    if not entries:
        return ValidationResult(False, ["Pages array cannot be empty"])
    if len(entries) > MAX_SITEMAP_URLS:
        errors.append(f"Sitemap cannot contain more than {MAX_SITEMAP_URLS:,} URLs")

    for index, entry in enumerate(entries, start=1):
        if not entry.url:
            errors.append(f"Page {index}: URL is required")
        elif not is_http_url(entry.url):
            errors.append(f"Page {index}: Invalid URL format")

        if entry.priority is not None and not _valid_priority(entry.priority):
            errors.append(f"Page {index}: Priority must be between 0.0 and 1.0")

        if entry.changefreq and entry.changefreq not in CHANGEFREQ_VALUES:
            errors.append(f"Page {index}: Invalid changefreq value")

        if entry.lastmod and not is_valid_lastmod(entry.lastmod):
            errors.append(f"Page {index}: Invalid lastmod date format")

    return ValidationResult(not errors, errors)


def validate_xml(xml: str) -> bool:
    """
    Structural check of a rendered sitemap: declaration, namespaced
    ``<urlset>`` root, well-formedness, balanced ``<url>`` tags and a
    ``<loc>`` in every ``<url>``.
    """
    if not xml.startswith('<?xml version="1.0" encoding="UTF-8"?>'):
        return False
    if xml.count("<url>") != xml.count("</url>"):
        return False
    try:
        root = etree.fromstring(xml.encode("utf-8"))
    except etree.XMLSyntaxError:
        return False
    if root.tag != f"{{{SITEMAP_NAMESPACE}}}urlset":
        return False
    ns = {"sm": SITEMAP_NAMESPACE}
    return all(url.find("sm:loc", ns) is not None for url in root.findall("sm:url", ns))
