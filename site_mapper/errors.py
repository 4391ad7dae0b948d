# site_mapper/errors.py
"""
Exception hierarchy shared by the crawler, the sitemap serializer and the CLI.

Fetch outcomes (skipped / failed pages) are *values*, see
:mod:`site_mapper.crawler.models`; only conditions that abort a single
operation are modelled as exceptions here.
"""
from __future__ import annotations

from typing import Iterable, List


class SiteMapperError(Exception):
    """Base class for all SiteMapper errors."""


class InvalidUrlError(SiteMapperError, ValueError):
    """URL is not an absolute http(s) URL with a host."""

    def __init__(self, url: str, reason: str = "invalid URL") -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url!r}")


class ValidationError(SiteMapperError):
    """Malformed crawl or sitemap request; carries every collected message."""

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors) or "validation failed")


class SerializationError(SiteMapperError):
    """Generated sitemap XML did not pass self-validation."""


__all__ = [
    "SiteMapperError",
    "InvalidUrlError",
    "ValidationError",
    "SerializationError",
]
