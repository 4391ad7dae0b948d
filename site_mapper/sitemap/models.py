# site_mapper/sitemap/models.py
"""Sitemap protocol entry and generation request models."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
MAX_SITEMAP_URLS = 50_000
CHANGEFREQ_VALUES = ("always", "hourly", "daily", "weekly", "monthly", "yearly", "never")


@dataclass(slots=True, frozen=True)
class SitemapEntry:
    """One ``<url>`` element. Values are not checked here, see ``validate_entries``."""

    url: str
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SitemapEntry:
        return cls(
            url=data.get("url") or "",
            lastmod=data.get("lastmod"),
            changefreq=data.get("changefreq"),
            priority=data.get("priority"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url}
        for key in ("lastmod", "changefreq", "priority"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(slots=True, frozen=True)
class SitemapOptions:
    include_lastmod: bool = True
    include_changefreq: bool = True
    include_priority: bool = True


class SitemapPageModel(BaseModel):
    """Wire shape of one page; only types are enforced, semantics go to the validator."""

    model_config = ConfigDict(extra="ignore")

    url: Optional[str] = None
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None

    def to_entry(self) -> SitemapEntry:
        return SitemapEntry.from_mapping(self.model_dump())


class SitemapGenerationRequest(BaseModel):
    """``{baseUrl, pages, includeLastmod?, includeChangefreq?, includePriority?}``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base_url: str = Field(..., min_length=1, alias="baseUrl")
    pages: List[SitemapPageModel]
    include_lastmod: bool = Field(True, alias="includeLastmod")
    include_changefreq: bool = Field(True, alias="includeChangefreq")
    include_priority: bool = Field(True, alias="includePriority")

    def entries(self) -> List[SitemapEntry]:
        return [page.to_entry() for page in self.pages]

    def options(self) -> SitemapOptions:
        return SitemapOptions(
            include_lastmod=self.include_lastmod,
            include_changefreq=self.include_changefreq,
            include_priority=self.include_priority,
        )


__all__ = [
    "SITEMAP_NAMESPACE",
    "MAX_SITEMAP_URLS",
    "CHANGEFREQ_VALUES",
    "SitemapEntry",
    "SitemapOptions",
    "SitemapPageModel",
    "SitemapGenerationRequest",
]
