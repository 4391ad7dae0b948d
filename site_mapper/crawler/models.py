# site_mapper/crawler/models.py
"""
Data models for the SiteMapper crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from site_mapper.crawler.normalizer import host_of, is_http_url, normalize_url
from site_mapper.sitemap.models import SitemapEntry

DEFAULT_PRIORITY = 0.5


class CrawlRequest(BaseModel):
    """Seed URL plus depth and page budgets of one crawl."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    url: str = Field(..., min_length=1, max_length=2048)
    max_depth: int = Field(2, ge=1, le=10, alias="maxDepth")
    max_pages: int = Field(50, ge=1, le=200, alias="maxPages")

    @field_validator("url")
    def _http_url(cls, v: str) -> str:
        v = v.strip()
        if not is_http_url(v):
            raise ValueError("URL must be an absolute http(s) URL")
        normalize_url(v)  # raises InvalidUrlError (a ValueError) for bad ports etc.
        return v

    @field_validator("max_depth", "max_pages", mode="before")
    def _no_bool(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("must be an integer, not a boolean")
        return v


@dataclass(slots=True, frozen=True)
class PageRecord:
    """One successfully fetched HTML page."""

    url: str
    title: Optional[str] = None
    last_modified: Optional[str] = None
    priority: float = DEFAULT_PRIORITY

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: ``{url, title?, lastModified?, priority}``."""
        data: Dict[str, Any] = {"url": self.url}
        if self.title is not None:
            data["title"] = self.title
        if self.last_modified is not None:
            data["lastModified"] = self.last_modified
        data["priority"] = self.priority
        return data

    def to_sitemap_entry(self, changefreq: Optional[str] = None) -> SitemapEntry:
        return SitemapEntry(
            url=self.url,
            lastmod=self.last_modified,
            changefreq=changefreq,
            priority=self.priority,
        )


@dataclass(slots=True)
class CrawlContext:
    """Mutable state of a single ``crawl()`` call. Owned by the crawler only."""

    base_url: str
    max_depth: int
    max_pages: int
    visited: Set[str] = field(default_factory=set)
    pages: List[PageRecord] = field(default_factory=list)
    depth: int = 1

    @property
    def base_host(self) -> str:
        return host_of(self.base_url)

    @property
    def remaining(self) -> int:
        return max(0, self.max_pages - len(self.pages))

    @property
    def budget_exhausted(self) -> bool:
        return len(self.pages) >= self.max_pages

    def claim(self, url: str) -> bool:
        """Mark *url* visited if it may be dispatched; False if it must be skipped."""
        if url in self.visited or self.budget_exhausted:
            return False
        self.visited.add(url)
        return True


@dataclass(slots=True, frozen=True)
class HtmlPage:
    """Fetched ``text/html`` document; ``final_url`` is the address after redirects."""

    url: str
    content: str
    final_url: Optional[str] = None


@dataclass(slots=True, frozen=True)
class FetchSkipped:
    """Expected non-HTML or non-2xx response; yields nothing."""

    url: str
    reason: str


@dataclass(slots=True, frozen=True)
class FetchFailure:
    """Network-level error or timeout; logged and excluded."""

    url: str
    reason: str


FetchResult = Union[HtmlPage, FetchSkipped, FetchFailure]

__all__ = [
    "DEFAULT_PRIORITY",
    "CrawlRequest",
    "PageRecord",
    "CrawlContext",
    "HtmlPage",
    "FetchSkipped",
    "FetchFailure",
    "FetchResult",
]
