# File: site_mapper/aggregator.py
"""site_mapper.aggregator: сборка результата обхода в CrawlReport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TypedDict

from site_mapper.crawler.models import PageRecord
from site_mapper.sitemap.models import SitemapEntry


class PageInfo(TypedDict, total=False):
    """Страница в ответе API."""

    url: str
    title: str
    lastModified: str
    priority: float


@dataclass(slots=True)
class CrawlReport:
    """Результат одного обхода: базовый URL, найденные страницы и время обхода."""

    base_url: str
    pages: List[PageRecord] = field(default_factory=list)
    crawl_time_ms: int = 0

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    def to_dict(self) -> Dict[str, Any]:
        """Поле ``data`` успешного ответа на запрос обхода."""
        pages: List[PageInfo] = [page.to_dict() for page in self.pages]  # type: ignore[misc]
        return {
            "baseUrl": self.base_url,
            "pages": pages,
            "totalPages": self.total_pages,
            "crawlTime": self.crawl_time_ms,
        }

    def to_sitemap_entries(self, changefreq: Optional[str] = None) -> List[SitemapEntry]:
        """Записи для сериализатора, по одной на страницу."""
        return [page.to_sitemap_entry(changefreq) for page in self.pages]


def aggregate_results(base_url: str, pages: Sequence[PageRecord], crawl_time_ms: int) -> CrawlReport:
    """Собирает страницы обхода в CrawlReport, отбрасывая повторы URL."""
    seen: set[str] = set()
    unique: List[PageRecord] = []
    for page in pages:
        if page.url not in seen:
            seen.add(page.url)
            unique.append(page)
    return CrawlReport(base_url=base_url, pages=unique, crawl_time_ms=max(0, int(crawl_time_ms)))


__all__ = ["PageInfo", "CrawlReport", "aggregate_results"]
