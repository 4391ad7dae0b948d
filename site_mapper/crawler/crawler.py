# === FILE: site_mapper/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import List, Optional, Sequence, Tuple

from aiohttp import ClientSession

from site_mapper.config import CrawlerConfig
from site_mapper.crawler.fetcher import Fetcher, PageFetcher
from site_mapper.crawler.link_extractor import extract_links
from site_mapper.crawler.models import (
    DEFAULT_PRIORITY,
    CrawlContext,
    CrawlRequest,
    FetchFailure,
    HtmlPage,
    PageRecord,
)
from site_mapper.crawler.normalizer import normalize_url
from site_mapper.logger import get_logger
from site_mapper.parser.html_parser import make_soup, parse_html

__all__ = ("AsyncCrawler",)

_Visit = Tuple[Optional[PageRecord], List[str]]


def _batches(urls: Sequence[str], size: int) -> List[Sequence[str]]:
    return [urls[i : i + size] for i in range(0, len(urls), size)]


class AsyncCrawler:
    """
    Breadth-first same-host crawler bounded by depth and page budgets.

    Fetches inside one batch run concurrently; batches and depth levels run
    one after another. Every ``crawl()`` call builds its own
    :class:`CrawlContext`, so one instance can serve several crawls.
    """

    def __init__(self, config: Optional[CrawlerConfig] = None, fetcher: Optional[PageFetcher] = None) -> None:
        self.config = config or CrawlerConfig()
        self.fetcher: Optional[PageFetcher] = fetcher
        self.session: Optional[ClientSession] = None
        self.logger = get_logger("crawler")

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = ClientSession()
            self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        if self.session is not None:
            self.fetcher = None
            self.session = None

    async def crawl(self, request: CrawlRequest) -> List[PageRecord]:
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized; use 'async with AsyncCrawler(...)'")

        context = CrawlContext(
            base_url=normalize_url(request.url),
            max_depth=request.max_depth,
            max_pages=request.max_pages,
        )
        self.logger.info(
            "Crawl started: %s (max_depth=%d, max_pages=%d)",
            context.base_url, context.max_depth, context.max_pages,
        )
        start = time.monotonic()

        frontier: List[str] = [context.base_url]
        while frontier:
            next_frontier = await self._crawl_level(context, frontier)
            if context.budget_exhausted:
                self.logger.debug("Page budget reached at depth %d", context.depth)
                break
            if not next_frontier or context.depth >= context.max_depth:
                break
            context.depth += 1
            frontier = next_frontier

        duration = time.monotonic() - start
        self.logger.info(
            "Crawl completed in %.2f s: %d pages, %d URLs visited",
            duration, len(context.pages), len(context.visited),
        )
        return list(context.pages)

    async def _crawl_level(self, context: CrawlContext, frontier: Sequence[str]) -> List[str]:
        """Fetch one depth level and return the deduplicated next frontier."""
        level = list(frontier)[: context.remaining]
        self.logger.info("Crawling depth %d with %d URLs", context.depth, len(level))
        discovered: dict[str, None] = {}

        for batch in _batches(level, self.config.batch_size):
            dispatched = [url for url in batch if context.claim(url)]
            if not dispatched:
                continue
            results = await self._gather_batch(dispatched, context)
            for record, links in results:
                if record is not None and not context.budget_exhausted:
                    context.pages.append(record)
                discovered.update(dict.fromkeys(links))
            if context.budget_exhausted:
                break
            if self.config.request_delay:
                await asyncio.sleep(self.config.request_delay)

        next_frontier = [url for url in discovered if url not in context.visited]
        self.logger.debug(
            "Depth %d completed. Found %d new URLs for next level", context.depth, len(next_frontier)
        )
        return next_frontier

    async def _gather_batch(self, urls: Sequence[str], context: CrawlContext) -> List[_Visit]:
        """Visit *urls* concurrently; on an unexpected error cancel the rest before re-raising."""
        tasks = [asyncio.ensure_future(self._visit(url, context)) for url in urls]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _visit(self, url: str, context: CrawlContext) -> _Visit:
        """Fetch *url*; return its page record (or None) and outbound links. No context mutation."""
        assert self.fetcher is not None
        result = await self.fetcher.fetch(url)
        if isinstance(result, FetchFailure):
            self.logger.warning("Fetch failed for %s: %s", url, result.reason)
            return None, []
        if not isinstance(result, HtmlPage):
            self.logger.debug("Skipped %s: %s", url, result.reason)
            return None, []

        soup = make_soup(result.content)
        page = parse_html(soup, url)
        record = PageRecord(
            url=page.url,
            title=page.title,
            last_modified=page.last_modified,
            priority=DEFAULT_PRIORITY,
        )
        # relative hrefs resolve against the address actually served, e.g. /docs/ after a redirect
        links = extract_links(soup, result.final_url or url, context.base_host, context.visited)
        return record, links
