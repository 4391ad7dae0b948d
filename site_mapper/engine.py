# File: site_mapper/engine.py
"""site_mapper.engine: Orchestration layer для запуска обхода и сборки результата."""

from __future__ import annotations

import time
from typing import Optional

from site_mapper.aggregator import CrawlReport, aggregate_results
from site_mapper.config import CrawlerConfig
from site_mapper.crawler.crawler import AsyncCrawler
from site_mapper.crawler.models import CrawlRequest
from site_mapper.crawler.normalizer import normalize_url
from site_mapper.logger import logger

__all__ = ["start_crawl"]


async def start_crawl(request: CrawlRequest, config: Optional[CrawlerConfig] = None) -> CrawlReport:
    """Выполняет один обход и возвращает CrawlReport с временем обхода в миллисекундах."""
    config = config or CrawlerConfig()
    logger.info("Starting crawl of %s", request.url)
    started = time.monotonic()
    async with AsyncCrawler(config) as crawler:
        pages = await crawler.crawl(request)
    elapsed_ms = int((time.monotonic() - started) * 1000)
    return aggregate_results(normalize_url(request.url), pages, elapsed_ms)
