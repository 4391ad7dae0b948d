# site_mapper/crawler/fetcher.py
"""
Fetcher module: one bounded HTTP GET per URL with timeout and content-type gating.
"""
from __future__ import annotations

import asyncio
from typing import Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_mapper.config import CrawlerConfig
from site_mapper.crawler.models import FetchFailure, FetchResult, FetchSkipped, HtmlPage
from site_mapper.logger import get_logger

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

log = get_logger("fetcher")


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> FetchResult: ...


class Fetcher:
    """Issues a single GET per URL; never retries."""

    def __init__(self, session: ClientSession, config: CrawlerConfig) -> None:
        self.session = session
        self.config = config
        self._timeout = ClientTimeout(total=config.timeout)
        self._headers = {"User-Agent": config.user_agent, "Accept": ACCEPT_HEADER}

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch *url*.

        Returns HtmlPage for a 2xx ``text/html`` response, FetchSkipped for
        any other status or content type and FetchFailure for network
        errors and timeouts.
        """
        try:
            async with self.session.get(
                url, headers=self._headers, timeout=self._timeout, raise_for_status=False
            ) as resp:
                if not 200 <= resp.status < 300:
                    log.warning("Failed to fetch %s: HTTP %s", url, resp.status)
                    return FetchSkipped(url, f"HTTP {resp.status}")
                ctype = resp.headers.get("Content-Type", "")
                if "text/html" not in ctype.lower():
                    log.info("Skipping non-HTML content: %s (%s)", url, ctype or "no content type")
                    return FetchSkipped(url, f"non-HTML content: {ctype or 'unknown'}")
                text = await resp.text(errors="replace")
                return HtmlPage(url, text, str(resp.url))
        except asyncio.TimeoutError:
            log.debug("Timed out after %.1f s: %s", self.config.timeout, url)
            return FetchFailure(url, "timeout")
        except ClientError as exc:
            log.debug("Error crawling %s: %s", url, exc)
            return FetchFailure(url, str(exc) or type(exc).__name__)
