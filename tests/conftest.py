# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Dict, List, Mapping

import pytest
from aiohttp import web

from site_mapper.config import CrawlerConfig
from site_mapper.crawler.models import FetchFailure, FetchResult, FetchSkipped, HtmlPage


class FakeFetcher:
    """
    In-memory fetcher: ``pages`` maps URL → HTML; unknown URLs are skipped
    like a 404, URLs in ``failing`` raise a network-style failure.
    Records every call and the peak number of concurrent fetches.
    """

    def __init__(self, pages: Mapping[str, str], failing: tuple[str, ...] = (), delay: float = 0.0) -> None:
        self.pages = dict(pages)
        self.failing = set(failing)
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if url in self.failing:
                return FetchFailure(url, "connection reset")
            if url not in self.pages:
                return FetchSkipped(url, "HTTP 404")
            return HtmlPage(url, self.pages[url])
        finally:
            self.in_flight -= 1


def links_html(*hrefs: str, title: str = "") -> str:
    """HTML page with a title and one anchor per href."""
    anchors = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return f"<html><head><title>{title}</title></head><body>{anchors}</body></html>"


@pytest.fixture()
def config() -> CrawlerConfig:
    """Fast config for tests: no inter-batch delay, short timeout."""
    return CrawlerConfig(timeout=2.0, request_delay=0.0, user_agent="TestAgent/1.0")


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def html_app(routes: Dict[str, str]) -> web.Application:
    """aiohttp app serving each ``path → html`` as ``text/html``."""
    app = web.Application()

    def make_handler(body: str):
        async def handler(_):
            return web.Response(text=body, content_type="text/html")

        return handler

    for path, body in routes.items():
        app.router.add_get(path, make_handler(body))
    return app
