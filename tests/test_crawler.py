# File: tests/test_crawler.py
# Test-suite for the SiteMapper breadth-first crawler
from __future__ import annotations

import asyncio
from collections import Counter

import pytest
from aiohttp import web

from conftest import FakeFetcher, html_app, links_html, serve_app
from site_mapper.config import CrawlerConfig
from site_mapper.crawler.crawler import AsyncCrawler
from site_mapper.crawler.models import DEFAULT_PRIORITY, CrawlRequest, HtmlPage
from site_mapper.engine import start_crawl

BASE = "https://example.com"


async def run_crawler(fetcher: FakeFetcher, config: CrawlerConfig, **request):
    async with AsyncCrawler(config, fetcher=fetcher) as crawler:
        return await crawler.crawl(CrawlRequest(**request))


def _tree_site() -> dict[str, str]:
    """Seed → /a /b /c; each child → two grandchildren."""
    site = {BASE: links_html("/a", "/b", "/c", title="Home")}
    for child in "abc":
        site[f"{BASE}/{child}"] = links_html(f"/{child}/1", f"/{child}/2", "/", f"/{child}", title=child.upper())
        for leaf in "12":
            site[f"{BASE}/{child}/{leaf}"] = links_html("/a", title=f"{child}{leaf}")
    return site


# --------------------------------------------------------------------------- #
#                                   Tests                                     #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_end_to_end_two_levels(config):
    fetcher = FakeFetcher(_tree_site())
    pages = await run_crawler(fetcher, config, url=BASE, max_depth=2, max_pages=10)

    urls = [p.url for p in pages]
    assert len(pages) <= 10
    assert urls[0] == BASE
    assert len(urls) == len(set(urls))
    assert set(urls) == {BASE, f"{BASE}/a", f"{BASE}/b", f"{BASE}/c"}
    assert pages[0].title == "Home"
    assert all(p.priority == DEFAULT_PRIORITY for p in pages)


@pytest.mark.asyncio()
async def test_three_levels_reach_grandchildren(config):
    fetcher = FakeFetcher(_tree_site())
    pages = await run_crawler(fetcher, config, url=BASE, max_depth=3, max_pages=50)
    assert len(pages) == 10
    assert f"{BASE}/c/2" in {p.url for p in pages}


@pytest.mark.asyncio()
async def test_depth_one_fetches_only_seed(config):
    fetcher = FakeFetcher(_tree_site())
    pages = await run_crawler(fetcher, config, url=f"{BASE}/", max_depth=1, max_pages=50)
    assert [p.url for p in pages] == [BASE]
    assert fetcher.calls == [BASE]


@pytest.mark.asyncio()
async def test_page_budget_is_respected(config):
    site = {BASE: links_html(*(f"/p{i}" for i in range(30)))}
    site.update({f"{BASE}/p{i}": links_html("/") for i in range(30)})
    fetcher = FakeFetcher(site)

    pages = await run_crawler(fetcher, config, url=BASE, max_depth=2, max_pages=7)

    assert len(pages) == 7
    assert len(fetcher.calls) == 7


@pytest.mark.asyncio()
async def test_no_url_is_dispatched_twice(config):
    # every page links to every other page, plus query/fragment/slash variants
    paths = [f"/n{i}" for i in range(8)]
    variants = [v for p in paths for v in (p, f"{p}/", f"{p}?s=1", f"{p}#x")]
    site = {BASE: links_html(*variants)}
    site.update({f"{BASE}{p}": links_html(*variants) for p in paths})
    fetcher = FakeFetcher(site)

    pages = await run_crawler(fetcher, config, url=BASE, max_depth=5, max_pages=200)

    assert Counter(fetcher.calls).most_common(1)[0][1] == 1
    assert len(pages) == 9


@pytest.mark.asyncio()
async def test_batches_are_bounded_by_batch_size(config):
    site = {BASE: links_html(*(f"/p{i}" for i in range(12)))}
    site.update({f"{BASE}/p{i}": links_html() for i in range(12)})
    fetcher = FakeFetcher(site, delay=0.01)

    await run_crawler(fetcher, config, url=BASE, max_depth=2, max_pages=50)

    assert fetcher.max_in_flight == config.batch_size == 5
    assert len(fetcher.calls) == 13


@pytest.mark.asyncio()
async def test_failures_and_skips_do_not_abort_crawl(config):
    site = {
        BASE: links_html("/ok", "/down", "/missing"),
        f"{BASE}/ok": links_html("/deeper"),
        f"{BASE}/down": links_html("/never"),
        f"{BASE}/deeper": links_html(),
    }
    fetcher = FakeFetcher(site, failing=(f"{BASE}/down",))

    pages = await run_crawler(fetcher, config, url=BASE, max_depth=3, max_pages=50)

    assert {p.url for p in pages} == {BASE, f"{BASE}/ok", f"{BASE}/deeper"}
    assert fetcher.calls.count(f"{BASE}/down") == 1
    assert f"{BASE}/never" not in fetcher.calls


@pytest.mark.asyncio()
async def test_external_and_excluded_links_are_not_followed(config):
    site = {
        BASE: links_html("https://other.example/x", "/files/a.pdf", "/admin/", "/page"),
        f"{BASE}/page": links_html(),
    }
    fetcher = FakeFetcher(site)
    await run_crawler(fetcher, config, url=BASE, max_depth=2, max_pages=50)
    assert fetcher.calls == [BASE, f"{BASE}/page"]


@pytest.mark.asyncio()
async def test_each_crawl_uses_fresh_context(config):
    fetcher = FakeFetcher(_tree_site())
    async with AsyncCrawler(config, fetcher=fetcher) as crawler:
        first = await crawler.crawl(CrawlRequest(url=BASE, max_depth=2, max_pages=10))
        second = await crawler.crawl(CrawlRequest(url=BASE, max_depth=2, max_pages=10))
    assert [p.url for p in first] == [p.url for p in second]


@pytest.mark.asyncio()
async def test_crawl_without_context_manager_fails(config):
    with pytest.raises(RuntimeError):
        await AsyncCrawler(config).crawl(CrawlRequest(url=BASE))


@pytest.mark.asyncio()
async def test_crawl_real_server(config, unused_tcp_port: int):
    routes = {
        "/": links_html("/page1", "/doc.pdf", "/data", title="Root"),
        "/page1": links_html("/page2", "mailto:x@y.z", title="Page 1")
        + '<meta name="last-modified" content="2024-01-01">',
        "/page2": links_html("/page3", title="Page 2"),
        "/page3": links_html(title="Page 3"),
    }
    app = html_app(routes)

    async def data(_):
        return web.json_response({"not": "html"})

    app.router.add_get("/data", data)

    async for base in serve_app(app, unused_tcp_port):
        async with AsyncCrawler(config) as crawler:
            pages = await crawler.crawl(CrawlRequest(url=base, max_depth=3, max_pages=50))

    by_url = {p.url: p for p in pages}
    assert set(by_url) == {base, f"{base}/page1", f"{base}/page2"}
    assert by_url[base].title == "Root"
    assert by_url[f"{base}/page1"].last_modified == "2024-01-01"


@pytest.mark.asyncio()
async def test_start_crawl_builds_report(config, unused_tcp_port: int):
    app = html_app({"/": links_html("/a/", title="Root"), "/a": links_html("/", title="A")})
    async for base in serve_app(app, unused_tcp_port):
        report = await start_crawl(CrawlRequest(url=f"{base}/", maxDepth=2, maxPages=10), config)

    assert report.base_url == base
    assert report.to_dict()["totalPages"] == 2
    assert [p["title"] for p in report.to_dict()["pages"]] == ["Root", "A"]
    assert report.crawl_time_ms >= 0


class DispatchRecordingCrawler(AsyncCrawler):
    """Records how many pages the context held each time a URL was dispatched."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.pages_at_dispatch: list[int] = []

    async def _visit(self, url, context):
        self.pages_at_dispatch.append(len(context.pages))
        assert len(context.pages) < context.max_pages
        return await super()._visit(url, context)


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "max_pages,expected",
    [
        (3, [0, 1, 1]),
        (7, [0, 1, 1, 1, 1, 1, 6]),
    ],
)
async def test_budget_holds_after_every_batch(config, max_pages, expected):
    site = {BASE: links_html(*(f"/p{i}" for i in range(12)))}
    site.update({f"{BASE}/p{i}": links_html("/q") for i in range(12)})
    fetcher = FakeFetcher(site)

    async with DispatchRecordingCrawler(config, fetcher=fetcher) as crawler:
        pages = await crawler.crawl(CrawlRequest(url=BASE, max_depth=3, max_pages=max_pages))

    assert crawler.pages_at_dispatch == expected
    assert len(pages) == max_pages
    assert len(fetcher.calls) == max_pages


@pytest.mark.asyncio()
async def test_relative_links_resolve_against_served_directory(config, unused_tcp_port: int):
    app = html_app(
        {
            "/": links_html("/docs", title="Root"),
            "/docs/": links_html("intro", "../about", title="Docs"),
            "/docs/intro": links_html(title="Intro"),
            "/about": links_html(title="About"),
        }
    )

    async def to_directory(_):
        raise web.HTTPMovedPermanently("/docs/")

    app.router.add_get("/docs", to_directory)

    async for base in serve_app(app, unused_tcp_port):
        async with AsyncCrawler(config) as crawler:
            pages = await crawler.crawl(CrawlRequest(url=base, max_depth=3, max_pages=50))

    by_url = {p.url: p for p in pages}
    assert set(by_url) == {base, f"{base}/docs", f"{base}/docs/intro", f"{base}/about"}
    assert by_url[f"{base}/docs"].title == "Docs"


class ExplodingFetcher:
    """One URL raises an unexpected error, the others hang until cancelled."""

    def __init__(self) -> None:
        self.cancelled: list[str] = []

    async def fetch(self, url: str):
        if url.endswith("/boom"):
            raise RuntimeError("parser crashed")
        if url == BASE:
            return HtmlPage(url, links_html("/slow1", "/boom", "/slow2"))
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled.append(url)
            raise
        return HtmlPage(url, links_html())


@pytest.mark.asyncio()
async def test_unexpected_error_cancels_sibling_fetches(config):
    fetcher = ExplodingFetcher()
    with pytest.raises(RuntimeError, match="parser crashed"):
        async with AsyncCrawler(config, fetcher=fetcher) as crawler:
            await crawler.crawl(CrawlRequest(url=BASE, max_depth=2, max_pages=10))
    assert sorted(fetcher.cancelled) == [f"{BASE}/slow1", f"{BASE}/slow2"]
