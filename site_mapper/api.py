# File: site_mapper/api.py
"""
Transport-independent request handlers.

Each handler takes a decoded JSON payload and returns an :class:`ApiResponse`
with an HTTP-like status and a JSON-serialisable body, so any web framework
(or the CLI) can bind them without owning validation or error mapping.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from site_mapper.aggregator import CrawlReport
from site_mapper.config import CrawlerConfig
from site_mapper.crawler.models import CrawlRequest
from site_mapper.crawler.normalizer import is_http_url
from site_mapper.engine import start_crawl
from site_mapper.errors import InvalidUrlError, SerializationError, ValidationError
from site_mapper.logger import get_logger
from site_mapper.sitemap import generate_sample_entries, generate_sitemap
from site_mapper.sitemap.models import SitemapGenerationRequest

__all__ = [
    "ApiResponse",
    "CrawlRunner",
    "handle_crawl",
    "handle_sitemap_generation",
    "handle_sample_sitemap",
]

CrawlRunner = Callable[[CrawlRequest, CrawlerConfig], Awaitable[CrawlReport]]

log = get_logger("api")


@dataclass(slots=True, frozen=True)
class ApiResponse:
    status: int
    body: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def _failure(status: int, error: str, details: Optional[List[str]] = None) -> ApiResponse:
    body: Dict[str, Any] = {"success": False, "error": error}
    if details:
        body["details"] = details
    return ApiResponse(status, body)


def _pydantic_details(exc: PydanticValidationError) -> List[str]:
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "request"
        details.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return details


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def handle_crawl(
    payload: Mapping[str, Any],
    config: Optional[CrawlerConfig] = None,
    runner: Optional[CrawlRunner] = None,
) -> ApiResponse:
    """``{url, maxDepth?, maxPages?}`` → ``{success, data: {baseUrl, pages, totalPages, crawlTime}}``."""
    config = config or CrawlerConfig()
    if not isinstance(payload, Mapping):
        return _failure(400, "Invalid request data", ["request: expected a JSON object"])
    data = dict(payload)
    if "maxDepth" not in data and "max_depth" not in data:
        data["maxDepth"] = config.max_depth
    if "maxPages" not in data and "max_pages" not in data:
        data["maxPages"] = config.max_pages
    try:
        request = CrawlRequest.model_validate(data)
    except PydanticValidationError as exc:
        return _failure(400, "Invalid request data", _pydantic_details(exc))

    try:
        report = await (runner or start_crawl)(request, config)
    except InvalidUrlError as exc:
        return _failure(400, str(exc))
    except Exception as exc:
        log.exception("Crawl error for %s", request.url)
        return _failure(500, f"Crawl failed: {exc}")

    return ApiResponse(200, {"success": True, "data": report.to_dict()})


def handle_sitemap_generation(payload: Mapping[str, Any]) -> ApiResponse:
    """``{baseUrl, pages, include*?}`` → ``{success, data: {xml, pageCount, generatedAt}}``."""
    try:
        request = SitemapGenerationRequest.model_validate(payload)
    except PydanticValidationError as exc:
        return _failure(400, "Invalid request data", _pydantic_details(exc))

    if not is_http_url(request.base_url):
        return _failure(400, "Invalid request data", ["baseUrl: Invalid URL format"])

    entries = request.entries()
    try:
        xml = generate_sitemap(entries, request.options())
    except ValidationError as exc:
        return _failure(400, f"Validation failed: {', '.join(exc.errors)}", exc.errors)
    except SerializationError as exc:
        log.error("Sitemap generation for %s produced invalid XML: %s", request.base_url, exc)
        return _failure(500, "Generated XML is invalid")

    return ApiResponse(
        200,
        {
            "success": True,
            "data": {"xml": xml, "pageCount": len(entries), "generatedAt": _now_iso()},
        },
    )


def handle_sample_sitemap(base_url: str = "https://example.com") -> ApiResponse:
    """Sample five-page sitemap for *base_url*; the fallback payload for failed crawls."""
    if not is_http_url(base_url):
        return _failure(400, "Invalid baseUrl", ["baseUrl: Invalid URL format"])
    entries = generate_sample_entries(base_url)
    return handle_sitemap_generation(
        {"baseUrl": base_url, "pages": [entry.to_dict() for entry in entries]}
    )
