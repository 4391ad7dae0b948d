# site_mapper/sitemap/samples.py
"""Sample sitemap entries, used as the caller-side fallback when a live crawl fails."""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from site_mapper.sitemap.models import SitemapEntry

# (path, changefreq, priority)
_SAMPLE_PAGES = (
    ("", "daily", 1.0),
    ("/about", "monthly", 0.8),
    ("/contact", "monthly", 0.7),
    ("/blog", "weekly", 0.9),
    ("/services", "monthly", 0.8),
)


def generate_sample_entries(base_url: str, today: Optional[date] = None) -> List[SitemapEntry]:
    """Five typical pages under *base_url*, all stamped with *today*."""
    base = base_url.rstrip("/")
    stamp = (today or date.today()).isoformat()
    return [
        SitemapEntry(url=f"{base}{path}", lastmod=stamp, changefreq=freq, priority=priority)
        for path, freq, priority in _SAMPLE_PAGES
    ]


__all__ = ["generate_sample_entries"]
