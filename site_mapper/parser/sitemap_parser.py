# File: site_mapper/parser/sitemap_parser.py
"""site_mapper.parser.sitemap_parser: разбор sitemap.xml обратно в записи SitemapEntry."""

from __future__ import annotations

from typing import List, Optional

from lxml import etree

from site_mapper.sitemap.models import SitemapEntry


def _child_text(node: etree._Element, name: str) -> Optional[str]:
    child = node.find(f"{{*}}{name}")
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def parse_sitemap(xml_content: str) -> List[SitemapEntry]:
    """Разбирает XML sitemap и возвращает записи из тегов <url>.

    Args:
        xml_content: строка с содержимым sitemap.xml.

    Returns:
        Список SitemapEntry; <url> без <loc> пропускаются.

    Пример:
    ```python
    from site_mapper.parser.sitemap_parser import parse_sitemap

    with open('sitemap.xml', encoding='utf-8') as f:
        entries = parse_sitemap(f.read())
    print([e.url for e in entries])
    ```
    """
    parser = etree.XMLParser(ns_clean=True, recover=True)
    root = etree.fromstring(xml_content.encode("utf-8"), parser=parser)
    if root is None:
        return []
    entries: List[SitemapEntry] = []
    for node in root.iterfind(".//{*}url"):
        loc = _child_text(node, "loc")
        if not loc:
            continue
        priority = _child_text(node, "priority")
        entries.append(
            SitemapEntry(
                url=loc,
                lastmod=_child_text(node, "lastmod"),
                changefreq=_child_text(node, "changefreq"),
                priority=float(priority) if priority is not None else None,
            )
        )
    return entries


__all__ = ["parse_sitemap"]
