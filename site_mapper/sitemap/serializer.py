# site_mapper/sitemap/serializer.py
"""
Sitemap XML generation.

:func:`render` is the plain transform (any entry list, empty included);
:func:`generate_sitemap` is the strict path that validates its input and
its own output.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from site_mapper.errors import SerializationError, ValidationError
from site_mapper.logger import get_logger
from site_mapper.sitemap.models import SITEMAP_NAMESPACE, SitemapEntry, SitemapOptions
from site_mapper.sitemap.validator import validate_entries, validate_xml

__all__ = ("XML_DECLARATION", "escape_xml", "render", "generate_sitemap")

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
_URLSET_OPEN = f'<urlset xmlns="{SITEMAP_NAMESPACE}">'
_URLSET_CLOSE = "</urlset>"

_ESCAPES = (
    ("&", "&amp;"),  # first, so the other entities are not double-escaped
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

log = get_logger("sitemap")


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def _url_block(entry: SitemapEntry, options: SitemapOptions) -> str:
    lines = ["  <url>", f"    <loc>{escape_xml(entry.url)}</loc>"]
    if options.include_lastmod and entry.lastmod:
        lines.append(f"    <lastmod>{escape_xml(entry.lastmod)}</lastmod>")
    if options.include_changefreq and entry.changefreq:
        lines.append(f"    <changefreq>{escape_xml(entry.changefreq)}</changefreq>")
    if options.include_priority and entry.priority is not None:
        lines.append(f"    <priority>{float(entry.priority):.1f}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


def render(entries: Sequence[SitemapEntry], options: Optional[SitemapOptions] = None) -> str:
    """Render *entries* as a sitemap 0.9 document. Deterministic and side-effect free."""
    options = options or SitemapOptions()
    parts: List[str] = [XML_DECLARATION, _URLSET_OPEN]
    parts.extend(_url_block(entry, options) for entry in entries)
    parts.append(_URLSET_CLOSE)
    return "\n".join(parts) + "\n"


def generate_sitemap(
    entries: Sequence[SitemapEntry], options: Optional[SitemapOptions] = None
) -> str:
    """
    Validate *entries*, render them and check the result.

    Raises :class:`ValidationError` with every collected message for bad input
    and :class:`SerializationError` if the rendered XML fails self-validation.
    """
    result = validate_entries(entries)
    if not result.valid:
        raise ValidationError(result.errors)

    xml = render(entries, options)
    if not validate_xml(xml):
        raise SerializationError("generated sitemap XML failed validation")
    log.debug("Generated sitemap with %d URLs (%d bytes)", len(entries), len(xml))
    return xml
