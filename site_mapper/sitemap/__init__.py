# site_mapper/sitemap/__init__.py
"""site_mapper.sitemap: sitemap-protocol XML rendering and validation."""
from site_mapper.sitemap.models import (
    CHANGEFREQ_VALUES,
    MAX_SITEMAP_URLS,
    SITEMAP_NAMESPACE,
    SitemapEntry,
    SitemapGenerationRequest,
    SitemapOptions,
)
from site_mapper.sitemap.samples import generate_sample_entries
from site_mapper.sitemap.serializer import escape_xml, generate_sitemap, render
from site_mapper.sitemap.validator import ValidationResult, validate_entries, validate_xml

__all__ = [
    "CHANGEFREQ_VALUES",
    "MAX_SITEMAP_URLS",
    "SITEMAP_NAMESPACE",
    "SitemapEntry",
    "SitemapGenerationRequest",
    "SitemapOptions",
    "ValidationResult",
    "escape_xml",
    "generate_sample_entries",
    "generate_sitemap",
    "render",
    "validate_entries",
    "validate_xml",
]
