# site_mapper/parser/__init__.py
"""HTML metadata and sitemap XML parsers."""
