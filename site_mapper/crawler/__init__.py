# site_mapper/crawler/__init__.py
"""Breadth-first crawler: normalizer, link extractor, fetcher and crawl engine."""
