# site_mapper/crawler/normalizer.py
"""
URL canonicalisation used for the visited set and for page records.

Two URLs that differ only in query string, fragment, trailing slash,
letter case of scheme/host or an explicit default port normalize to the
same value. The root path is canonicalised to the empty path, so
``https://example.com/`` becomes ``https://example.com``.
"""
from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from site_mapper.errors import InvalidUrlError

__all__ = ("normalize_url", "is_http_url", "host_of", "DEFAULT_PORTS")

DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """
    Return ``scheme://host[:port]`` + path for an absolute URL.

    Raises :class:`InvalidUrlError` for relative or otherwise unparsable input.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError(str(url), "empty URL")
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError as exc:
        raise InvalidUrlError(url, str(exc)) from exc

    scheme = parts.scheme.lower()
    host = parts.hostname
    if not scheme or not host:
        raise InvalidUrlError(url, "not an absolute URL")

    if ":" in host:
        host = f"[{host}]"
    netloc = host if port is None or DEFAULT_PORTS.get(scheme) == port else f"{host}:{port}"
    path = parts.path.rstrip("/")
    return urlunsplit((scheme, netloc, path, "", ""))


def is_http_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host and a valid port."""
    try:
        parts = urlsplit(url)
        parts.port  # ValueError for non-numeric or out-of-range ports
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(parts.hostname)


def host_of(url: str) -> str:
    """Lower-cased hostname of *url* (without port), ``""`` if there is none."""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""
