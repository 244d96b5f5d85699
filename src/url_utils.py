"""Shared URL utilities: resolve page URLs against the configured base URL."""

from __future__ import annotations

from urllib.parse import urljoin


def resolve_url(base_url: str, url: str) -> str:
    """Resolve a possibly relative URL against base_url."""
    if not base_url:
        return url
    return urljoin(base_url, url)
