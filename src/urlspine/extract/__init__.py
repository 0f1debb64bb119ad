"""URL extraction."""

from urlspine.extract.urls import (
    URL_PATTERN,
    extract_urls,
    iter_urls,
    normalize_url,
    parse_candidate,
)

__all__ = [
    "URL_PATTERN",
    "extract_urls",
    "iter_urls",
    "normalize_url",
    "parse_candidate",
]
