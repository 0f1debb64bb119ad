"""URL extraction from free-form chat text.

Extraction is a single permissive, case-insensitive pattern followed by a
structural parse. The pattern recognizes:

- scheme-prefixed URIs (``https://...``, ``ftp://...``, ``mailto:...``)
- ``www``-prefixed bare hosts (``www.example.com``, ``www2.example.com``)
- bare ``host.tld/...`` forms (``example.com/path``)

Trailing punctuation and unbalanced closing brackets are left out of the
match, balanced parentheses inside it are kept (so Wikipedia-style
``/wiki/Foo_(bar)`` links survive).

Example:
    >>> from urlspine.extract.urls import extract_urls
    >>> extract_urls("see http://example.com/x now")
    ['http://example.com/x']
    >>> extract_urls("no links here")
    []
    >>> extract_urls("(http://en.wikipedia.org/wiki/Foo_(bar)).")
    ['http://en.wikipedia.org/wiki/Foo_(bar)']
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from urllib.parse import SplitResult, urlsplit

logger = logging.getLogger(__name__)

# Each alternative inside a repetition consumes exactly one character or one
# parenthesized group, which keeps backtracking linear per end position.
# Word boundaries and classes are ASCII-only, so a URL glued to a non-ASCII
# letter is still found.
URL_PATTERN = re.compile(
    r"""
    \b
    (?:
        [a-z][\w-]+:(?:/{1,3}|[a-z0-9%])    # scheme:// or scheme:
      | www\d{0,3}[.]                       # www. www1. ... www999.
      | [a-z0-9.\-]+[.][a-z]{2,4}/          # host.tld/
    )
    (?:
        [^\s()<>]
      | \((?:[^\s()<>]|\([^\s()<>]+\))*\)   # balanced parens, two levels
    )+
    (?:
        \((?:[^\s()<>]|\([^\s()<>]+\))*\)
      | [^\s`!()\[\]{};:'".,<>?«»“”‘’]       # not trailing punctuation
    )
    """,
    re.ASCII | re.IGNORECASE | re.VERBOSE,
)


def extract_urls(text: str) -> list[str]:
    """Return URL candidates in left-to-right order.

    The same URL appearing twice yields two candidates. Never raises.

    Args:
        text: Raw message text.

    Returns:
        Candidate strings, possibly empty.

    Example:
        >>> from urlspine.extract.urls import extract_urls
        >>> extract_urls("a http://x.io/1 b http://x.io/1, c www.y.org")
        ['http://x.io/1', 'http://x.io/1', 'www.y.org']
    """
    if not text:
        return []
    return [match.group(0) for match in URL_PATTERN.finditer(text)]


def parse_candidate(candidate: str, *, assume_scheme: str | None = None) -> SplitResult | None:
    """Structurally parse a candidate, returning ``None`` when malformed.

    A candidate is kept only when it has both a scheme and a host. With
    ``assume_scheme`` set, a schemeless candidate such as
    ``www.example.com`` is retried as ``<scheme>://www.example.com``.

    Example:
        >>> from urlspine.extract.urls import parse_candidate
        >>> parse_candidate("http://example.com/a").hostname
        'example.com'
        >>> parse_candidate("www.example.com") is None
        True
        >>> parse_candidate("www.example.com", assume_scheme="http").geturl()
        'http://www.example.com'
        >>> parse_candidate("mailto:someone@example.com") is None
        True
    """
    parts = _split(candidate)
    if parts is not None and not parts.scheme and assume_scheme:
        parts = _split(f"{assume_scheme}://{candidate}")
    if parts is None or not parts.scheme or not parts.hostname:
        logger.debug("Dropping malformed URL candidate %r", candidate)
        return None
    return parts


def normalize_url(parts: SplitResult) -> str:
    """Canonical string form stored in the history log.

    Example:
        >>> from urllib.parse import urlsplit
        >>> from urlspine.extract.urls import normalize_url
        >>> normalize_url(urlsplit("HTTP://Example.com/Path"))
        'http://Example.com/Path'
    """
    return parts.geturl()


def iter_urls(text: str, *, assume_scheme: str | None = None) -> Iterator[tuple[str, SplitResult]]:
    """Extract, parse and normalize, yielding ``(url, parts)`` per survivor.

    Example:
        >>> from urlspine.extract.urls import iter_urls
        >>> [url for url, _ in iter_urls("x foo:bar http://a.io/ y")]
        ['http://a.io/']
    """
    for candidate in extract_urls(text):
        parts = parse_candidate(candidate, assume_scheme=assume_scheme)
        if parts is not None:
            yield normalize_url(parts), parts


def _split(candidate: str) -> SplitResult | None:
    try:
        return urlsplit(candidate)
    except ValueError:
        return None
