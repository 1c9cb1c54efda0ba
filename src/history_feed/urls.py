"""URL parsing and root-domain reduction."""

from __future__ import annotations

from urllib.parse import SplitResult, urlsplit

from history_feed.exceptions import ParseError

# Second-level labels that sit under a ccTLD (example.co.uk, example.com.au).
SECOND_LEVEL_SUFFIXES = frozenset({"co", "com", "org", "ac", "gov", "edu", "net"})


def parse_url(url: str) -> SplitResult:
    """Split a history URL, raising ParseError when it is not a usable URI."""
    if not url or not url.strip():
        raise ParseError("Empty URL")
    try:
        parsed = urlsplit(url.strip())
        parsed.port  # raises ValueError for a malformed port
    except ValueError as e:
        raise ParseError(f"Invalid URL {url!r}: {e}") from e
    if not parsed.scheme:
        raise ParseError(f"URL has no scheme: {url!r}")
    return parsed


def hostname_of(url: str) -> str:
    """Lowercased hostname of ``url``; empty for scheme-only URIs like mailto:."""
    return (parse_url(url).hostname or "").lower()


def root_domain(url: str) -> str | None:
    """Reduce a URL to its registrable domain, or None if it has no host.

    >>> root_domain("https://www.example.co.uk/a")
    'example.co.uk'
    >>> root_domain("https://blog.example.com")
    'example.com'
    """
    try:
        hostname = hostname_of(url)
    except ParseError:
        return None
    if not hostname:
        return None

    parts = hostname.split(".")
    if len(parts) >= 3 and parts[-2] in SECOND_LEVEL_SUFFIXES:
        return ".".join(parts[-3:])
    return ".".join(parts[-2:])
