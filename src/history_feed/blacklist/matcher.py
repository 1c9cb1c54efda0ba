"""Blacklist matching for history URLs.

Two rule kinds are supported:

* Domain rules match the URL's hostname, either exactly or through an
  anchored ``*`` wildcard (``*.ads.com`` matches ``x.ads.com`` but not
  ``ads.com`` or ``badsads.com``).
* Pattern rules match the full lowercased URL. Without ``*`` they are a
  plain substring test (``/login``); with ``*`` they become an unanchored
  wildcard search (``*?utm_source=*``).

A URL that cannot be parsed is never blacklisted. The filter stage keeps
going and the record is left for later stages to drop.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import TYPE_CHECKING

from history_feed.exceptions import ParseError
from history_feed.urls import hostname_of

if TYPE_CHECKING:
    from history_feed.blacklist.rules import BlacklistRuleSet

logger = logging.getLogger(__name__)

WILDCARD = "*"


@lru_cache(maxsize=1024)
def _wildcard_regex(rule: str, anchored: bool) -> re.Pattern[str]:
    body = ".*".join(re.escape(part) for part in rule.split(WILDCARD))
    if anchored:
        body = f"^{body}$"
    return re.compile(body)


def match_domain(hostname: str, rule: str) -> bool:
    """Exact or anchored-wildcard match of a lowercased hostname."""
    if hostname == rule:
        return True
    if WILDCARD in rule:
        return _wildcard_regex(rule, True).match(hostname) is not None
    return False


def match_pattern(url: str, rule: str) -> bool:
    """Substring or unanchored-wildcard match of a lowercased URL."""
    if WILDCARD not in rule:
        return rule in url
    return _wildcard_regex(rule, False).search(url) is not None


def matches(url: str, rule_set: BlacklistRuleSet) -> bool:
    """Return True if ``url`` hits any domain or pattern rule."""
    try:
        hostname = hostname_of(url)
    except ParseError as e:
        logger.debug("Not matching unparsable URL: %s", e)
        return False

    full_url = url.lower()
    if any(match_domain(hostname, rule) for rule in rule_set.domains):
        return True
    return any(match_pattern(full_url, rule) for rule in rule_set.patterns)
