"""Blacklist rules for excluding history records."""

from history_feed.blacklist.matcher import match_domain, match_pattern, matches
from history_feed.blacklist.rules import BlacklistManager, BlacklistRuleSet, read_rules_file

__all__ = [
    "BlacklistManager",
    "BlacklistRuleSet",
    "match_domain",
    "match_pattern",
    "matches",
    "read_rules_file",
]
