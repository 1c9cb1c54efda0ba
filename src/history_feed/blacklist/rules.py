"""Blacklist rule sets and their two sources: a bundled file and user overrides."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Iterable

from history_feed.blacklist.matcher import matches
from history_feed.exceptions import BlacklistError
from history_feed.storage import KeyValueStore

logger = logging.getLogger(__name__)

OVERRIDES_KEY = "history_blacklist"


def _normalize(rules: Iterable[str] | None) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for rule in rules or ():
        r = str(rule).strip().lower()
        if r:
            seen.setdefault(r, None)
    return tuple(seen)


def _rule_list(data: dict, key: str) -> tuple[str, ...]:
    rules = data.get(key)
    if rules is None:
        return ()
    if not isinstance(rules, list) or not all(isinstance(r, str) for r in rules):
        raise BlacklistError(f"\"{key}\" must be a list of strings")
    return tuple(rules)


@dataclass(frozen=True)
class BlacklistRuleSet:
    """Immutable domain and URL-pattern rules, lowercased and de-duplicated."""

    domains: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "domains", _normalize(self.domains))
        object.__setattr__(self, "patterns", _normalize(self.patterns))

    @classmethod
    def from_dict(cls, data: dict | None) -> BlacklistRuleSet:
        """Build from a rule record; raises BlacklistError if it is malformed."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise BlacklistError(f"Rule record must be a JSON object, got {type(data).__name__}")
        return cls(
            domains=_rule_list(data, "domains"),
            patterns=_rule_list(data, "patterns"),
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {"domains": list(self.domains), "patterns": list(self.patterns)}

    def merge(self, other: BlacklistRuleSet) -> BlacklistRuleSet:
        """Union of both rule sets, keeping this set's order first."""
        return BlacklistRuleSet(
            domains=self.domains + other.domains,
            patterns=self.patterns + other.patterns,
        )

    @property
    def is_empty(self) -> bool:
        return not self.domains and not self.patterns

    def matches(self, url: str) -> bool:
        return matches(url, self)


def read_rules_file(path: str | Path) -> BlacklistRuleSet:
    """Read a ``{"domains": [...], "patterns": [...]}`` rule file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise BlacklistError(f"Cannot read blacklist file {path}: {e}") from e
    except ValueError as e:
        raise BlacklistError(f"Blacklist file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise BlacklistError(f"Blacklist file {path} must hold a JSON object")
    try:
        return BlacklistRuleSet.from_dict(data)
    except BlacklistError as e:
        raise BlacklistError(f"Blacklist file {path} is malformed: {e}") from e


class BlacklistManager:
    """Loads the effective rule set and edits the user override record.

    Edits go to the override store only. A rule set returned by ``load()``
    never changes; call ``load()`` again to pick edits up.

    Args:
        store: Key-value store holding the override record.
        rules_path: Bundled rule file. Defaults to the packaged blacklist.json.
    """

    def __init__(self, store: KeyValueStore, rules_path: str | Path | None = None):
        self.store = store
        self.rules_path = Path(rules_path) if rules_path else None

    def _bundled(self) -> BlacklistRuleSet:
        try:
            if self.rules_path is not None:
                return read_rules_file(self.rules_path)
            bundled = resources.files("history_feed.blacklist").joinpath("blacklist.json")
            with resources.as_file(bundled) as path:
                return read_rules_file(path)
        except BlacklistError as e:
            logger.error("Failed to load bundled blacklist: %s", e)
            return BlacklistRuleSet()

    def overrides(self) -> BlacklistRuleSet:
        """User rules; a malformed record is logged and read as empty."""
        try:
            return BlacklistRuleSet.from_dict(self.store.get(OVERRIDES_KEY))
        except BlacklistError as e:
            logger.error("Ignoring malformed blacklist overrides: %s", e)
            return BlacklistRuleSet()

    def load(self) -> BlacklistRuleSet:
        """Bundled rules unioned with the user overrides."""
        rules = self._bundled().merge(self.overrides())
        logger.info(
            "Blacklist loaded: %d domains, %d patterns",
            len(rules.domains),
            len(rules.patterns),
        )
        return rules

    def _save_overrides(self, rules: BlacklistRuleSet) -> None:
        self.store.set(OVERRIDES_KEY, rules.to_dict())

    def add_domain(self, domain: str) -> None:
        current = self.overrides()
        self._save_overrides(current.merge(BlacklistRuleSet(domains=(domain,))))

    def add_pattern(self, pattern: str) -> None:
        current = self.overrides()
        self._save_overrides(current.merge(BlacklistRuleSet(patterns=(pattern,))))

    def remove_domain(self, domain: str) -> None:
        current = self.overrides()
        target = domain.strip().lower()
        self._save_overrides(
            BlacklistRuleSet(
                domains=tuple(d for d in current.domains if d != target),
                patterns=current.patterns,
            )
        )

    def remove_pattern(self, pattern: str) -> None:
        current = self.overrides()
        target = pattern.strip().lower()
        self._save_overrides(
            BlacklistRuleSet(
                domains=current.domains,
                patterns=tuple(p for p in current.patterns if p != target),
            )
        )

    def clear_overrides(self) -> None:
        """Drop every user rule; bundled rules stay."""
        self.store.remove(OVERRIDES_KEY)
