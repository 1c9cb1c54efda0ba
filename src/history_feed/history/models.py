"""Data models for the history feed and visit statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

TYPED_TRANSITION = "typed"


@dataclass(frozen=True)
class VisitRecord:
    """One browsing-history entry, read-only snapshot from a history source."""

    url: str
    title: str | None
    last_visit_time: int  # ms since epoch
    visit_count: int = 0


@dataclass(frozen=True)
class VisitDetail:
    """A single visit event for a URL."""

    transition: str

    @property
    def is_typed(self) -> bool:
        return self.transition == TYPED_TRANSITION


@dataclass
class DomainAggregate:
    """Visit rollup for one root domain."""

    domain: str
    visit_count: int = 0
    typed_count: int = 0
    clicked_count: int = 0
    percentage: float = 0.0


@dataclass
class FilterResult:
    """Records left after blacklist filtering, plus how many were dropped."""

    kept: list[VisitRecord] = field(default_factory=list)
    filtered_out_count: int = 0


@dataclass
class AggregateResult:
    """Filtered records and their per-domain statistics."""

    filtered: list[VisitRecord]
    filtered_out_count: int
    domain_stats: list[DomainAggregate]


@dataclass
class StatsSummary:
    total_visits: int
    unique_domains: int
    top_domain: str | None


class PaginatorState(str, Enum):
    READY = "ready"
    LOADING = "loading"
    EXHAUSTED = "exhausted"


@dataclass
class FeedCursor:
    """Pagination position over a filtered record list."""

    offset: int = 0
    batch_size: int = 20
    exhausted: bool = False
