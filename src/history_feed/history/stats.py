"""Statistics view: visit frequency per root domain over a time range."""

from __future__ import annotations

import logging
import time

from history_feed.blacklist import BlacklistRuleSet
from history_feed.exceptions import SourceError
from history_feed.history.aggregator import aggregate, top_n
from history_feed.history.models import DomainAggregate, StatsSummary
from history_feed.history.source import HistorySource

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000
DEFAULT_TIME_RANGE_DAYS = 30
DEFAULT_TOP_N = 20
DEFAULT_MAX_RESULTS = 100_000


class StatisticsSession:
    """One statistics view. Every load recomputes all visit lookups.

    Args:
        time_range_days: How many days back to query.
        top_n: Domains returned by ``top()``; ``None`` returns all.
    """

    def __init__(
        self,
        source: HistorySource,
        rule_set: BlacklistRuleSet,
        time_range_days: int = DEFAULT_TIME_RANGE_DAYS,
        top_n: int | None = DEFAULT_TOP_N,
        max_results: int = DEFAULT_MAX_RESULTS,
    ):
        self.source = source
        self.rule_set = rule_set
        self.time_range_days = time_range_days
        self.top_n = top_n
        self.max_results = max_results
        self.domain_data: list[DomainAggregate] = []
        self.total_visits = 0
        self.filtered_out_count = 0

    async def load(self) -> list[DomainAggregate]:
        """Query the time range, filter it and roll it up.

        A failed range query is logged and the previous results are kept.
        """
        end = int(time.time() * 1000)
        start = end - self.time_range_days * DAY_MS
        logger.info("Loading data for %d days", self.time_range_days)
        try:
            history = await self.source.search(start, end, self.max_results)
        except SourceError as e:
            logger.error("Error loading data: %s", e)
            return self.domain_data

        result = await aggregate(history, self.rule_set, self.source)
        self.domain_data = result.domain_stats
        self.total_visits = len(result.filtered)
        self.filtered_out_count = result.filtered_out_count
        return self.domain_data

    async def set_time_range(self, days: int) -> list[DomainAggregate]:
        if days < 1:
            raise ValueError(f"time range must be at least one day, got {days}")
        self.time_range_days = days
        return await self.load()

    def set_top_n(self, n: int | None) -> list[DomainAggregate]:
        self.top_n = n
        return self.top()

    def top(self) -> list[DomainAggregate]:
        return top_n(self.domain_data, self.top_n)

    def summary(self) -> StatsSummary:
        return StatsSummary(
            total_visits=self.total_visits,
            unique_domains=len(self.domain_data),
            top_domain=self.domain_data[0].domain if self.domain_data else None,
        )
