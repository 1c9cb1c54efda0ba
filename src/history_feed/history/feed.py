"""Feed view: load all history once, filter once, page through it."""

from __future__ import annotations

import logging
import time

from history_feed.blacklist import BlacklistRuleSet
from history_feed.exceptions import SourceError
from history_feed.history.aggregator import filter_records
from history_feed.history.models import PaginatorState, VisitRecord
from history_feed.history.paginator import DEFAULT_BATCH_SIZE, FeedPaginator
from history_feed.history.source import HistorySource

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


class FeedSession:
    """One feed view over the whole of a user's history.

    ``filtered_out_count`` is computed by ``load()`` and stays fixed while
    batches are served.
    """

    def __init__(
        self,
        source: HistorySource,
        rule_set: BlacklistRuleSet,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_results: int = DEFAULT_MAX_RESULTS,
    ):
        self.source = source
        self.rule_set = rule_set
        self.batch_size = batch_size
        self.max_results = max_results
        self.records: list[VisitRecord] = []
        self.filtered_out_count = 0
        self.loaded = False
        self._paginator = FeedPaginator([], source, batch_size)

    async def load(self) -> None:
        """(Re)load history, replacing the paginator and the filtered count."""
        try:
            raw = await self.source.search(0, _now_ms(), self.max_results)
        except SourceError as e:
            logger.error("Error loading history: %s", e)
            raw = []

        raw = sorted(raw, key=lambda r: r.last_visit_time, reverse=True)
        result = filter_records(raw, self.rule_set)
        self.records = result.kept
        self.filtered_out_count = result.filtered_out_count
        self._paginator = FeedPaginator(self.records, self.source, self.batch_size)
        self.loaded = True
        logger.info(
            "Loaded %d history items, filtered %d items",
            len(self.records),
            self.filtered_out_count,
        )

    async def next_batch(self) -> list[VisitRecord]:
        return await self._paginator.next_batch()

    @property
    def state(self) -> PaginatorState:
        return self._paginator.state

    @property
    def has_more(self) -> bool:
        return self._paginator.has_more

    @property
    def is_empty(self) -> bool:
        return self.loaded and not self.records


_UNITS = (
    ("year", 365 * 86400),
    ("month", 30 * 86400),
    ("week", 7 * 86400),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
)


def format_time_ago(timestamp_ms: int, now_ms: int | None = None) -> str:
    """Human "N units ago" label for a visit time."""
    now_ms = _now_ms() if now_ms is None else now_ms
    seconds = max(0, (now_ms - timestamp_ms) // 1000)
    for name, size in _UNITS:
        value = seconds // size
        if value > 0:
            return f"{value} {name}{'' if value == 1 else 's'} ago"
    return "Just now"
