"""Stateful batch cursor over a filtered, time-sorted record list."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Sequence

from history_feed.exceptions import SourceError
from history_feed.history.models import FeedCursor, PaginatorState, VisitRecord
from history_feed.history.source import HistorySource

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20


class FeedPaginator:
    """Serve fixed-size batches of records with visit counts resolved.

    A ``next_batch()`` issued while another is in flight returns ``[]``
    without touching the cursor or the source. Once every record has been
    served the paginator is exhausted and keeps returning ``[]``.

    Args:
        records: Filtered records, newest first.
        source: History source used to resolve per-URL visit counts.
        batch_size: Records per batch (at least 1).
    """

    def __init__(
        self,
        records: Sequence[VisitRecord],
        source: HistorySource,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._records = list(records)
        self._source = source
        self._cursor = FeedCursor(offset=0, batch_size=batch_size, exhausted=False)
        self._loading = False

    @property
    def state(self) -> PaginatorState:
        if self._loading:
            return PaginatorState.LOADING
        if self._cursor.exhausted:
            return PaginatorState.EXHAUSTED
        return PaginatorState.READY

    @property
    def cursor(self) -> FeedCursor:
        return dataclasses.replace(self._cursor)

    @property
    def offset(self) -> int:
        return self._cursor.offset

    @property
    def has_more(self) -> bool:
        return not self._cursor.exhausted

    @property
    def remaining(self) -> int:
        return len(self._records) - self._cursor.offset

    async def _with_visit_count(self, record: VisitRecord) -> VisitRecord:
        try:
            visits = await self._source.get_visits(record.url)
        except SourceError as e:
            logger.warning("Visit count lookup failed for %s: %s", record.url, e)
            return record
        return dataclasses.replace(record, visit_count=len(visits))

    async def next_batch(self) -> list[VisitRecord]:
        if self._loading or self._cursor.exhausted:
            return []

        self._loading = True
        try:
            start = self._cursor.offset
            chunk = self._records[start : start + self._cursor.batch_size]
            if not chunk:
                self._cursor.exhausted = True
                return []

            batch = list(await asyncio.gather(*(self._with_visit_count(r) for r in chunk)))
            self._cursor.offset = start + len(chunk)
            if self._cursor.offset >= len(self._records):
                self._cursor.exhausted = True
            logger.debug("Served records %d-%d of %d", start, self._cursor.offset, len(self._records))
            return batch
        finally:
            self._loading = False
