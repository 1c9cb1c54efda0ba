"""Shared fixtures: an in-memory history source."""

from __future__ import annotations

import asyncio

import pytest

from history_feed.exceptions import SourceError
from history_feed.history.models import VisitDetail, VisitRecord
from history_feed.history.source import HistorySource


class FakeHistorySource(HistorySource):
    """History source backed by lists, recording every call."""

    def __init__(
        self,
        records: list[VisitRecord] | None = None,
        visits: dict[str, list[str]] | None = None,
        failing_urls: set[str] | None = None,
        delay: float = 0.0,
    ):
        self.records = list(records or [])
        self.visits = visits or {}
        self.failing_urls = failing_urls or set()
        self.delay = delay
        self.search_calls: list[tuple[int, int, int]] = []
        self.visit_calls: list[str] = []
        self.fail_search = False

    async def search(self, start_ms, end_ms, max_results):
        self.search_calls.append((start_ms, end_ms, max_results))
        if self.fail_search:
            raise SourceError("history unavailable")
        hits = [r for r in self.records if start_ms <= r.last_visit_time <= end_ms]
        return hits[:max_results]

    async def get_visits(self, url):
        self.visit_calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if url in self.failing_urls:
            raise SourceError(f"lookup failed for {url}")
        return [VisitDetail(transition=t) for t in self.visits.get(url, ["link"])]


def make_records(urls: list[str], newest: int = 1_700_000_000_000) -> list[VisitRecord]:
    """Records for ``urls``, newest first, one second apart."""
    return [
        VisitRecord(url=url, title=f"Page {i}", last_visit_time=newest - i * 1000)
        for i, url in enumerate(urls)
    ]


@pytest.fixture
def fake_source():
    return FakeHistorySource()
