"""Tests for the feed paginator."""

import asyncio

import pytest
from conftest import FakeHistorySource, make_records

from history_feed.history.models import PaginatorState
from history_feed.history.paginator import FeedPaginator


def urls(n):
    return [f"https://site{i}.com/" for i in range(n)]


def test_rejects_zero_batch_size():
    with pytest.raises(ValueError):
        FeedPaginator([], FakeHistorySource(), batch_size=0)


def test_25_records_in_batches_of_20():
    records = make_records(urls(25))
    source = FakeHistorySource()
    paginator = FeedPaginator(records, source, batch_size=20)
    assert paginator.state is PaginatorState.READY

    first = asyncio.run(paginator.next_batch())
    assert [r.url for r in first] == [r.url for r in records[:20]]
    assert paginator.offset == 20
    assert paginator.state is PaginatorState.READY

    second = asyncio.run(paginator.next_batch())
    assert [r.url for r in second] == [r.url for r in records[20:]]
    assert paginator.offset == 25
    assert paginator.state is PaginatorState.EXHAUSTED

    assert asyncio.run(paginator.next_batch()) == []


def test_exhausted_paginator_makes_no_source_calls():
    source = FakeHistorySource()
    paginator = FeedPaginator(make_records(urls(3)), source, batch_size=5)
    asyncio.run(paginator.next_batch())
    calls = list(source.visit_calls)
    cursor = paginator.cursor

    for _ in range(3):
        assert asyncio.run(paginator.next_batch()) == []
    assert source.visit_calls == calls
    assert paginator.cursor == cursor
    assert paginator.state is PaginatorState.EXHAUSTED


def test_empty_list_exhausts_on_first_call():
    source = FakeHistorySource()
    paginator = FeedPaginator([], source, batch_size=20)
    assert asyncio.run(paginator.next_batch()) == []
    assert paginator.state is PaginatorState.EXHAUSTED
    assert source.visit_calls == []


def test_exact_multiple_exhausts_with_last_full_batch():
    paginator = FeedPaginator(make_records(urls(4)), FakeHistorySource(), batch_size=2)
    assert len(asyncio.run(paginator.next_batch())) == 2
    assert paginator.state is PaginatorState.READY
    assert len(asyncio.run(paginator.next_batch())) == 2
    assert paginator.state is PaginatorState.EXHAUSTED


def test_visit_counts_resolved_at_serve_time():
    records = make_records(["https://a.com/", "https://b.com/"])
    source = FakeHistorySource(visits={"https://a.com/": ["link", "typed", "link"]})
    paginator = FeedPaginator(records, source, batch_size=1)
    assert source.visit_calls == []

    batch = asyncio.run(paginator.next_batch())
    assert batch[0].visit_count == 3
    assert source.visit_calls == ["https://a.com/"]
    assert records[0].visit_count == 0


def test_lookup_failure_keeps_record():
    records = make_records(["https://a.com/", "https://b.com/"])
    source = FakeHistorySource(failing_urls={"https://a.com/"})
    batch = asyncio.run(FeedPaginator(records, source).next_batch())
    assert [r.url for r in batch] == ["https://a.com/", "https://b.com/"]
    assert batch[0].visit_count == 0
    assert batch[1].visit_count == 1


def test_concurrent_calls_fetch_one_batch():
    records = make_records(urls(30))
    source = FakeHistorySource(delay=0.01)
    paginator = FeedPaginator(records, source, batch_size=10)

    async def scroll_twice():
        return await asyncio.gather(paginator.next_batch(), paginator.next_batch())

    first, second = asyncio.run(scroll_twice())
    assert len(first) == 10
    assert second == []
    assert paginator.offset == 10
    assert len(source.visit_calls) == 10
    assert paginator.state is PaginatorState.READY


def test_state_is_loading_while_batch_in_flight():
    source = FakeHistorySource(delay=0.01)
    paginator = FeedPaginator(make_records(urls(2)), source, batch_size=1)
    seen = []

    async def run():
        task = asyncio.ensure_future(paginator.next_batch())
        await asyncio.sleep(0)
        seen.append(paginator.state)
        await task
        seen.append(paginator.state)

    asyncio.run(run())
    assert seen == [PaginatorState.LOADING, PaginatorState.READY]


def test_batches_never_skip_or_repeat():
    records = make_records(urls(47))
    paginator = FeedPaginator(records, FakeHistorySource(), batch_size=10)
    served = []
    while paginator.has_more:
        served.extend(asyncio.run(paginator.next_batch()))
    assert [r.url for r in served] == [r.url for r in records]
    assert paginator.remaining == 0
