"""Tests for blacklist filtering and domain statistics."""

import asyncio

from conftest import FakeHistorySource, make_records

from history_feed.blacklist import BlacklistRuleSet
from history_feed.history.aggregator import aggregate, build_domain_stats, filter_records, top_n
from history_feed.history.models import DomainAggregate, VisitRecord


def test_filter_counts_blacklisted_records():
    records = make_records([
        "https://example.com/a",
        "https://other.org/",
        "https://example.com/b",
        "https://third.net/x",
        "https://example.com/c",
    ])
    result = filter_records(records, BlacklistRuleSet(domains=("example.com",)))
    assert [r.url for r in result.kept] == ["https://other.org/", "https://third.net/x"]
    assert result.filtered_out_count == 3


def test_filter_keeps_unparsable_records():
    records = make_records(["not a url", "https://example.com/"])
    result = filter_records(records, BlacklistRuleSet(domains=("*",)))
    assert [r.url for r in result.kept] == ["not a url"]
    assert result.filtered_out_count == 1


def test_domain_stats_typed_clicked_split():
    records = make_records([
        "https://www.example.com/a",
        "https://blog.example.com/b",
        "https://news.site.co.uk/",
    ])
    source = FakeHistorySource(visits={
        "https://www.example.com/a": ["typed", "link", "typed"],
        "https://blog.example.com/b": ["form_submit"],
        "https://news.site.co.uk/": ["typed"],
    })
    stats = asyncio.run(build_domain_stats(records, source))

    assert [s.domain for s in stats] == ["example.com", "site.co.uk"]
    example = stats[0]
    assert example.visit_count == 4
    assert example.typed_count == 2
    assert example.clicked_count == 2
    assert [s.percentage for s in stats] == [80.0, 20.0]
    for s in stats:
        assert s.typed_count + s.clicked_count == s.visit_count


def test_domain_stats_percentage_one_decimal():
    records = make_records([
        "https://a.com/1",
        "https://a.com/2",
        "https://b.com/",
    ])
    stats = asyncio.run(build_domain_stats(records, FakeHistorySource()))
    assert [(s.domain, s.visit_count, s.percentage) for s in stats] == [
        ("a.com", 2, 66.7),
        ("b.com", 1, 33.3),
    ]


def test_domain_stats_percentages_never_exceed_100():
    records = make_records(["https://a.com/", "https://b.com/"])
    source = FakeHistorySource(visits={"https://a.com/": ["typed"] * 5})
    stats = asyncio.run(build_domain_stats(records, source))
    assert [(s.domain, s.visit_count, s.percentage) for s in stats] == [
        ("a.com", 5, 83.3),
        ("b.com", 1, 16.7),
    ]
    assert all(s.percentage <= 100 for s in stats)
    assert abs(sum(s.percentage for s in stats) - 100) < 0.2


def test_domain_stats_dedupes_urls():
    records = make_records(["https://a.com/x", "https://a.com/x"])
    source = FakeHistorySource(visits={"https://a.com/x": ["typed"]})
    stats = asyncio.run(build_domain_stats(records, source))
    assert stats[0].visit_count == 1
    assert source.visit_calls == ["https://a.com/x"]


def test_domain_stats_skips_unparsable_urls():
    records = make_records(["::nonsense", "https://a.com/"])
    stats = asyncio.run(build_domain_stats(records, FakeHistorySource()))
    assert [s.domain for s in stats] == ["a.com"]
    assert stats[0].percentage == 100.0


def test_domain_stats_survives_lookup_failure():
    records = make_records(["https://a.com/ok", "https://a.com/broken"])
    source = FakeHistorySource(
        visits={"https://a.com/ok": ["typed"]},
        failing_urls={"https://a.com/broken"},
    )
    stats = asyncio.run(build_domain_stats(records, source))
    assert stats[0].visit_count == 2
    assert stats[0].typed_count == 1
    assert stats[0].clicked_count == 0


def test_url_without_visit_events_counts_as_one_click():
    records = make_records(["https://a.com/"])
    source = FakeHistorySource(visits={"https://a.com/": []})
    stats = asyncio.run(build_domain_stats(records, source))
    assert (stats[0].visit_count, stats[0].typed_count, stats[0].clicked_count) == (1, 0, 1)


def test_domain_stats_sorted_by_visits_ties_in_discovery_order():
    records = make_records([
        "https://b.com/",
        "https://a.com/",
        "https://c.com/1",
        "https://c.com/2",
    ])
    stats = asyncio.run(build_domain_stats(records, FakeHistorySource()))
    assert [s.domain for s in stats] == ["c.com", "b.com", "a.com"]


def test_domain_stats_empty():
    assert asyncio.run(build_domain_stats([], FakeHistorySource())) == []


def test_aggregate_filters_then_rolls_up():
    records = make_records([
        "https://tracker.ads.com/p",
        "https://example.com/",
        "https://site.com/login",
        "https://example.com/b",
    ])
    rules = BlacklistRuleSet(domains=("*.ads.com",), patterns=("/login",))
    source = FakeHistorySource()
    result = asyncio.run(aggregate(records, rules, source))

    assert result.filtered_out_count == 2
    assert [r.url for r in result.filtered] == ["https://example.com/", "https://example.com/b"]
    assert result.domain_stats == [
        DomainAggregate("example.com", visit_count=2, typed_count=0, clicked_count=2, percentage=100.0)
    ]
    assert "https://tracker.ads.com/p" not in source.visit_calls


def test_top_n():
    stats = [DomainAggregate(d, visit_count=n) for d, n in [("a", 3), ("b", 2), ("c", 1)]]
    assert [s.domain for s in top_n(stats, 2)] == ["a", "b"]
    assert len(top_n(stats, None)) == 3
    assert top_n(stats, 10) == stats
    assert top_n(stats, 0) == []


def test_records_are_not_mutated():
    record = VisitRecord(url="https://a.com/", title=None, last_visit_time=1, visit_count=5)
    asyncio.run(build_domain_stats([record], FakeHistorySource()))
    assert record.visit_count == 5
