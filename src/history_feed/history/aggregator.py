"""Blacklist filtering and root-domain visit statistics."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from history_feed.blacklist import BlacklistRuleSet, matches
from history_feed.exceptions import SourceError
from history_feed.history.models import (
    AggregateResult,
    DomainAggregate,
    FilterResult,
    VisitDetail,
    VisitRecord,
)
from history_feed.history.source import HistorySource
from history_feed.urls import root_domain

logger = logging.getLogger(__name__)


def filter_records(records: Sequence[VisitRecord], rule_set: BlacklistRuleSet) -> FilterResult:
    """Split records into kept and blacklisted, preserving input order."""
    result = FilterResult()
    for record in records:
        if matches(record.url, rule_set):
            result.filtered_out_count += 1
        else:
            result.kept.append(record)
    return result


async def _lookup_visits(source: HistorySource, url: str) -> list[VisitDetail] | None:
    try:
        return await source.get_visits(url)
    except SourceError as e:
        logger.warning("Visit lookup failed for %s: %s", url, e)
        return None


async def _resolve_domain(
    source: HistorySource,
    domain: str,
    urls: list[str],
) -> DomainAggregate:
    aggregate = DomainAggregate(domain=domain)
    results = await asyncio.gather(*(_lookup_visits(source, url) for url in urls))
    for visits in results:
        if visits is None:
            # Counted, but neither typed nor clicked.
            aggregate.visit_count += 1
            continue
        if not visits:
            aggregate.visit_count += 1
            aggregate.clicked_count += 1
            continue
        for visit in visits:
            aggregate.visit_count += 1
            if visit.is_typed:
                aggregate.typed_count += 1
            else:
                aggregate.clicked_count += 1
    return aggregate


async def build_domain_stats(
    records: Sequence[VisitRecord],
    source: HistorySource,
) -> list[DomainAggregate]:
    """Roll records up to root domains with typed/clicked visit breakdowns.

    Every distinct URL of a domain has its visit events looked up and
    classified. ``percentage`` is a domain's share of all counted visit
    events, so the shares of every domain add up to 100. Records whose
    URL has no parsable host are skipped. The result is sorted by
    ``visit_count``, highest first, ties in discovery order.
    """
    domain_urls: dict[str, dict[str, None]] = {}
    for record in records:
        domain = root_domain(record.url)
        if not domain:
            logger.debug("Skipping record without a root domain: %s", record.url)
            continue
        domain_urls.setdefault(domain, {}).setdefault(record.url, None)

    stats = []
    for domain, urls in domain_urls.items():
        stats.append(await _resolve_domain(source, domain, list(urls)))

    total = sum(d.visit_count for d in stats)
    for d in stats:
        d.percentage = round(d.visit_count / total * 100, 1) if total else 0.0

    stats.sort(key=lambda d: d.visit_count, reverse=True)
    logger.info("Rolled %d records up into %d domains", len(records), len(stats))
    return stats


async def aggregate(
    records: Sequence[VisitRecord],
    rule_set: BlacklistRuleSet,
    source: HistorySource,
) -> AggregateResult:
    """Filter records against the blacklist, then compute domain statistics."""
    filtered = filter_records(records, rule_set)
    domain_stats = await build_domain_stats(filtered.kept, source)
    return AggregateResult(
        filtered=filtered.kept,
        filtered_out_count=filtered.filtered_out_count,
        domain_stats=domain_stats,
    )


def top_n(stats: Sequence[DomainAggregate], n: int | None) -> list[DomainAggregate]:
    """First ``n`` domains of an already sorted list; ``None`` keeps all."""
    if n is None:
        return list(stats)
    return list(stats[: max(0, n)])
