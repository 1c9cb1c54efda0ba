"""History feed, aggregation and statistics."""

from history_feed.history.aggregator import aggregate, build_domain_stats, filter_records, top_n
from history_feed.history.feed import FeedSession, format_time_ago
from history_feed.history.models import (
    AggregateResult,
    DomainAggregate,
    FeedCursor,
    FilterResult,
    PaginatorState,
    StatsSummary,
    VisitDetail,
    VisitRecord,
)
from history_feed.history.paginator import FeedPaginator
from history_feed.history.source import ChromeHistorySource, HistorySource
from history_feed.history.stats import StatisticsSession

__all__ = [
    "AggregateResult",
    "ChromeHistorySource",
    "DomainAggregate",
    "FeedCursor",
    "FeedPaginator",
    "FeedSession",
    "FilterResult",
    "HistorySource",
    "PaginatorState",
    "StatisticsSession",
    "StatsSummary",
    "VisitDetail",
    "VisitRecord",
    "aggregate",
    "build_domain_stats",
    "filter_records",
    "format_time_ago",
    "top_n",
]
