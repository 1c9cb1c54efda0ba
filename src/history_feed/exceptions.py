"""Unified exception hierarchy for history-feed."""


class HistoryFeedError(Exception):
    """Base exception for all history-feed errors."""


# URLs
class ParseError(HistoryFeedError):
    """A history URL could not be parsed."""


# Blacklist
class BlacklistError(HistoryFeedError):
    """Failed to read or decode a blacklist rule file."""


# History source
class SourceError(HistoryFeedError):
    """History query or visit-detail lookup failed."""


# LLM
class ProviderError(HistoryFeedError):
    """LLM provider call failed or returned an unexpected payload."""


class ConfigError(ProviderError):
    """LLM provider is missing a credential, endpoint or known name."""


# Web
class FetchError(HistoryFeedError):
    """Failed to fetch or extract page content."""


# Storage
class StorageError(HistoryFeedError):
    """Failed to read or write the key-value store."""
