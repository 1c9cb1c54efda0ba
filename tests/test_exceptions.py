"""Tests for exception hierarchy."""

from history_feed.exceptions import (
    BlacklistError,
    ConfigError,
    FetchError,
    HistoryFeedError,
    ParseError,
    ProviderError,
    SourceError,
    StorageError,
)


def test_all_inherit_from_base():
    for exc_class in [
        ParseError,
        BlacklistError,
        SourceError,
        ProviderError,
        ConfigError,
        FetchError,
        StorageError,
    ]:
        assert issubclass(exc_class, HistoryFeedError)


def test_config_error_is_a_provider_error():
    assert issubclass(ConfigError, ProviderError)


def test_exception_message():
    e = ProviderError("test error")
    assert str(e) == "test error"
