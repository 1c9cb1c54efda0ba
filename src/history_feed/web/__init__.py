"""Page content fetching."""

from history_feed.web.fetcher import MAX_CONTENT_LENGTH, PageFetcher, extract_text

__all__ = ["MAX_CONTENT_LENGTH", "PageFetcher", "extract_text"]
