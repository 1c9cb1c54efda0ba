"""In-memory chat transcripts keyed by page URL."""

from __future__ import annotations

import logging

from history_feed.chat.models import ChatTranscript

logger = logging.getLogger(__name__)


class ChatSessionStore:
    """Session-scoped transcript storage; nothing is written to disk.

    Keys are the exact URL of the originating history record. ``clear`` and
    ``clear_all`` are immediate; confirming them is up to the caller.
    """

    def __init__(self) -> None:
        self._transcripts: dict[str, ChatTranscript] = {}

    def get(self, url: str) -> ChatTranscript | None:
        return self._transcripts.get(url)

    def upsert(self, url: str, transcript: ChatTranscript) -> None:
        self._transcripts[url] = transcript.copy()

    def clear(self, url: str) -> bool:
        """Remove one transcript. Returns whether it existed."""
        return self._transcripts.pop(url, None) is not None

    def clear_all(self) -> int:
        """Remove every transcript and return how many there were."""
        count = len(self._transcripts)
        self._transcripts.clear()
        logger.info("Cleared %d chat transcripts", count)
        return count

    def __len__(self) -> int:
        return len(self._transcripts)

    def __contains__(self, url: object) -> bool:
        return url in self._transcripts
