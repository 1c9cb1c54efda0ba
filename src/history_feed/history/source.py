"""History source adapters: the contract and a Chrome SQLite implementation."""

from __future__ import annotations

import asyncio
import logging
import shutil
import sqlite3
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from history_feed.exceptions import SourceError
from history_feed.history.models import VisitDetail, VisitRecord

logger = logging.getLogger(__name__)

CHROME_HISTORY_PATH = (
    Path.home() / "Library" / "Application Support" / "Google" / "Chrome" / "Default" / "History"
)

# Seconds from 1601-01-01 to 1970-01-01 (Chrome epoch).
CHROME_EPOCH_OFFSET = 11644473600

# Core transition types, indexed by the low byte of visits.transition.
CHROME_TRANSITIONS = (
    "link",
    "typed",
    "auto_bookmark",
    "auto_subframe",
    "manual_subframe",
    "generated",
    "auto_toplevel",
    "form_submit",
    "reload",
    "keyword",
    "keyword_generated",
)
CHROME_CORE_MASK = 0xFF


class HistorySource(ABC):
    """Abstract interface for a browser history backend."""

    @abstractmethod
    async def search(self, start_ms: int, end_ms: int, max_results: int) -> list[VisitRecord]:
        """Records last visited within ``[start_ms, end_ms]``, newest first."""
        ...

    @abstractmethod
    async def get_visits(self, url: str) -> list[VisitDetail]:
        """Every visit event recorded for ``url``."""
        ...


def chrome_ts_to_ms(ts: int | None) -> int:
    if not ts:
        return 0
    return int(ts) // 1000 - CHROME_EPOCH_OFFSET * 1000


def ms_to_chrome_ts(ms: int) -> int:
    return (int(ms) + CHROME_EPOCH_OFFSET * 1000) * 1000


def chrome_transition_name(code: int | None) -> str:
    core = int(code or 0) & CHROME_CORE_MASK
    if core < len(CHROME_TRANSITIONS):
        return CHROME_TRANSITIONS[core]
    return "link"


class ChromeHistorySource(HistorySource):
    """Read history from a local Chrome ``History`` SQLite database.

    Chrome keeps the database locked while running, so queries run against a
    temporary copy. Every ``search`` takes a fresh copy and visit lookups use
    the latest one. ``close()`` (or leaving the async context) removes it.

    Args:
        history_path: Path to a Chrome profile's ``History`` file.
    """

    def __init__(self, history_path: str | Path | None = None) -> None:
        self.history_path = Path(history_path) if history_path else CHROME_HISTORY_PATH
        self._snapshot: Path | None = None
        self._snapshot_lock = threading.Lock()

    async def __aenter__(self) -> ChromeHistorySource:
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._snapshot is not None:
            self._snapshot.unlink(missing_ok=True)
            self._snapshot = None

    def _snapshot_path(self, refresh: bool = False) -> Path:
        """Current copy of the history DB; ``refresh`` replaces it with a new one."""
        with self._snapshot_lock:
            if refresh or self._snapshot is None:
                stale = self._snapshot
                self._snapshot = self._copy_db()
                if stale is not None:
                    stale.unlink(missing_ok=True)
            return self._snapshot

    def _copy_db(self) -> Path:
        if not self.history_path.exists():
            raise SourceError(f"Chrome history DB not found at {self.history_path}")
        try:
            with tempfile.NamedTemporaryFile(prefix="chrome-history-", suffix=".db", delete=False) as tmp:
                tmp_path = Path(tmp.name)
            shutil.copy2(self.history_path, tmp_path)
        except OSError as e:
            raise SourceError(f"Failed to copy Chrome history DB {self.history_path}: {e}") from e
        return tmp_path

    def _query(self, sql: str, params: tuple, refresh: bool = False) -> list[sqlite3.Row]:
        path = self._snapshot_path(refresh)
        conn: sqlite3.Connection | None = None
        try:
            conn = sqlite3.connect(str(path))
            conn.row_factory = sqlite3.Row
            return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise SourceError(f"Failed querying Chrome history: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def _search_sync(self, start_ms: int, end_ms: int, max_results: int) -> list[VisitRecord]:
        rows = self._query(
            """
            SELECT
                COALESCE(url, '') AS url,
                title,
                last_visit_time,
                COALESCE(visit_count, 0) AS visit_count
            FROM urls
            WHERE last_visit_time BETWEEN ? AND ?
            ORDER BY last_visit_time DESC
            LIMIT ?
            """,
            (ms_to_chrome_ts(start_ms), ms_to_chrome_ts(end_ms), max(1, max_results)),
            refresh=True,
        )
        return [
            VisitRecord(
                url=row["url"],
                title=row["title"] or None,
                last_visit_time=chrome_ts_to_ms(row["last_visit_time"]),
                visit_count=int(row["visit_count"]),
            )
            for row in rows
        ]

    def _get_visits_sync(self, url: str) -> list[VisitDetail]:
        rows = self._query(
            """
            SELECT v.transition AS transition
            FROM visits v
            JOIN urls u ON u.id = v.url
            WHERE u.url = ?
            ORDER BY v.visit_time
            """,
            (url,),
        )
        return [VisitDetail(transition=chrome_transition_name(row["transition"])) for row in rows]

    async def search(self, start_ms: int, end_ms: int, max_results: int) -> list[VisitRecord]:
        return await asyncio.to_thread(self._search_sync, start_ms, end_ms, max_results)

    async def get_visits(self, url: str) -> list[VisitDetail]:
        return await asyncio.to_thread(self._get_visits_sync, url)
