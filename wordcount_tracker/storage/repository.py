"""
Repository pattern for data access.

Append-only ledger of word counts keyed by (document path, timestamp).
"""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import List, Optional

from .errors import DuplicateEntry, StoreError
from .models import LedgerEntry

logger = logging.getLogger(__name__)


def as_utc(now: Optional[datetime] = None) -> datetime:
    """Return `now` as an aware UTC datetime; naive values are taken to be UTC."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def start_of_utc_day(now: Optional[datetime] = None) -> int:
    """Return the Unix timestamp of midnight UTC on the day of `now`.

    Args:
        now: Aware datetime; naive values are taken to be UTC. Defaults to
            the current instant.

    Returns:
        Seconds since epoch at 00:00:00 UTC of that day
    """
    midnight = as_utc(now).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return int(midnight.timestamp())


class WordCountRepository:
    """Repository for the word-count ledger.

    Wraps one shared connection. Entries can only be appended and read;
    there are deliberately no update or delete operations.
    """

    def __init__(self, conn: sqlite3.Connection):
        """Initialize the repository with an open, migrated connection.

        Args:
            conn: SQLite connection whose schema is up to date
        """
        self.conn = conn

    def append(self, path: str, words: int, timestamp: int) -> LedgerEntry:
        """Insert one word count into the ledger.

        Args:
            path: Document path relative to the ledger base directory
            words: Word count, must be >= 0
            timestamp: UTC Unix seconds

        Returns:
            The entry that was written

        Raises:
            ValueError: If path is empty or words is negative
            DuplicateEntry: If an entry for (path, timestamp) already exists
            StoreError: On any other database failure
        """
        entry = LedgerEntry(path=path, words=int(words), timestamp=int(timestamp))
        try:
            self.conn.execute(
                "INSERT INTO word_count (path, words, timestamp) VALUES (?, ?, ?)",
                (entry.path, entry.words, entry.timestamp)
            )
        except sqlite3.IntegrityError as e:
            if "UNIQUE" not in str(e).upper():
                raise StoreError(f"Cannot record word count for '{path}': {e}") from e
            raise DuplicateEntry(entry.path, entry.timestamp) from e
        except sqlite3.Error as e:
            raise StoreError(f"Cannot record word count for '{path}': {e}") from e
        logger.debug("Recorded %d words for %s at %d", entry.words, entry.path, entry.timestamp)
        return entry

    def previous_count(self, path: str) -> int:
        """Return the second-most-recent word count for a path.

        The latest entry is usually the current observation, so "previous"
        means the one before it. Ties on timestamp fall back to insertion
        order.

        Args:
            path: Document path

        Returns:
            Word count, or 0 if fewer than two entries exist
        """
        return self._fetch_words("""
            SELECT words FROM word_count
            WHERE path = ?
            ORDER BY timestamp DESC, id DESC
            LIMIT 1 OFFSET 1
        """, (path,))

    def previous_day_count(self, path: str, now: Optional[datetime] = None) -> int:
        """Return the most recent word count recorded before today (UTC).

        Unlike previous_count this returns the latest qualifying entry, since
        excluding today's entries already places it before the current one.

        Args:
            path: Document path
            now: Reference instant for "today"; defaults to the current time

        Returns:
            Word count, or 0 if no entry predates the start of the UTC day
        """
        return self._fetch_words("""
            SELECT words FROM word_count
            WHERE path = ? AND timestamp < ?
            ORDER BY timestamp DESC, id DESC
            LIMIT 1
        """, (path, start_of_utc_day(now)))

    def history(self, path: str) -> List[LedgerEntry]:
        """Return all entries for a path, newest first."""
        rows = self._fetch_all("""
            SELECT path, words, timestamp FROM word_count
            WHERE path = ?
            ORDER BY timestamp DESC, id DESC
        """, (path,))
        return [LedgerEntry(path=row[0], words=row[1], timestamp=row[2]) for row in rows]

    def count_entries(self, path: Optional[str] = None) -> int:
        """Return the number of ledger entries, optionally for one path."""
        if path is None:
            rows = self._fetch_all("SELECT COUNT(*) FROM word_count", ())
        else:
            rows = self._fetch_all(
                "SELECT COUNT(*) FROM word_count WHERE path = ?", (path,)
            )
        return rows[0][0]

    def _fetch_words(self, query: str, params: tuple) -> int:
        rows = self._fetch_all(query, params)
        if not rows or rows[0][0] is None:
            return 0
        return int(rows[0][0])

    def _fetch_all(self, query: str, params: tuple) -> list:
        try:
            return self.conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Ledger query failed: {e}") from e
