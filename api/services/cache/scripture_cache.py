"""
Scripture Cache

Caches passage text fetched from remote providers, keyed by the raw
reference string and translation code. One row per (reference,
translation); a write always replaces the whole row.
"""

import logging
import sqlite3
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from core.config import SCRIPTURE_CACHE_TTL_DAYS
from services.scripture.errors import DatabaseError

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _parse_timestamp(value: str) -> datetime:
    # Handle both ISO format and SQLite timestamp format
    if "T" in value:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        parsed = datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class CacheEntry:
    """
    A cached passage. Identified by (reference, translation).

    stored_at is the cached_at text exactly as it sits in the row, which
    may be an older SQLite or "Z"-suffixed format. Deletes match on it.
    """
    reference: str
    translation: str
    text: str
    cached_at: datetime
    stored_at: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_row(cls, row) -> "CacheEntry":
        return cls(
            reference=row["reference"],
            translation=row["translation"],
            text=row["text"],
            cached_at=_parse_timestamp(row["cached_at"]),
            stored_at=row["cached_at"],
        )


class ScriptureCache:
    """Caches scripture text with a freshness window."""

    def __init__(
        self,
        db,
        ttl_days: int = SCRIPTURE_CACHE_TTL_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.ttl = timedelta(days=ttl_days)
        self.clock = clock

    def _execute(self, sql: str, params: tuple = ()):
        try:
            return self.db.execute(sql, params)
        except sqlite3.Error as e:
            logger.error(f"Scripture cache query failed: {e}")
            raise DatabaseError(f"Database error: {e}") from e

    def _commit(self):
        try:
            self.db.commit()
        except sqlite3.Error as e:
            logger.error(f"Scripture cache commit failed: {e}")
            raise DatabaseError(f"Database error: {e}") from e

    def is_fresh(self, entry: CacheEntry, now: Optional[datetime] = None) -> bool:
        now = now or self.clock()
        return now - entry.cached_at <= self.ttl

    def get_any(self, reference: str, translation: str) -> Optional[CacheEntry]:
        """Get the cached entry regardless of age."""
        row = self._execute(
            """SELECT reference, translation, text, cached_at
               FROM scripture_cache
               WHERE reference = ? AND translation = ?""",
            (reference, translation),
        ).fetchone()
        return CacheEntry.from_row(row) if row else None

    def get(self, reference: str, translation: str) -> Optional[CacheEntry]:
        """
        Get a cached entry only if it is within the freshness window.

        An expired entry is reported as a miss so the caller refreshes it.
        """
        entry = self.get_any(reference, translation)
        if entry is None:
            return None

        if not self.is_fresh(entry):
            logger.debug(f"Cache expired for {reference} ({translation})")
            return None

        return entry

    def put(self, entry: CacheEntry) -> CacheEntry:
        """Insert or wholly replace the entry for (reference, translation)."""
        stored_at = _format_timestamp(entry.cached_at)
        self._execute(
            """INSERT INTO scripture_cache (reference, translation, text, cached_at)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(reference, translation) DO UPDATE SET
                   text = excluded.text,
                   cached_at = excluded.cached_at""",
            (
                entry.reference,
                entry.translation,
                entry.text,
                stored_at,
            ),
        )
        self._commit()

        logger.info(f"Cached {entry.reference} ({entry.translation}, {len(entry.text)} chars)")
        return replace(entry, stored_at=stored_at)

    def store(self, reference: str, translation: str, text: str) -> CacheEntry:
        """Build an entry stamped with the current time and put it."""
        return self.put(CacheEntry(reference, translation, text, self.clock()))

    def entries(self, translation: str) -> List[CacheEntry]:
        """All entries for a translation, oldest first (ties by reference)."""
        rows = self._execute(
            """SELECT reference, translation, text, cached_at
               FROM scripture_cache
               WHERE translation = ?""",
            (translation,),
        ).fetchall()
        # Sorted on parsed times; stored strings may mix timestamp formats
        entries = [CacheEntry.from_row(r) for r in rows]
        entries.sort(key=lambda e: (e.cached_at, e.reference))
        return entries

    def references(self, translation: str) -> List[str]:
        rows = self._execute(
            "SELECT reference FROM scripture_cache WHERE translation = ? ORDER BY reference",
            (translation,),
        ).fetchall()
        return [r["reference"] for r in rows]

    def delete(self, entry: CacheEntry) -> bool:
        """
        Delete an entry.

        Only the exact row that was read is removed: if another writer has
        refreshed it since (new cached_at), nothing is deleted and False is
        returned. Matching is on the stored cached_at text, whatever its
        format.
        """
        stored_at = entry.stored_at or _format_timestamp(entry.cached_at)
        cur = self._execute(
            """DELETE FROM scripture_cache
               WHERE reference = ? AND translation = ? AND cached_at = ?""",
            (entry.reference, entry.translation, stored_at),
        )
        self._commit()
        return cur.rowcount > 0

    def purge_expired(self, translation: Optional[str] = None) -> int:
        """Remove all entries older than the freshness window."""
        cutoff = _format_timestamp(self.clock() - self.ttl)
        if translation:
            cur = self._execute(
                "DELETE FROM scripture_cache WHERE translation = ? AND cached_at < ?",
                (translation, cutoff),
            )
        else:
            cur = self._execute(
                "DELETE FROM scripture_cache WHERE cached_at < ?",
                (cutoff,),
            )
        deleted = cur.rowcount
        self._commit()

        if deleted > 0:
            logger.info(f"Cleaned up {deleted} expired cache entries")

        return deleted

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        cutoff = _format_timestamp(self.clock() - self.ttl)

        total_entries = self._execute("SELECT COUNT(*) FROM scripture_cache").fetchone()[0]

        rows = self._execute(
            "SELECT translation, COUNT(*) AS n FROM scripture_cache GROUP BY translation"
        ).fetchall()
        by_translation = {r["translation"]: r["n"] for r in rows}

        expired = self._execute(
            "SELECT COUNT(*) FROM scripture_cache WHERE cached_at < ?",
            (cutoff,),
        ).fetchone()[0]

        return {
            "total_entries": total_entries,
            "by_translation": by_translation,
            "expired_entries": expired,
        }
