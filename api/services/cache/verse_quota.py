"""
Verse Quota

Keeps the number of verses cached for a licensed translation at or below
a ceiling. The running total is never stored: it is recomputed from the
committed cache rows every time, so concurrent writers cannot make it
drift.

Eviction is least-recently-cached first, weighted by verse count. One
"Psalm 119" entry frees 176 verses while a single-verse entry frees 1,
so the total is re-checked after every single eviction.
"""

import logging
from typing import Any, Callable, Dict, Optional

from core.config import ESV, ESV_VERSE_LIMIT
from services.scripture.verse_counter import count_reference

from .scripture_cache import ScriptureCache

logger = logging.getLogger(__name__)


class VerseQuota:
    """Cost-weighted LRU enforcement over one translation's cache rows."""

    def __init__(
        self,
        cache: ScriptureCache,
        translation: str = ESV,
        ceiling: int = ESV_VERSE_LIMIT,
        weigh: Callable[[str], int] = count_reference,
    ):
        self.cache = cache
        self.translation = translation
        self.ceiling = ceiling
        self.weigh = weigh

    def total_verses(self) -> int:
        """Sum of verse weights across all live entries."""
        return sum(self.weigh(e.reference) for e in self.cache.entries(self.translation))

    def enforce(self, ceiling: Optional[int] = None) -> int:
        """
        Evict oldest entries until the cached verse total is within ceiling.

        Args:
            ceiling: Maximum verses allowed (defaults to the configured limit)

        Returns:
            Number of entries evicted
        """
        ceiling = self.ceiling if ceiling is None else ceiling
        evicted = 0

        while True:
            weighted = [
                (entry, self.weigh(entry.reference))
                for entry in self.cache.entries(self.translation)
            ]
            total = sum(weight for _, weight in weighted)
            if total <= ceiling:
                break

            starting_total = total
            removed = 0
            for entry, weight in weighted:
                if total <= ceiling:
                    break
                if self.cache.delete(entry):
                    total -= weight
                    removed += 1
                    logger.info(
                        f"Evicted {entry.reference} ({self.translation}, "
                        f"{weight} verses, cached {entry.cached_at.isoformat()})"
                    )
                else:
                    # Refreshed by a concurrent writer; it is no longer the oldest
                    logger.debug(f"Skipped eviction of {entry.reference}, row changed")

            evicted += removed
            if total <= ceiling or removed == 0:
                if total > ceiling:
                    logger.warning(
                        f"{self.translation.upper()} cache still over limit "
                        f"({total} verses, limit {ceiling}); no rows could be evicted"
                    )
                if removed:
                    logger.info(
                        f"Evicted {removed} old {self.translation.upper()} cache entries "
                        f"(was {starting_total} verses, limit {ceiling})"
                    )
                break
            # Some rows changed under us; re-read committed state.

        return evicted

    def usage(self) -> Dict[str, Any]:
        """Quota headroom for the admin diagnostic endpoint."""
        entries = self.cache.entries(self.translation)
        total = sum(self.weigh(e.reference) for e in entries)
        return {
            "count": len({e.reference for e in entries}),
            "totalVerses": total,
            "verseLimit": self.ceiling,
            "withinLimit": total <= self.ceiling,
        }
