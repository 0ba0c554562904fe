# api/services/scripture/scripture_service.py
"""
Translation router for scripture lookups.

- kjv, nasb: read from the local bible_verses table, never cached
- esv: served from the scripture cache when fresh; on a miss fetched from
  the ESV API, written back, then the 500-verse quota is enforced
"""

import logging
from dataclasses import asdict, dataclass
from typing import Optional

from core.config import ESV, ESV_VERSE_LIMIT, LOCAL_TRANSLATIONS, SUPPORTED_TRANSLATIONS
from services.cache.scripture_cache import ScriptureCache
from services.cache.verse_quota import VerseQuota

from .errors import DatabaseError, InvalidTranslation, MalformedReference
from .esv_client import EsvClient
from .verse_store import LocalVerseStore

logger = logging.getLogger(__name__)


@dataclass
class ScriptureText:
    """
    Passage text returned to callers.

    Attributes:
        reference: The reference as requested (trimmed)
        text: Passage text with inline verse numbers
        translation: Translation code ("esv", "kjv", "nasb")
        cached: True if served from the scripture cache
    """
    reference: str
    text: str
    translation: str
    cached: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


class ScriptureService:
    """
    Unified scripture lookup across translations.

    Usage:
        service = ScriptureService(get_db())
        result = service.fetch_text("Rom 6:23", "esv")
        print(result.text, result.cached)
    """

    def __init__(
        self,
        db,
        esv_client: Optional[EsvClient] = None,
        cache: Optional[ScriptureCache] = None,
        verse_limit: int = ESV_VERSE_LIMIT,
    ):
        self.db = db
        self.esv = esv_client or EsvClient()
        self.cache = cache or ScriptureCache(db)
        self.quota = VerseQuota(self.cache, translation=ESV, ceiling=verse_limit)
        self.verses = LocalVerseStore(db)

    def fetch_text(self, reference: str, translation: str = ESV) -> ScriptureText:
        """
        Look up passage text.

        Raises:
            MalformedReference: Empty or unparseable reference (local store)
            InvalidTranslation: Unsupported translation code
            NotFound: No text for the reference
            ProviderUnavailable / NotConfigured: ESV API failure
            DatabaseError: Storage failure
        """
        reference = (reference or "").strip()
        if not reference:
            raise MalformedReference(reference, "empty reference")

        translation = (translation or ESV).lower()
        if translation not in SUPPORTED_TRANSLATIONS:
            raise InvalidTranslation(
                'Invalid translation. Must be "esv", "kjv", or "nasb"'
            )

        if translation in LOCAL_TRANSLATIONS:
            logger.debug(f"Fetching {reference} ({translation}) from local database")
            text = self.verses.get_passage(reference, translation)
            return ScriptureText(reference, text, translation, cached=False)

        return self._fetch_esv(reference)

    def _fetch_esv(self, reference: str) -> ScriptureText:
        cached = self.cache.get(reference, ESV)
        if cached:
            logger.debug(f"Cache hit: {reference} ({ESV})")
            return ScriptureText(reference, cached.text, ESV, cached=True)

        logger.debug(f"Cache miss: {reference} ({ESV}) - fetching from ESV API")
        text = self.esv.get_passage(reference)

        # Cache write failures are logged; the fetched text is still returned
        try:
            self.cache.store(reference, ESV, text)
            self.quota.enforce()
        except DatabaseError as e:
            logger.error(f"Failed to cache scripture or enforce ESV limit: {e}")

        return ScriptureText(reference, text, ESV, cached=False)

    def cache_usage(self) -> dict:
        """ESV quota headroom: {count, totalVerses, verseLimit, withinLimit}."""
        return self.quota.usage()
