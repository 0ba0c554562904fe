"""
Cache Services

Scripture text caching with a freshness window, and verse-weighted quota
enforcement for licensed translations.
"""

from .scripture_cache import CacheEntry, ScriptureCache
from .verse_quota import VerseQuota

__all__ = ["CacheEntry", "ScriptureCache", "VerseQuota"]
