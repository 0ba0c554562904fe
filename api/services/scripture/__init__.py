# api/services/scripture/__init__.py
"""
Scripture reference resolution for the devotional content API.

This package provides:
- ParsedReference / parse_reference: Parse human-readable citations
- split_references: Expand "Rom 6:23; 10:9, 13" style lists
- chapter_length: Verses-per-chapter table for the 66-book canon
- count_verses / count_reference: Verse weights for quota accounting
- EsvClient: ESV API access
- LocalVerseStore: KJV/NASB lookups from the bible_verses table
- Error types shared by the service and routes

The translation router (ScriptureService) lives in
services.scripture.scripture_service and is imported from there, since it
depends on services.cache which in turn depends on this package.
"""

from .errors import (
    ScriptureError,
    MalformedReference,
    InvalidTranslation,
    NotFound,
    ProviderUnavailable,
    NotConfigured,
    DatabaseError,
)
from .reference_parser import (
    ParsedReference,
    parse_reference,
    try_parse_reference,
    parse_reference_list,
    split_references,
    resolve_reference,
    normalize_book_name,
    lookup_book,
    is_valid_reference,
    BOOK_NAMES,
)
from .chapter_lengths import (
    CHAPTER_VERSE_COUNTS,
    BOOK_ORDER,
    chapter_length,
    chapter_count,
    book_lengths,
    known_books,
)
from .verse_counter import (
    count_verses,
    count_reference,
    count_reference_list,
)
from .esv_client import EsvClient
from .verse_store import LocalVerseStore, book_name_for

__all__ = [
    # Errors
    "ScriptureError",
    "MalformedReference",
    "InvalidTranslation",
    "NotFound",
    "ProviderUnavailable",
    "NotConfigured",
    "DatabaseError",
    # Reference parsing
    "ParsedReference",
    "parse_reference",
    "try_parse_reference",
    "parse_reference_list",
    "split_references",
    "resolve_reference",
    "normalize_book_name",
    "lookup_book",
    "is_valid_reference",
    "BOOK_NAMES",
    # Chapter lengths
    "CHAPTER_VERSE_COUNTS",
    "BOOK_ORDER",
    "chapter_length",
    "chapter_count",
    "book_lengths",
    "known_books",
    # Verse counting
    "count_verses",
    "count_reference",
    "count_reference_list",
    # Sources
    "EsvClient",
    "LocalVerseStore",
    "book_name_for",
]
