# api/services/scripture/verse_store.py
"""
Local verse store for translations imported into the bible_verses table.

Each imported translation keeps its own book naming convention:
- KJV uses Roman numeral ordinals and older titles: "I Samuel",
  "III John", "Revelation of John"
- NASB uses Arabic numerals and modern titles: "1 Samuel", "Revelation"

References are parsed, the book is mapped to the translation's convention
and verses are read by exact (translation, book, chapter, verse) keys.
"""

import logging
import sqlite3
from typing import Iterable, Optional

from core.config import KJV

from .errors import DatabaseError, NotFound
from .reference_parser import ParsedReference, lookup_book, parse_reference

logger = logging.getLogger(__name__)

KJV_BOOK_NAMES = {
    "1 Samuel": "I Samuel",
    "2 Samuel": "II Samuel",
    "1 Kings": "I Kings",
    "2 Kings": "II Kings",
    "1 Chronicles": "I Chronicles",
    "2 Chronicles": "II Chronicles",
    "1 Corinthians": "I Corinthians",
    "2 Corinthians": "II Corinthians",
    "1 Thessalonians": "I Thessalonians",
    "2 Thessalonians": "II Thessalonians",
    "1 Timothy": "I Timothy",
    "2 Timothy": "II Timothy",
    "1 Peter": "I Peter",
    "2 Peter": "II Peter",
    "1 John": "I John",
    "2 John": "II John",
    "3 John": "III John",
    "Revelation": "Revelation of John",
}

IMPORT_BATCH_SIZE = 500


def book_name_for(book: str, translation: str) -> str:
    """Map a book name to the naming convention of an imported translation."""
    canonical = lookup_book(book) or book
    if translation == KJV:
        return KJV_BOOK_NAMES.get(canonical, canonical)
    return canonical


def _segments(ref: ParsedReference) -> list[tuple[int, int, Optional[int]]]:
    """(chapter, first verse, last verse or None) for each chapter touched."""
    if ref.verse_start is None:
        return [(ref.chapter, 1, None)]
    if ref.is_cross_chapter:
        segments = [(ref.chapter, ref.verse_start, None)]
        segments.extend((ch, 1, None) for ch in range(ref.chapter + 1, ref.end_chapter))
        segments.append((ref.end_chapter, 1, ref.verse_end))
        return segments
    return [(ref.chapter, ref.verse_start, ref.verse_end or ref.verse_start)]


class LocalVerseStore:
    """
    Reads passages from the bible_verses table.

    Usage:
        store = LocalVerseStore(get_db())
        text = store.get_passage("Genesis 1:1-3", "kjv")
        # "[1] In the beginning... [2] And the earth... [3] And God said..."
    """

    def __init__(self, db):
        self.db = db

    def _fetch(self, translation: str, book: str, chapter: int, first: int, last: Optional[int]):
        sql = """SELECT chapter, verse, text FROM bible_verses
                 WHERE translation = ? AND book = ? AND chapter = ? AND verse >= ?"""
        params = [translation, book, chapter, first]
        if last is not None:
            sql += " AND verse <= ?"
            params.append(last)
        sql += " ORDER BY verse ASC"

        try:
            return self.db.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Verse lookup failed for {book} {chapter} ({translation}): {e}")
            raise DatabaseError(f"Database error: {e}") from e

    def get_passage(self, reference: str, translation: str) -> str:
        """
        Get passage text with inline verse numbers.

        Raises:
            MalformedReference: The reference cannot be parsed
            NotFound: No verses matched (translation probably not imported)
            DatabaseError: The query failed
        """
        parsed = parse_reference(reference)
        book = book_name_for(parsed.book, translation)

        parts = []
        for index, (chapter, first, last) in enumerate(_segments(parsed)):
            rows = self._fetch(translation, book, chapter, first, last)
            for position, row in enumerate(rows):
                if index > 0 and position == 0:
                    marker = f"{row['chapter']}:{row['verse']}"
                else:
                    marker = str(row["verse"])
                parts.append(f"[{marker}] {row['text']}")

        if not parts:
            raise NotFound(
                f"Scripture text not found in database for {translation.upper()}. "
                "Make sure the translation has been imported."
            )

        logger.debug(f"Read {len(parts)} verses of {book} ({translation}) from local store")
        return " ".join(parts)

    def import_verses(self, verses: Iterable[dict], batch_size: int = IMPORT_BATCH_SIZE) -> tuple[int, int]:
        """
        Upsert verses in batches.

        Args:
            verses: Dicts with translation, book, chapter, verse, text
            batch_size: Rows per transaction

        Returns:
            (imported, errors) row counts
        """
        imported = 0
        errors = 0
        batch = []

        def flush():
            nonlocal imported, errors
            if not batch:
                return
            try:
                with self.db:
                    self.db.executemany(
                        """INSERT INTO bible_verses (translation, book, chapter, verse, text)
                           VALUES (:translation, :book, :chapter, :verse, :text)
                           ON CONFLICT(translation, book, chapter, verse)
                           DO UPDATE SET text = excluded.text""",
                        batch,
                    )
                imported += len(batch)
            except sqlite3.Error as e:
                logger.error(f"Error importing batch of {len(batch)} verses: {e}")
                errors += len(batch)
            batch.clear()

        for verse in verses:
            batch.append(verse)
            if len(batch) >= batch_size:
                flush()
        flush()

        return imported, errors

    def verse_total(self, translation: str) -> int:
        try:
            row = self.db.execute(
                "SELECT COUNT(*) FROM bible_verses WHERE translation = ?", (translation,)
            ).fetchone()
        except sqlite3.Error as e:
            raise DatabaseError(f"Database error: {e}") from e
        return row[0]
