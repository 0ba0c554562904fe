# api/services/scripture/verse_counter.py
"""
Verse counting for ESV quota accounting.

Every function here returns at least 1. Missing chapter data or an
unparseable reference degrades to a count of 1 instead of raising.
"""

import logging

from .chapter_lengths import chapter_length
from .errors import MalformedReference
from .reference_parser import ParsedReference, parse_reference, split_references

logger = logging.getLogger(__name__)


def count_verses(ref: ParsedReference) -> int:
    """
    Number of verses a parsed reference denotes.

    - Whole chapter: the chapter length, or 1 if unknown
    - Single verse: 1
    - Same-chapter range: verse_end - verse_start + 1
    - Cross-chapter range: remainder of the start chapter, plus every full
      chapter in between, plus verse_end verses of the end chapter. A
      segment with no chapter data contributes 0.
    """
    if ref.verse_start is None:
        length = chapter_length(ref.book, ref.chapter)
        if length is None:
            logger.debug(f"No chapter data for {ref.book} {ref.chapter}, counting 1")
            return 1
        return length

    if ref.is_cross_chapter:
        total = 0

        start_length = chapter_length(ref.book, ref.chapter)
        if start_length is not None:
            total += max(start_length - ref.verse_start + 1, 0)

        for chapter in range(ref.chapter + 1, ref.end_chapter):
            total += chapter_length(ref.book, chapter) or 0

        if chapter_length(ref.book, ref.end_chapter) is not None:
            total += ref.verse_end

        return max(total, 1)

    if ref.verse_end is not None:
        return max(ref.verse_end - ref.verse_start + 1, 1)

    return 1


def count_reference(reference: str) -> int:
    """
    Parse and count a single reference string.

    A malformed reference counts as 1 verse.
    """
    try:
        parsed = parse_reference(reference)
    except MalformedReference as e:
        logger.warning(f"{e}; counting as 1 verse")
        return 1
    return count_verses(parsed)


def count_reference_list(references: str) -> int:
    """
    Total verses across a ";"/","-separated list with continuation verses.

    Each unparseable fragment counts as 1 verse and the rest are still
    counted.
    """
    fragments = split_references(references)
    if not fragments:
        return 1
    return sum(count_reference(fragment) for fragment in fragments)
