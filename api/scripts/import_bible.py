#!/usr/bin/env python3
"""
Import a Bible translation from USX files into the bible_verses table.

Each book is one file named by its 3-letter USX code (GEN.usx, EPH.usx...).
Verse text is taken between the <verse sid=.../> and <verse eid=.../>
milestones (parsed with ElementTree) with footnotes dropped and character
styling unwrapped.
Run from the api directory.

Usage:
    python -m scripts.import_bible /path/to/USX_1
    python -m scripts.import_bible /path/to/USX_1 --translation kjv
    python -m scripts.import_bible /path/to/USX_1 --db ./scripture.db
"""

import argparse
import os
import re
import sys
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import LOCAL_TRANSLATIONS, NASB  # noqa: E402
from services.scripture.verse_store import LocalVerseStore, book_name_for  # noqa: E402
from utils.db import ensure_schema, get_db  # noqa: E402

# USX book codes -> canonical book names
BOOK_CODES = {
    # Old Testament
    "GEN": "Genesis", "EXO": "Exodus", "LEV": "Leviticus", "NUM": "Numbers",
    "DEU": "Deuteronomy", "JOS": "Joshua", "JDG": "Judges", "RUT": "Ruth",
    "1SA": "1 Samuel", "2SA": "2 Samuel", "1KI": "1 Kings", "2KI": "2 Kings",
    "1CH": "1 Chronicles", "2CH": "2 Chronicles", "EZR": "Ezra", "NEH": "Nehemiah",
    "EST": "Esther", "JOB": "Job", "PSA": "Psalms", "PRO": "Proverbs",
    "ECC": "Ecclesiastes", "SNG": "Song of Solomon", "ISA": "Isaiah",
    "JER": "Jeremiah", "LAM": "Lamentations", "EZK": "Ezekiel", "DAN": "Daniel",
    "HOS": "Hosea", "JOL": "Joel", "AMO": "Amos", "OBA": "Obadiah",
    "JON": "Jonah", "MIC": "Micah", "NAM": "Nahum", "HAB": "Habakkuk",
    "ZEP": "Zephaniah", "HAG": "Haggai", "ZEC": "Zechariah", "MAL": "Malachi",
    # New Testament
    "MAT": "Matthew", "MRK": "Mark", "LUK": "Luke", "JHN": "John",
    "ACT": "Acts", "ROM": "Romans", "1CO": "1 Corinthians", "2CO": "2 Corinthians",
    "GAL": "Galatians", "EPH": "Ephesians", "PHP": "Philippians",
    "COL": "Colossians", "1TH": "1 Thessalonians", "2TH": "2 Thessalonians",
    "1TI": "1 Timothy", "2TI": "2 Timothy", "TIT": "Titus", "PHM": "Philemon",
    "HEB": "Hebrews", "JAS": "James", "1PE": "1 Peter", "2PE": "2 Peter",
    "1JN": "1 John", "2JN": "2 John", "3JN": "3 John", "JUD": "Jude",
    "REV": "Revelation",
}

SID_PATTERN = re.compile(r"^\S+\s+(\d+):(\d+)")
XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def clean_verse_text(raw: str) -> str:
    """Collapse the whitespace USX line wrapping leaves in verse text."""
    return re.sub(r"\s+", " ", raw).strip()


class MilestoneReader:
    """
    Collects verse text between <verse sid/> and <verse eid/> milestones.

    Text is gathered in document order across <para> and <char> nesting.
    <note> bodies are dropped but the text following a note is kept. Files
    without eid milestones (USX 2) end a verse at the next verse or chapter.
    """

    def __init__(self):
        self.chapter = 0
        self.current = None  # (chapter, verse, pieces)
        self.verses = []

    def close(self):
        if self.current is not None:
            chapter, verse, pieces = self.current
            self.verses.append((chapter, verse, clean_verse_text("".join(pieces))))
            self.current = None

    def start(self, elem):
        self.close()
        sid_match = SID_PATTERN.match(elem.get("sid", ""))
        if sid_match:
            chapter, verse = int(sid_match.group(1)), int(sid_match.group(2))
        else:
            # USX 2: number may be a span like "4-5"; keep the first verse
            number = re.match(r"\d+", elem.get("number", ""))
            chapter = self.chapter
            verse = int(number.group()) if number else 0
        self.current = (chapter, verse, [])

    def add(self, text):
        if text and self.current is not None:
            self.current[2].append(text)

    def walk(self, elem):
        if elem.tag == "verse":
            if elem.get("eid"):
                self.close()
            else:
                self.start(elem)
        elif elem.tag == "chapter":
            self.close()
            if elem.get("number"):
                self.chapter = int(elem.get("number"))
        elif elem.tag != "note":
            self.add(elem.text)
            for child in elem:
                self.walk(child)
        self.add(elem.tail)

    def read(self, root):
        self.walk(root)
        self.close()
        return self.verses


def parse_usx(content, book_code: str, translation: str = NASB) -> List[dict]:
    """
    Extract verses from the contents of one USX book file.

    Args:
        content: USX document (or a fragment of one) as str or bytes
        book_code: 3-letter USX code (file stem)
        translation: Translation code the verses are stored under

    Returns:
        List of {translation, book, chapter, verse, text} dicts; empty for
        unknown book codes

    Raises:
        ET.ParseError: The document is not well-formed XML
    """
    canonical = BOOK_CODES.get(book_code.upper())
    if not canonical:
        print(f"[!] Unknown book code: {book_code}")
        return []

    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")
    # Wrapped so a bare run of verse milestones still has a single root
    content = XML_DECLARATION.sub("", content, count=1)
    root = ET.fromstring(f"<document>{content}</document>")

    book = book_name_for(canonical, translation)
    verses = []
    for chapter, verse, text in MilestoneReader().read(root):
        if text and chapter > 0 and verse > 0:
            verses.append({
                "translation": translation,
                "book": book,
                "chapter": chapter,
                "verse": verse,
                "text": text,
            })
    return verses


def read_usx_dir(usx_dir: Path, translation: str) -> List[dict]:
    files = sorted(usx_dir.glob("*.usx"))
    print(f"[*] Found {len(files)} USX files in {usx_dir}")

    all_verses = []
    for path in files:
        try:
            verses = parse_usx(path.read_bytes(), path.stem, translation)
        except ET.ParseError as e:
            print(f"[X] {path.name}: not valid USX ({e})")
            continue
        if verses:
            print(f"    {path.stem}: {len(verses)} verses ({verses[0]['book']})")
            all_verses.extend(verses)
    return all_verses


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Import a Bible translation from USX files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("usx_dir", help="Directory of <CODE>.usx files")
    parser.add_argument(
        "--translation",
        default=NASB,
        choices=LOCAL_TRANSLATIONS,
        help="Translation code to import as (default: nasb)"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (default: SCRIPTURE_DB)")
    args = parser.parse_args(argv)

    usx_dir = Path(args.usx_dir)
    if not usx_dir.is_dir():
        print(f"[X] USX directory not found: {usx_dir}")
        return 1

    verses = read_usx_dir(usx_dir, args.translation)
    print(f"\n[*] Total verses parsed: {len(verses)}")

    conn = get_db(args.db)
    try:
        ensure_schema(conn)
        imported, errors = LocalVerseStore(conn).import_verses(verses)
    finally:
        conn.close()

    print("\n=== Import Complete ===")
    print(f"[✓] Imported: {imported} verses")
    if errors:
        print(f"[X] Errors: {errors} verses")
    print(f"    Total processed: {len(verses)} verses")
    return 0 if errors == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
