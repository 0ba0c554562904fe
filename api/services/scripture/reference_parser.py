# api/services/scripture/reference_parser.py
"""
Scripture reference parser.

Handles the notations editors actually use in profile content:
- Full names: "Genesis 1:1"
- Abbreviations: "Gen 1:1", "Rom. 6:23", "jn 3:16"
- Numbered books: "1 John 3:16", "1John 3:16", "I John 3:16"
- Verse ranges with hyphen or en-dash: "Isaiah 40:25-26", "Isaiah 40:25–26"
- Verse-letter suffixes: "Isaiah 44:6–7a" (letter is dropped)
- Cross-chapter ranges: "John 3:1-5:3"
- Whole chapters: "Psalm 23" (verse_start and verse_end are None)
- Lists with continuation verses: "Rom 6:23; 10:9, 13"
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .errors import MalformedReference

logger = logging.getLogger(__name__)


@dataclass
class ParsedReference:
    """
    A parsed scripture reference.

    Attributes:
        book: Canonical book name when the alias is known (e.g., "Romans"),
              otherwise the cleaned-up book text as written
        chapter: Chapter number (first chapter for cross-chapter ranges)
        verse_start: Starting verse, None for a whole chapter
        verse_end: Ending verse, None for a single verse or whole chapter
        end_chapter: Chapter that verse_end belongs to, set only when the
                     range runs into a later chapter
        original: Original input string (ignored for equality)
    """
    book: str
    chapter: int
    verse_start: Optional[int] = None
    verse_end: Optional[int] = None
    end_chapter: Optional[int] = None
    original: str = field(default="", compare=False)

    @property
    def is_chapter(self) -> bool:
        """True if this reference denotes an entire chapter."""
        return self.verse_start is None

    @property
    def is_cross_chapter(self) -> bool:
        """True if the verse range spans into a later chapter."""
        return self.end_chapter is not None and self.end_chapter != self.chapter

    @property
    def last_chapter(self) -> int:
        return self.end_chapter if self.is_cross_chapter else self.chapter

    @property
    def normalized(self) -> str:
        """Return normalized reference string."""
        if self.is_chapter:
            return f"{self.book} {self.chapter}"
        if self.is_cross_chapter:
            return f"{self.book} {self.chapter}:{self.verse_start}-{self.end_chapter}:{self.verse_end}"
        if self.verse_end and self.verse_end != self.verse_start:
            return f"{self.book} {self.chapter}:{self.verse_start}-{self.verse_end}"
        return f"{self.book} {self.chapter}:{self.verse_start}"


# Book name mapping - aliases to canonical names.
# Keys are lowercase with periods and spaces removed and any Roman numeral
# prefix already converted ("I Thess." -> "1thess"), see _book_key().
BOOK_NAMES = {
    # Pentateuch
    "genesis": "Genesis", "gen": "Genesis", "ge": "Genesis", "gn": "Genesis",
    "exodus": "Exodus", "exod": "Exodus", "exo": "Exodus", "ex": "Exodus",
    "leviticus": "Leviticus", "lev": "Leviticus", "le": "Leviticus", "lv": "Leviticus",
    "numbers": "Numbers", "num": "Numbers", "nu": "Numbers", "nm": "Numbers",
    "deuteronomy": "Deuteronomy", "deut": "Deuteronomy", "deu": "Deuteronomy",
    "dt": "Deuteronomy",

    # Historical books
    "joshua": "Joshua", "josh": "Joshua", "jos": "Joshua",
    "judges": "Judges", "judg": "Judges", "jdg": "Judges", "jg": "Judges",
    "ruth": "Ruth", "ru": "Ruth", "rth": "Ruth",
    "1samuel": "1 Samuel", "1sam": "1 Samuel", "1sa": "1 Samuel",
    "2samuel": "2 Samuel", "2sam": "2 Samuel", "2sa": "2 Samuel",
    "1kings": "1 Kings", "1kgs": "1 Kings", "1ki": "1 Kings",
    "2kings": "2 Kings", "2kgs": "2 Kings", "2ki": "2 Kings",
    "1chronicles": "1 Chronicles", "1chron": "1 Chronicles", "1chr": "1 Chronicles",
    "1ch": "1 Chronicles",
    "2chronicles": "2 Chronicles", "2chron": "2 Chronicles", "2chr": "2 Chronicles",
    "2ch": "2 Chronicles",
    "ezra": "Ezra", "ezr": "Ezra",
    "nehemiah": "Nehemiah", "neh": "Nehemiah", "ne": "Nehemiah",
    "esther": "Esther", "esth": "Esther", "est": "Esther", "es": "Esther",

    # Wisdom and poetry
    "job": "Job", "jb": "Job",
    "psalms": "Psalms", "psalm": "Psalms", "psa": "Psalms", "pss": "Psalms",
    "ps": "Psalms",
    "proverbs": "Proverbs", "prov": "Proverbs", "prv": "Proverbs", "pr": "Proverbs",
    "ecclesiastes": "Ecclesiastes", "eccl": "Ecclesiastes", "ecc": "Ecclesiastes",
    "ec": "Ecclesiastes", "qoh": "Ecclesiastes",
    "songofsolomon": "Song of Solomon", "songofsongs": "Song of Solomon",
    "songofsol": "Song of Solomon", "song": "Song of Solomon",
    "canticles": "Song of Solomon", "sos": "Song of Solomon",

    # Major prophets
    "isaiah": "Isaiah", "isa": "Isaiah", "is": "Isaiah",
    "jeremiah": "Jeremiah", "jer": "Jeremiah", "je": "Jeremiah",
    "lamentations": "Lamentations", "lam": "Lamentations", "la": "Lamentations",
    "ezekiel": "Ezekiel", "ezek": "Ezekiel", "eze": "Ezekiel", "ezk": "Ezekiel",
    "daniel": "Daniel", "dan": "Daniel", "da": "Daniel", "dn": "Daniel",

    # Minor prophets
    "hosea": "Hosea", "hos": "Hosea", "ho": "Hosea",
    "joel": "Joel", "joe": "Joel", "jl": "Joel",
    "amos": "Amos", "am": "Amos",
    "obadiah": "Obadiah", "obad": "Obadiah", "ob": "Obadiah",
    "jonah": "Jonah", "jon": "Jonah", "jnh": "Jonah",
    "micah": "Micah", "mic": "Micah", "mi": "Micah",
    "nahum": "Nahum", "nah": "Nahum", "na": "Nahum",
    "habakkuk": "Habakkuk", "hab": "Habakkuk", "hb": "Habakkuk",
    "zephaniah": "Zephaniah", "zeph": "Zephaniah", "zep": "Zephaniah",
    "haggai": "Haggai", "hag": "Haggai", "hg": "Haggai",
    "zechariah": "Zechariah", "zech": "Zechariah", "zec": "Zechariah",
    "malachi": "Malachi", "mal": "Malachi", "ml": "Malachi",

    # Gospels and Acts
    "matthew": "Matthew", "matt": "Matthew", "mat": "Matthew", "mt": "Matthew",
    "mark": "Mark", "mrk": "Mark", "mk": "Mark", "mr": "Mark",
    "luke": "Luke", "luk": "Luke", "lk": "Luke",
    "john": "John", "joh": "John", "jhn": "John", "jn": "John",
    "acts": "Acts", "act": "Acts", "ac": "Acts",

    # Pauline epistles
    "romans": "Romans", "rom": "Romans", "ro": "Romans", "rm": "Romans",
    "1corinthians": "1 Corinthians", "1cor": "1 Corinthians", "1co": "1 Corinthians",
    "2corinthians": "2 Corinthians", "2cor": "2 Corinthians", "2co": "2 Corinthians",
    "galatians": "Galatians", "gal": "Galatians", "ga": "Galatians",
    "ephesians": "Ephesians", "eph": "Ephesians", "ep": "Ephesians",
    "philippians": "Philippians", "phil": "Philippians", "php": "Philippians",
    "colossians": "Colossians", "col": "Colossians",
    "1thessalonians": "1 Thessalonians", "1thess": "1 Thessalonians",
    "1th": "1 Thessalonians",
    "2thessalonians": "2 Thessalonians", "2thess": "2 Thessalonians",
    "2th": "2 Thessalonians",
    "1timothy": "1 Timothy", "1tim": "1 Timothy", "1ti": "1 Timothy",
    "2timothy": "2 Timothy", "2tim": "2 Timothy", "2ti": "2 Timothy",
    "titus": "Titus", "tit": "Titus", "ti": "Titus",
    "philemon": "Philemon", "philem": "Philemon", "phlm": "Philemon", "phm": "Philemon",

    # General epistles
    "hebrews": "Hebrews", "heb": "Hebrews",
    "james": "James", "jas": "James", "jm": "James",
    "1peter": "1 Peter", "1pet": "1 Peter", "1pe": "1 Peter", "1pt": "1 Peter",
    "2peter": "2 Peter", "2pet": "2 Peter", "2pe": "2 Peter", "2pt": "2 Peter",
    "1john": "1 John", "1jn": "1 John", "1jo": "1 John",
    "2john": "2 John", "2jn": "2 John", "2jo": "2 John",
    "3john": "3 John", "3jn": "3 John", "3jo": "3 John",
    "jude": "Jude", "jud": "Jude", "jd": "Jude",

    # Revelation
    "revelation": "Revelation", "revelationofjohn": "Revelation",
    "revelations": "Revelation", "rev": "Revelation", "re": "Revelation",
    "rv": "Revelation", "apocalypse": "Revelation",
}

# "Jude 3" means verse 3 of the only chapter, not chapter 3
SINGLE_CHAPTER_BOOKS = frozenset({"Obadiah", "Philemon", "2 John", "3 John", "Jude"})

_ROMAN_PREFIX = re.compile(r"^(iii|ii|i)\s+")
_ROMAN_TO_ARABIC = {"i": "1", "ii": "2", "iii": "3"}

# <book words> <chapter>[:<verse>[-[<end chapter>:]<end verse>]]
# The book is lazy so it stops before the final chapter group, which lets
# "1 Corinthians 13:4" and "Song of Solomon 2:1" keep their full names.
REFERENCE_PATTERN = re.compile(
    r"^(?P<book>(?:[1-3]|i{1,3})?\s*[a-z][a-z.\s]*?)\.?\s*(?P<chapter>\d+)"
    r"(?::(?P<verse_start>\d+)(?:-(?:(?P<end_chapter>\d+):)?(?P<verse_end>\d+))?)?$",
    re.IGNORECASE,
)

# Fragments of a list that carry no book name
_CHAPTER_VERSE_FRAGMENT = re.compile(r"^(?P<chapter>\d+):\d+(?:-(?:(?P<end_chapter>\d+):)?\d+)?$")
_BARE_NUMBER_FRAGMENT = re.compile(r"^\d+(?:-\d+)?$")

_DASHES = re.compile(r"[–—‒−]")
# "7a", "1ab": letters after a verse number, or a bare continuation verse.
# Only after ":" or "-", or on a lone number, so "1john 4:8" keeps its book.
_VERSE_SUFFIX = re.compile(r"([:-]\d+)[a-z]+(?=$|[-,;\s])")
_BARE_VERSE_SUFFIX = re.compile(r"^(\d+)[a-e]{1,3}$")


def _book_key(name: str) -> str:
    key = name.lower().replace(".", "").strip()
    key = re.sub(r"\s+", " ", key)
    match = _ROMAN_PREFIX.match(key)
    if match:
        key = _ROMAN_TO_ARABIC[match.group(1)] + key[match.end():]
    return key.replace(" ", "")


def lookup_book(name: str) -> Optional[str]:
    """
    Return the canonical book name for an alias, or None if unknown.

    Accepts Arabic or Roman numeral prefixes, with or without periods
    and spacing: "1 Thess.", "I Thessalonians", "1thess" all resolve.
    """
    if not name:
        return None
    return BOOK_NAMES.get(_book_key(name))


def normalize_book_name(name: str) -> str:
    """
    Normalize book name to standard form.

    Args:
        name: Book name in any format

    Returns:
        Canonical book name (e.g., "Genesis", "1 John"), or the input with
        periods dropped and whitespace collapsed if the alias is unknown
    """
    canonical = lookup_book(name)
    if canonical:
        return canonical
    cleaned = re.sub(r"\s+", " ", name.replace(".", " ")).strip()
    return cleaned


def normalize_reference_text(ref_string: str) -> str:
    """
    Apply the textual normalizations that precede pattern matching.

    En/em dashes become hyphens, whitespace around ":" and "-" is removed
    and lowercase verse-letter suffixes ("7a", "1ab") are stripped.
    """
    text = _DASHES.sub("-", ref_string.strip())
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"\s*([:-])\s*", r"\1", text)
    text = _VERSE_SUFFIX.sub(r"\1", text)
    return _BARE_VERSE_SUFFIX.sub(r"\1", text)


def parse_reference(ref_string: str) -> ParsedReference:
    """
    Parse a single scripture reference string.

    Args:
        ref_string: Trimmed citation such as "John 3:16", "Genesis 1:1-3",
                    "Psalm 23" or "Isaiah 40:25–26"

    Returns:
        ParsedReference

    Raises:
        MalformedReference: If the string does not match the reference pattern
    """
    if not ref_string or not ref_string.strip():
        raise MalformedReference(ref_string or "", "empty reference")

    text = normalize_reference_text(ref_string)
    match = REFERENCE_PATTERN.match(text)
    if not match:
        raise MalformedReference(ref_string)

    chapter = int(match.group("chapter"))
    verse_start = match.group("verse_start")
    verse_end = match.group("verse_end")
    end_chapter = match.group("end_chapter")

    verse_start = int(verse_start) if verse_start else None
    verse_end = int(verse_end) if verse_end else None
    end_chapter = int(end_chapter) if end_chapter else None

    if chapter < 1:
        raise MalformedReference(ref_string, "chapter must be at least 1")
    if verse_start is not None and verse_start < 1:
        raise MalformedReference(ref_string, "verse must be at least 1")

    # "John 3:16-3:18" is an ordinary same-chapter range
    if end_chapter == chapter:
        end_chapter = None
    if end_chapter is not None and end_chapter < chapter:
        raise MalformedReference(ref_string, "range ends before it starts")
    if end_chapter is None and verse_end is not None and verse_end < verse_start:
        raise MalformedReference(ref_string, "range ends before it starts")

    book = normalize_book_name(match.group("book"))
    if book in SINGLE_CHAPTER_BOOKS and verse_start is None and chapter > 1:
        chapter, verse_start = 1, chapter

    return ParsedReference(
        book=book,
        chapter=chapter,
        verse_start=verse_start,
        verse_end=verse_end,
        end_chapter=end_chapter,
        original=ref_string,
    )


def try_parse_reference(ref_string: str) -> Optional[ParsedReference]:
    """Parse a reference, returning None instead of raising."""
    try:
        return parse_reference(ref_string)
    except MalformedReference:
        return None


def is_valid_reference(ref_string: str) -> bool:
    """Check if a string is a parseable scripture reference."""
    return try_parse_reference(ref_string) is not None


def resolve_reference(ref_string: str) -> str:
    """
    Expand a book abbreviation to its canonical name.

    "jn 3:16" -> "John 3:16", "1 Thess. 5:17" -> "1 Thessalonians 5:17".
    The chapter/verse part is kept exactly as written. Unrecognised books
    are returned unchanged (trimmed).
    """
    trimmed = ref_string.strip()
    match = re.match(
        r"^((?:[1-3]|i{1,3})?\s*[a-z][a-z.\s]*?)\.?\s*(\d.*)$", trimmed, re.IGNORECASE
    )
    if not match:
        return trimmed

    canonical = lookup_book(match.group(1))
    if not canonical:
        return trimmed
    return f"{canonical} {match.group(2)}"


def split_references(ref_list: str, resolve: bool = False) -> list[str]:
    """
    Split a multi-reference string into standalone references.

    Splits on ";" and ",", carrying the last book forward to continuation
    fragments that omit it:

        "Rom 6:23; 10:9, 13"      -> ["Rom 6:23", "Rom 10:9", "Rom 10:13"]
        "Ps 23; 91"               -> ["Ps 23", "Ps 91"]
        "John 3:16, 1 John 4:8"   -> ["John 3:16", "1 John 4:8"]

    A bare number after a comma that follows a chapter:verse fragment is a
    verse in the same chapter; after a semicolon it is a chapter.

    Args:
        ref_list: The raw citation list
        resolve: Expand book abbreviations to canonical names

    Returns:
        List of reference strings; unparseable fragments are passed through
        unchanged so callers can decide how to handle them
    """
    parts = re.split(r"([;,])", ref_list or "")
    results = []
    last_book = None
    last_chapter = None
    last_had_verse = False
    separator = ";"

    for part in parts:
        if part in (";", ","):
            separator = part
            continue

        fragment = part.strip()
        if not fragment:
            continue

        text = normalize_reference_text(fragment)

        fragment_match = _CHAPTER_VERSE_FRAGMENT.match(text)
        if last_book and fragment_match:
            fragment = f"{last_book} {text}"
            last_chapter = int(fragment_match.group("end_chapter") or fragment_match.group("chapter"))
            last_had_verse = True
        elif last_book and _BARE_NUMBER_FRAGMENT.match(text):
            if separator == "," and last_had_verse:
                fragment = f"{last_book} {last_chapter}:{text}"
            else:
                fragment = f"{last_book} {text}"
                last_chapter = int(text.split("-", 1)[0])
                last_had_verse = False
        else:
            match = REFERENCE_PATTERN.match(text)
            if match:
                last_book = re.sub(r"\s+", " ", match.group("book")).strip().rstrip(".")
                # A cross-chapter range continues in its end chapter
                last_chapter = int(match.group("end_chapter") or match.group("chapter"))
                last_had_verse = match.group("verse_start") is not None
            else:
                logger.debug(f"Unrecognised reference fragment: {fragment!r}")

        if resolve:
            fragment = resolve_reference(fragment)
        results.append(fragment)

    return results


def parse_reference_list(ref_list: str) -> list[ParsedReference]:
    """
    Parse every reference in a multi-reference string.

    Fragments that cannot be parsed are logged and skipped; one bad
    citation does not discard the rest of the list.
    """
    parsed = []
    for fragment in split_references(ref_list):
        try:
            parsed.append(parse_reference(fragment))
        except MalformedReference as e:
            logger.warning(f"Skipping unparseable reference in list: {e}")
    return parsed
