import sqlite3

from core.config import DB_BUSY_TIMEOUT_SECONDS, SCRIPTURE_DB

SCHEMA = """
CREATE TABLE IF NOT EXISTS scripture_cache (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    reference TEXT NOT NULL,
    translation TEXT NOT NULL,
    text TEXT NOT NULL,
    cached_at TEXT NOT NULL,
    UNIQUE(reference, translation)
);

CREATE INDEX IF NOT EXISTS idx_scripture_cache_translation_cached_at
    ON scripture_cache (translation, cached_at);

CREATE TABLE IF NOT EXISTS bible_verses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    translation TEXT NOT NULL,
    book TEXT NOT NULL,
    chapter INTEGER NOT NULL,
    verse INTEGER NOT NULL,
    text TEXT NOT NULL,
    UNIQUE(translation, book, chapter, verse)
);
"""


def get_db(path: str = None):
    """
    Return a sqlite3 connection to the scripture DB.

    WAL mode plus a busy timeout lets concurrent requests write the cache
    without "database is locked" errors.
    """
    conn = sqlite3.connect(path or SCRIPTURE_DB, timeout=DB_BUSY_TIMEOUT_SECONDS)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def ensure_schema(conn) -> None:
    """Create the cache and verse tables if they don't exist."""
    conn.executescript(SCHEMA)
    conn.commit()
