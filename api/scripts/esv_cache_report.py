#!/usr/bin/env python3
"""
Report on the ESV scripture cache and its 500-verse quota.

Run from the api directory.

Usage:
    python -m scripts.esv_cache_report
    python -m scripts.esv_cache_report --refs
    python -m scripts.esv_cache_report --enforce
    python -m scripts.esv_cache_report --purge-expired
    python -m scripts.esv_cache_report --count "Rom 6:23; 10:9, 13"
"""

import argparse
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import ESV  # noqa: E402
from services.cache import ScriptureCache, VerseQuota  # noqa: E402
from services.scripture import count_reference, split_references  # noqa: E402
from utils.db import ensure_schema, get_db  # noqa: E402


def print_report(cache: ScriptureCache, quota: VerseQuota, show_refs: bool = False):
    usage = quota.usage()
    stats = cache.get_stats()

    print("ESV Scripture Cache Statistics:")
    print("================================")
    print(f"Total cache entries:      {stats['by_translation'].get(ESV, 0)}")
    print(f"Unique references:        {usage['count']}")
    print(f"Cached verses:            {usage['totalVerses']} / {usage['verseLimit']}")
    print(f"Expired (all translations): {stats['expired_entries']}")
    status = "[✓] within limit" if usage["withinLimit"] else "[X] OVER LIMIT"
    print(f"Status:                   {status}")

    if show_refs:
        print("\nUnique references (sorted):")
        for ref in sorted(cache.references(ESV)):
            print(f"  - {ref} ({count_reference(ref)})")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="ESV cache quota report")
    parser.add_argument("--db", default=None, help="SQLite DB path (default: SCRIPTURE_DB)")
    parser.add_argument("--refs", action="store_true", help="List cached references")
    parser.add_argument(
        "--enforce",
        action="store_true",
        help="Evict oldest entries until the cache is within the verse limit"
    )
    parser.add_argument(
        "--purge-expired",
        action="store_true",
        help="Delete ESV entries older than the cache TTL"
    )
    parser.add_argument(
        "--count",
        metavar="REFERENCES",
        help="Print the verse weight of a reference list and exit (no database)"
    )
    args = parser.parse_args(argv)

    if args.count:
        total = 0
        for ref in split_references(args.count):
            weight = count_reference(ref)
            total += weight
            print(f"  - {ref}: {weight}")
        print(f"[*] Total: {total} verses")
        return 0

    conn = get_db(args.db)
    try:
        ensure_schema(conn)
        cache = ScriptureCache(conn)
        quota = VerseQuota(cache)

        if args.purge_expired:
            purged = cache.purge_expired(ESV)
            print(f"[✓] Purged {purged} expired entries\n")

        if args.enforce:
            evicted = quota.enforce()
            print(f"[✓] Evicted {evicted} entries\n")

        print_report(cache, quota, show_refs=args.refs)
    finally:
        conn.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
