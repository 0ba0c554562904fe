# api/tests/test_import_bible.py
"""
Tests for scripts/import_bible.py - USX parsing and import into bible_verses.
"""

import os
import sys
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from scripts.import_bible import BOOK_CODES, clean_verse_text, main, parse_usx
from services.scripture import LocalVerseStore
from utils.db import get_db

SAMPLE_1JN = """<?xml version="1.0" encoding="utf-8"?>
<usx version="3.0">
  <book code="1JN" style="id">1 John</book>
  <chapter number="4" style="c" sid="1JN 4" />
  <para style="p">
    <verse number="7" style="v" sid="1JN 4:7" />Beloved, let us love one another,
    for love is from God;<verse eid="1JN 4:7" />
    <verse number="8" style="v" sid="1JN 4:8" />The one who does not love does not
    know God, for <char style="add">God <char style="nd">is</char></char> love.<note caller="+" style="f"><char style="fr">4:8 </char><char style="ft">Lit. is love</char></note><verse eid="1JN 4:8" />
    <verse number="9" style="v" sid="1JN 4:9" />By this &quot;the love&quot; of God &amp; Son<verse eid="1JN 4:9" />
  </para>
</usx>
"""


def test_clean_verse_text():
    """Markup is handled by the XML walk; nested chars, notes and entities."""
    print("\n=== Testing verse text cleanup ===")

    assert clean_verse_text("  a\n   b  ") == "a b"
    print("✓ whitespace collapsed")

    usx = (
        '<para style="p"><verse number="3" style="v" sid="PSA 23:3" />God '
        '<char style="add">is <char style="nd">LORD</char></char>'
        '<note style="f"><char style="ft">fn</char></note>  &amp; King'
        '<verse eid="PSA 23:3" /></para>'
    )
    verses = parse_usx(usx, "PSA")
    assert [v["text"] for v in verses] == ["God is LORD & King"]
    print("✓ notes dropped, char styling unwrapped, entities decoded")

    assert len(BOOK_CODES) == 66
    print("✓ 66 book codes")

    print("clean_verse_text: All tests passed!")


def test_parse_usx():
    """Test verse extraction and per-translation book names."""
    print("\n=== Testing parse_usx ===")

    verses = parse_usx(SAMPLE_1JN, "1JN", "nasb")
    assert [(v["chapter"], v["verse"]) for v in verses] == [(4, 7), (4, 8), (4, 9)]
    assert all(v["book"] == "1 John" and v["translation"] == "nasb" for v in verses)
    assert verses[1]["text"] == "The one who does not love does not know God, for God is love."
    assert verses[2]["text"] == 'By this "the love" of God & Son'
    print("✓ nasb verses")

    verses = parse_usx(SAMPLE_1JN, "1JN", "kjv")
    assert verses[0]["book"] == "I John"
    print("✓ kjv book names")

    assert parse_usx(SAMPLE_1JN, "XYZ") == []
    print("✓ unknown book code skipped")

    verses = parse_usx(
        '<verse sid="JHN 1:1" number="1" style="v"/>In the beginning was the Word'
        '<verse eid="JHN 1:1"/>',
        "JHN",
    )
    assert len(verses) == 1
    assert (verses[0]["chapter"], verses[0]["verse"]) == (1, 1)
    assert verses[0]["text"] == "In the beginning was the Word"
    print("✓ attribute order does not matter")

    usx2 = (
        '<usx version="2.0"><chapter number="2" style="c"/>'
        '<para style="p"><verse number="1" style="v"/>First verse. '
        '<verse number="2" style="v"/>Second verse.</para>'
        '<chapter number="3" style="c"/>'
        '<para style="p"><verse number="1" style="v"/>Third.</para></usx>'
    )
    verses = parse_usx(usx2.encode("utf-8"), "JUD")
    assert [(v["chapter"], v["verse"], v["text"]) for v in verses] == [
        (2, 1, "First verse."), (2, 2, "Second verse."), (3, 1, "Third."),
    ]
    print("✓ milestones without eid end at the next verse or chapter")

    try:
        parse_usx("<para><verse sid='JHN 1:1'/>unclosed", "JHN")
        assert False, "Should have raised ParseError"
    except ET.ParseError:
        print("✓ malformed XML raises ParseError")

    print("parse_usx: All tests passed!")


def test_import_directory():
    """Running the script imports every USX file in the directory."""
    print("\n=== Testing import main() ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        usx_dir = Path(tmpdir) / "USX_1"
        usx_dir.mkdir()
        (usx_dir / "1JN.usx").write_text(SAMPLE_1JN, encoding="utf-8")
        db_path = os.path.join(tmpdir, "scripture.db")

        assert main([str(usx_dir), "--db", db_path]) == 0

        conn = get_db(db_path)
        store = LocalVerseStore(conn)
        assert store.verse_total("nasb") == 3
        assert "God is love" in store.get_passage("1 John 4:8", "nasb")
        conn.close()
        print("✓ verses imported and readable")

        assert main([str(Path(tmpdir) / "missing"), "--db", db_path]) == 1
        print("✓ missing directory reported")

    print("import main(): All tests passed!")


def main_tests():
    """Run all tests."""
    print("=" * 60)
    print("Bible Import Test Suite")
    print("=" * 60)

    test_clean_verse_text()
    test_parse_usx()
    test_import_directory()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main_tests()
