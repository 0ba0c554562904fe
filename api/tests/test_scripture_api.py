# api/tests/test_scripture_api.py
"""
Tests for routes/scripture_api.py using the Flask test client.
"""

import os
import sys
import tempfile

from flask import Flask

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from routes.scripture_api import get_service, scripture_bp
from services.scripture import DatabaseError, LocalVerseStore, NotConfigured, ProviderUnavailable
from services.scripture.esv_client import EsvClient
from utils.db import get_db


class FakeEsv:
    def __init__(self, text="[16] For God so loved the world", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def get_passage(self, reference):
        self.calls.append(reference)
        if self.error:
            raise self.error
        return self.text


def make_app(tmpdir, esv=None):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SCRIPTURE_DB"] = os.path.join(tmpdir, "scripture.db")
    app.config["ESV_CLIENT"] = esv or FakeEsv()
    app.register_blueprint(scripture_bp)
    return app


def test_lookup_esv():
    """Test ESV lookups, caching and response headers."""
    print("\n=== Testing GET /api/scripture (esv) ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        esv = FakeEsv()
        client = make_app(tmpdir, esv).test_client()

        resp = client.get("/api/scripture?reference=John%203:16")
        assert resp.status_code == 200
        assert resp.get_json() == {
            "reference": "John 3:16",
            "text": "[16] For God so loved the world",
            "translation": "esv",
            "cached": False,
        }
        assert resp.headers["Cache-Control"] == (
            "public, max-age=86400, stale-while-revalidate=604800"
        )
        print("✓ miss fetched from provider, default translation esv")

        resp = client.get("/api/scripture", query_string={"reference": "John 3:16", "translation": "esv"})
        assert resp.status_code == 200
        assert resp.get_json()["cached"] is True
        assert esv.calls == ["John 3:16"]
        print("✓ second lookup served from cache")

        resp = client.get("/api/admin/esv-cache-count")
        assert resp.status_code == 200
        assert resp.get_json() == {
            "count": 1, "totalVerses": 1, "verseLimit": 500, "withinLimit": True,
        }
        print("✓ admin cache count")

    print("esv lookup: All tests passed!")


def test_lookup_local():
    """Test KJV lookups from the local table."""
    print("\n=== Testing GET /api/scripture (kjv) ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        app = make_app(tmpdir)
        conn = get_db(app.config["SCRIPTURE_DB"])
        LocalVerseStore(conn).import_verses([
            {"translation": "kjv", "book": "I John", "chapter": 4, "verse": 8,
             "text": "He that loveth not knoweth not God; for God is love."},
        ])
        conn.close()

        client = app.test_client()
        resp = client.get("/api/scripture", query_string={"reference": "1 John 4:8", "translation": "kjv"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["text"] == "[8] He that loveth not knoweth not God; for God is love."
        assert data["cached"] is False
        print("✓ kjv served from local table")

        resp = client.get("/api/scripture", query_string={"reference": "1 John 4:8", "translation": "nasb"})
        assert resp.status_code == 404
        assert "NASB" in resp.get_json()["error"]
        print("✓ missing translation data -> 404")

    print("local lookup: All tests passed!")


def test_lookup_validation():
    """Test 400 responses."""
    print("\n=== Testing request validation ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        client = make_app(tmpdir).test_client()

        resp = client.get("/api/scripture")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Scripture reference is required"}
        print("✓ missing reference")

        resp = client.get("/api/scripture", query_string={"reference": "John 3:16", "translation": "niv"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == 'Invalid translation. Must be "esv", "kjv", or "nasb"'
        print("✓ invalid translation")

        resp = client.get("/api/scripture", query_string={"reference": "not a ref", "translation": "kjv"})
        assert resp.status_code == 400
        assert "Invalid scripture reference format" in resp.get_json()["error"]
        print("✓ malformed reference")

    print("validation: All tests passed!")


def test_lookup_provider_errors():
    """Test 500 responses from the provider and storage."""
    print("\n=== Testing provider errors ===")

    cases = [
        (NotConfigured("ESV API token not configured"),
         {"error": "ESV API token not configured"}),
        (ProviderUnavailable("ESV API error: 503"),
         {"error": "Failed to fetch scripture text", "details": "ESV API error: 503"}),
        (DatabaseError("Database error: disk I/O error"),
         {"error": "Database error occurred", "details": "Database error: disk I/O error"}),
    ]

    for error, expected in cases:
        with tempfile.TemporaryDirectory() as tmpdir:
            client = make_app(tmpdir, FakeEsv(error=error)).test_client()
            resp = client.get("/api/scripture", query_string={"reference": "John 3:16"})
            assert resp.status_code == 500
            assert resp.get_json() == expected
            assert "Cache-Control" not in resp.headers
        print(f"✓ {type(error).__name__} -> 500")

    print("provider errors: All tests passed!")


def test_count_and_expand():
    """Test the citation helper endpoints."""
    print("\n=== Testing count/expand endpoints ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        client = make_app(tmpdir).test_client()

        resp = client.get("/api/scripture/count", query_string={"reference": "Rom 6:23; 10:9, 13"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["verses"] == 3
        assert [r["reference"] for r in data["references"]] == ["Rom 6:23", "Rom 10:9", "Rom 10:13"]
        print("✓ count")

        resp = client.get("/api/scripture/count", query_string={"reference": "Psalm 22:1–24:1"})
        assert resp.get_json()["verses"] == 38
        print("✓ cross-chapter count")

        resp = client.get("/api/scripture/expand", query_string={"reference": "jn 3:16; 1 Thess. 5:17, 18"})
        assert resp.status_code == 200
        assert resp.get_json() == {
            "references": ["John 3:16", "1 Thessalonians 5:17", "1 Thessalonians 5:18"],
        }
        print("✓ expand")

        assert client.get("/api/scripture/count").status_code == 400
        assert client.get("/api/scripture/expand").status_code == 400
        print("✓ reference required")

    print("count/expand: All tests passed!")


def test_esv_client_shared_per_app():
    """Every request of an app reuses one ESV client and its HTTP session."""
    print("\n=== Testing shared ESV client ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        app = Flask(__name__)
        app.config["TESTING"] = True
        app.config["SCRIPTURE_DB"] = os.path.join(tmpdir, "scripture.db")
        app.register_blueprint(scripture_bp)

        client = app.extensions["scripture_esv_client"]
        assert isinstance(client, EsvClient)

        seen = []
        for _ in range(2):
            with app.test_request_context("/api/scripture"):
                seen.append(get_service().esv)
        assert seen[0] is client and seen[1] is client
        assert seen[0].session is seen[1].session
        print("✓ default client built once per app")

        fake = FakeEsv()
        app = make_app(tmpdir, esv=fake)
        assert app.extensions["scripture_esv_client"] is fake
        with app.test_request_context("/api/scripture"):
            assert get_service().esv is fake
        print("✓ configured client is used as given")

    print("shared ESV client: All tests passed!")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Scripture API Test Suite")
    print("=" * 60)

    test_lookup_esv()
    test_lookup_local()
    test_lookup_validation()
    test_lookup_provider_errors()
    test_count_and_expand()
    test_esv_client_shared_per_app()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
