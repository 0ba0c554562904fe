# routes/scripture_api.py
"""
API endpoints for scripture lookup and ESV cache diagnostics.

Provides access to:
- Passage text in ESV (cached, quota-limited), KJV and NASB (local)
- Verse weight of a citation or citation list
- Expansion of citation lists with continuation verses
- ESV cache quota headroom
"""

import logging

from flask import Blueprint, current_app, g, jsonify, request

from core.config import DEFAULT_TRANSLATION, HTTP_CACHE_CONTROL
from services.scripture import (
    DatabaseError,
    InvalidTranslation,
    MalformedReference,
    NotConfigured,
    NotFound,
    ProviderUnavailable,
    count_reference,
    split_references,
)
from services.scripture.esv_client import EsvClient
from services.scripture.scripture_service import ScriptureService
from utils.db import ensure_schema, get_db
from utils.errors import missing_field, not_found, server_error, validation_error

logger = logging.getLogger(__name__)

scripture_bp = Blueprint("scripture_api", __name__, url_prefix="/api")


@scripture_bp.record_once
def _init_app(state):
    conn = get_db(state.app.config.get("SCRIPTURE_DB"))
    try:
        ensure_schema(conn)
    finally:
        conn.close()
    # One ESV client (and HTTP session) shared by every request of this app
    state.app.extensions["scripture_esv_client"] = state.app.config.get("ESV_CLIENT") or EsvClient()


def get_service() -> ScriptureService:
    """Get or create the per-request ScriptureService (one DB connection per request)."""
    if "scripture_service" not in g:
        g.scripture_db = get_db(current_app.config.get("SCRIPTURE_DB"))
        g.scripture_service = ScriptureService(
            g.scripture_db,
            esv_client=current_app.extensions["scripture_esv_client"],
        )
    return g.scripture_service


@scripture_bp.teardown_app_request
def _close_db(exc):
    db = g.pop("scripture_db", None)
    if db is not None:
        db.close()


# =============================================================================
# Lookup Endpoints
# =============================================================================

@scripture_bp.get("/scripture")
def get_scripture():
    """
    Look up passage text.

    Query params:
        reference: Reference string (required) e.g., "John 3:16"
        translation: "esv" (default), "kjv" or "nasb"

    Returns:
        {
            "reference": "John 3:16",
            "text": "[16] For God so loved the world...",
            "translation": "esv",
            "cached": false
        }
    """
    reference = request.args.get("reference", "").strip()
    translation = request.args.get("translation") or DEFAULT_TRANSLATION

    if not reference:
        return validation_error("Scripture reference is required")

    try:
        result = get_service().fetch_text(reference, translation)
    except (InvalidTranslation, MalformedReference) as e:
        return validation_error(str(e))
    except NotFound as e:
        return not_found(str(e))
    except NotConfigured as e:
        logger.error(f"Scripture API error: {e}")
        return server_error(str(e))
    except DatabaseError as e:
        logger.error(f"Scripture API error: {e}")
        return server_error("Database error occurred", details=str(e))
    except ProviderUnavailable as e:
        logger.error(f"Scripture API error: {e}")
        return server_error("Failed to fetch scripture text", details=str(e))
    except Exception as e:
        logger.exception(f"Unexpected scripture lookup failure for {reference}")
        return server_error("Failed to fetch scripture text", details=str(e) or "Unknown error")

    response = jsonify(result.to_dict())
    response.headers["Cache-Control"] = HTTP_CACHE_CONTROL
    return response


@scripture_bp.get("/scripture/count")
def count_scripture():
    """
    Verse weight of a reference or reference list.

    Query params:
        reference: e.g., "Rom 6:23; 10:9, 13" (required)

    Returns:
        {
            "reference": "Rom 6:23; 10:9, 13",
            "references": [{"reference": "Rom 6:23", "verses": 1}, ...],
            "verses": 3
        }
    """
    reference = request.args.get("reference", "").strip()
    if not reference:
        return missing_field("reference")

    counted = [
        {"reference": fragment, "verses": count_reference(fragment)}
        for fragment in split_references(reference)
    ]
    return jsonify({
        "reference": reference,
        "references": counted,
        "verses": sum(item["verses"] for item in counted),
    })


@scripture_bp.get("/scripture/expand")
def expand_scripture():
    """
    Split a reference list into standalone, abbreviation-resolved references.

    Query params:
        reference: e.g., "jn 3:16; 1 Thess. 5:17, 18" (required)

    Returns:
        {"references": ["John 3:16", "1 Thessalonians 5:17", "1 Thessalonians 5:18"]}
    """
    reference = request.args.get("reference", "").strip()
    if not reference:
        return missing_field("reference")

    return jsonify({"references": split_references(reference, resolve=True)})


# =============================================================================
# Cache Diagnostics
# =============================================================================

@scripture_bp.get("/admin/esv-cache-count")
def esv_cache_count():
    """
    ESV cache quota headroom.

    Returns:
        {
            "count": 16,
            "totalVerses": 212,
            "verseLimit": 500,
            "withinLimit": true
        }
    """
    try:
        return jsonify(get_service().cache_usage())
    except DatabaseError as e:
        logger.error(f"Error counting ESV cache: {e}")
        return server_error("Failed to count cache", details=str(e), count=0, totalVerses=0)
