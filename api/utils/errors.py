# api/utils/errors.py
"""
Standardized API error responses.

All errors follow the format: {"error": "message", "details": "optional message"}.
"""

from flask import jsonify
from typing import Optional


def error_response(
    error: str,
    status: int = 400,
    details: Optional[str] = None,
    **extra
):
    """
    Create a standardized error response.

    Args:
        error: Error message shown to the caller
        status: HTTP status code
        details: Diagnostic detail, e.g. the original database message (optional)
        **extra: Additional fields to include in response

    Returns:
        Tuple of (jsonify response, status code)
    """
    payload = {"error": error}
    if details:
        payload["details"] = details
    payload.update(extra)
    return jsonify(payload), status


# Not Found (404)
def not_found(error: str = "Not found", details: str = None):
    """Requested resource does not exist."""
    return error_response(error, 404, details)


# Validation (400)
def validation_error(error: str, details: str = None):
    """Request validation failed."""
    return error_response(error, 400, details)


def missing_field(field: str):
    """Required field is missing."""
    return error_response(f"{field} is required", 400)


# Server Error (500)
def server_error(error: str = "Internal server error", details: str = None, **extra):
    """Internal server error."""
    return error_response(error, 500, details, **extra)
