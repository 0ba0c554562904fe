# api/services/scripture/errors.py
"""
Exception hierarchy for scripture lookups.

Routes map each kind to a status code:

- MalformedReference: fix the citation (400)
- InvalidTranslation: pick esv, kjv or nasb (400)
- NotFound: import the translation or correct the reference (404)
- ProviderUnavailable: retry later (500)
- NotConfigured: set ESV_API_TOKEN (500)
- DatabaseError: storage failure, original message preserved (500)
"""


class ScriptureError(Exception):
    """Base exception for scripture engine errors."""
    pass


class MalformedReference(ScriptureError):
    """Raised when a citation does not match the reference pattern."""

    def __init__(self, reference: str, reason: str = None):
        self.reference = reference
        message = f"Invalid scripture reference format: {reference}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidTranslation(ScriptureError):
    """Raised for a translation code the engine does not serve."""
    pass


class NotFound(ScriptureError):
    """Raised when no text exists for the reference in that translation."""
    pass


class ProviderUnavailable(ScriptureError):
    """Raised when the remote text provider errors or cannot be reached."""
    pass


class NotConfigured(ScriptureError):
    """Raised when the remote provider has no access credential."""
    pass


class DatabaseError(ScriptureError):
    """Raised when the SQLite layer fails."""
    pass
