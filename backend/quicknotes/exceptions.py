"""
QuickNotes Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error conditions the API reports.
How:   Each exception class carries its HTTP status, a machine-readable code,
       a human-readable message, and optional details. The exception handlers
       registered in main.py turn any of them into the shared envelope:

           {"error": {"code": ..., "message": ..., "details": ...}}

Who:   Raised by the service layer; caught by the global handlers.

Exception Hierarchy:
    QuickNotesError (base)       → 500 INTERNAL_SERVER_ERROR
    ├── ValidationError          → 400 VALIDATION_ERROR
    └── NotFoundError            → 404 NOTE_NOT_FOUND
"""

from typing import Any, Dict, List, Optional


class QuickNotesError(Exception):
    """
    Base exception for all QuickNotes application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        details:  Structured extra information returned to the client, or None
    """

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: str = "Something went wrong",
        details: Any = None,
    ):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        """Builds the JSON error envelope for this exception."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ValidationError(QuickNotesError):
    """
    Raised when a request body or query string fails schema validation.

    What:    The client sent data that can be corrected and resent.
    HTTP:    400 Bad Request

    `details` is a list of issues, one per offending field:

        [{"path": ["title"], "message": "String should have at least 1 character",
          "code": "string_too_short"}]
    """

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "Invalid request data",
        issues: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message=message, details=issues or [])
        self.issues = self.details


class NotFoundError(QuickNotesError):
    """
    Raised when a referenced note does not exist in the store.

    HTTP:    404 Not Found
    """

    status_code = 404
    code = "NOTE_NOT_FOUND"

    def __init__(self, note_id: Optional[str] = None):
        super().__init__(message="Note not found")
        self.note_id = note_id
