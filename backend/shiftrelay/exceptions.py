"""
ShiftLog Relay: Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for the relay's failure modes.
How:   Each exception carries a caller-safe message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       `{"error": <message>}` JSON responses with the matching status code.
Who:   Raised by the note service, the pinning client and configuration;
       caught by the global handlers.

Exception Hierarchy:
    RelayError (base)
    ├── ValidationError       → 400 Bad Request (missing/empty note)
    ├── UpstreamError         → 500 Internal Server Error (pinning provider failed)
    └── ConfigurationError    → refuses startup (credential missing)

`context` is for server-side logs only. It is never part of a response body.
"""

from typing import Any, Dict, Optional


NOTE_REQUIRED_MESSAGE = "Note content is required"
UPLOAD_FAILED_MESSAGE = "Failed to upload note to IPFS"


class RelayError(Exception):
    """
    Base exception for all relay errors.

    Attributes:
        message:  Caller-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RelayError):
    """
    Raised when the submitted note fails validation.

    When:    `note` is missing, null, or any other falsy value.
    HTTP:    400 Bad Request
    Effect:  No outbound call is made.
    """

    def __init__(
        self,
        message: str = NOTE_REQUIRED_MESSAGE,
        field: Optional[str] = "note",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UpstreamError(RelayError):
    """
    Raised when the pinning provider could not pin the note.

    When:    Network error, timeout, non-2xx status, body that is not JSON,
             or a response without a content identifier.
    HTTP:    500 Internal Server Error

    The message is always the generic upload failure text. The provider's
    status code and error type travel in `context` for the server log.
    """

    def __init__(
        self,
        message: str = UPLOAD_FAILED_MESSAGE,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class ConfigurationError(RelayError):
    """
    Raised when required configuration is missing or invalid.

    When:    Settings.validate_required() during startup. The server does not
             start, so no unauthenticated request can ever reach Pinata.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
