"""
Notes API: Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for every failure the layers can report.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error bodies with the matching HTTP status code.
Who:   Raised by repositories, the service and the HTTP layer.

Exception Hierarchy:
    NotesAPIError (base)
    ├── ValidationError   → 400 Bad Request  {"message": "body not valid", "error": ...}
    ├── BadRequestError   → 400 Bad Request  {"message": "body not valid", "error": ...}
    ├── NotFoundError     → 404 Not Found    {"message": "note not found"}
    └── StorageError      → 500 Internal     {"message": "internal error"}

Only the HTTP layer knows about status codes; the classes here are plain
domain errors and are never leaked to clients by type name.
"""

from typing import Any, Dict, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  Description of the failure
        context:  Additional debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAPIError):
    """
    Raised when a payload violates a domain rule.

    What:    The service rejected the note before it reached the repository.
    HTTP:    400 Bad Request, with `message` reported as the `error` field.

    Example response:
        {"message": "body not valid", "error": "title must not be empty"}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class BadRequestError(NotesAPIError):
    """
    Raised when the HTTP layer cannot turn a request into a payload.

    When:    Malformed JSON, missing fields, wrong field types.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Request body could not be parsed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NotesAPIError):
    """
    Raised when a requested note does not exist.

    When:    get/update/delete with an id that matches no row.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class StorageError(NotesAPIError):
    """
    Raised when the backing store fails for any reason other than a missing row.

    What:    Connection loss, lock timeout, constraint violation (duplicate id), etc.
    HTTP:    500 Internal Server Error

    Security Note:
        The client only ever sees {"message": "internal error"}. The driver
        error is chained as __cause__ and logged server-side.
    """

    def __init__(
        self,
        message: str = "A storage error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Response Messages
# ══════════════════════════════════════════════════════════════════════════

BODY_NOT_VALID = "body not valid"
NOTE_NOT_FOUND = "note not found"
ROUTE_NOT_FOUND = "not found"
INTERNAL_ERROR = "internal error"
