"""
Blog API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for every error outcome of the API.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       render the response body and status code for each class.
Who:   Raised by the validation and service layers; caught by global handlers.

Exception Hierarchy:
    BlogApiError (base)
    ├── ValidationError          → 400 {"message": ...}
    │   └── RequiredFieldError   → 400 text/plain
    ├── MalformedIdError         → 410 {"message": "Id (<id>) not found"}
    ├── RecordLookupError        → 404 {"message": "Internal server error: ..."}
    └── StorageError             → 500 {"message": ...}
        └── UpdateFailedError    → 500 bare JSON string
"""

from typing import Any, Dict, Optional


class BlogApiError(Exception):
    """
    Base exception for all Blog API errors.

    Attributes:
        message:  Client-facing description (returned in the response)
        context:  Additional debug info (logged, never returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogApiError):
    """
    Raised when client input fails a presence or consistency check.

    When:    Update id mismatch, incomplete author on update, blank fields.
    HTTP:    400 Bad Request with a JSON {"message": ...} body.
    """

    plain_text = False

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


class RequiredFieldError(ValidationError):
    """
    A required field is missing or blank on record creation.

    HTTP:    400 Bad Request with the message as a text/plain body.
    """

    plain_text = True


class MalformedIdError(BlogApiError):
    """
    The id in the path is not a valid record identifier.

    HTTP:    410 Gone, {"message": "Id (<id>) not found"}
    """

    def __init__(self, record_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["record_id"] = record_id
        super().__init__(message=f"Id ({record_id}) not found", context=ctx)
        self.record_id = record_id


class RecordLookupError(BlogApiError):
    """
    Fetching a single record failed, including the record not existing.

    HTTP:    404 Not Found, {"message": "Internal server error: <detail>"}
    """

    def __init__(self, detail: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=f"Internal server error: {detail}", context=context)
        self.detail = detail


class StorageError(BlogApiError):
    """
    A storage operation failed or timed out.

    HTTP:    500 Internal Server Error, {"message": ...}

    Details (driver error, statement) stay in `context` and the server log.
    """

    # False renders the message as a bare JSON string instead of an object
    wrap_message = True

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpdateFailedError(StorageError):
    """An update could not be confirmed; the body is a bare JSON string."""

    wrap_message = False

    def __init__(
        self,
        message: str = (
            "Internal server error probably prevented update, "
            "but you had better check the data."
        ),
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
