"""
Domain-specific exceptions for the Ummah Social API.

These exceptions are raised by the route layer and mapped to HTTP status
codes by the application's exception handlers. The storage layer never raises
them: it either degrades to demo data or re-raises the database error it got.
"""

from typing import Any


class UmmahError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(UmmahError):
    """
    Raised when input data fails validation beyond what the schemas check.

    HTTP Status: 400 Bad Request
    """

    pass


class NotFoundError(UmmahError):
    """
    Raised when a requested resource does not exist.

    Examples:
    - Post ID not found
    - Username not found
    - Report ID not found

    HTTP Status: 404 Not Found
    """

    pass


class ForbiddenError(UmmahError):
    """
    Raised when the acting user is not allowed to perform the action.

    Examples:
    - Banned user creating a post, dua request or comment

    HTTP Status: 403 Forbidden
    """

    pass


class ConflictError(UmmahError):
    """
    Raised when an operation conflicts with current state.

    HTTP Status: 409 Conflict
    """

    pass


# HTTP Status Code Mapping
ERROR_STATUS_MAP = {
    ValidationError: 400,
    NotFoundError: 404,
    ForbiddenError: 403,
    ConflictError: 409,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    return ERROR_STATUS_MAP.get(type(error), 500)
