"""
MessageWall Backend - Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the two failure classes the API knows.
How:   Each exception carries a user-facing message and an optional context dict.
       Global exception handlers (registered in main.py) map them to HTTP
       status codes and return `{"error": <message>, "request_id": <id>}`.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    MessageWallError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    └── StorageError                 → 500 Internal Server Error
        ├── MessageNotFoundError     → 500 (single-row fetch matched no row)
        └── ConcurrentUpdateError    → 500 (compare-and-swap retries exhausted)

A missing message on like/unlike is a storage failure, not a 404: the lookup
is a "single row expected" fetch and any mismatch is reported the same way as
any other data-store error.
"""

from typing import Any, Dict, Optional


class MessageWallError(Exception):
    """
    Base exception for all MessageWall application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
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


class ValidationError(MessageWallError):
    """
    Raised when client input fails validation.

    When:    Empty or missing message content, malformed request body.
    HTTP:    400 Bad Request
    Raised before any data-store call is made.
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


class StorageError(MessageWallError):
    """
    Raised when a data-store operation fails.

    HTTP:    500 Internal Server Error
    The message returned to the client is generic; the driver error and
    query context are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MessageNotFoundError(StorageError):
    """Raised when a like targets an id that is not a UUID or matches no single row."""

    def __init__(
        self,
        message_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if message_id:
            ctx["message_id"] = message_id
        super().__init__(message="Could not update the like count.", context=ctx)
        self.message_id = message_id


class ConcurrentUpdateError(StorageError):
    """
    Raised by the optimistic like strategy when the stored count kept changing
    between read and conditional write for every allowed attempt.
    """

    def __init__(
        self,
        attempts: int = 1,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["attempts"] = attempts
        super().__init__(message="Could not update the like count.", context=ctx)
        self.attempts = attempts
