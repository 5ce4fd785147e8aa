"""
Marketplace Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error scenarios the API reports.
How:   Each exception carries a user-facing message, an optional context dict
       (logged, never returned), and a GraphQL error `code`. graphql-core copies
       the `extensions` property of an original error onto the GraphQL error it
       reports, so clients receive `{"code": ...}` next to the message.
Who:   Raised by services and the Date scalar; caught by the GraphQL error
       policies and the FastAPI exception handlers in main.py.

Exception Hierarchy:
    MarketplaceError (base)
    ├── ValidationError       → BAD_USER_INPUT  (malformed id, bad input)
    ├── TypeMismatchError     → BAD_USER_INPUT  (Date scalar coercion)
    ├── NotFoundError         → NOT_FOUND
    ├── UnauthenticatedError  → UNAUTHENTICATED (no caller in context)
    ├── ForbiddenError        → FORBIDDEN       (caller does not own the record)
    └── DatabaseError         → INTERNAL_SERVER_ERROR (storage failure)
"""

from typing import Any, Dict, Optional


class MarketplaceError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    code = "INTERNAL_SERVER_ERROR"
    # Client errors are reported verbatim; everything else is masked.
    expose = True

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def extensions(self) -> Dict[str, Any]:
        return {"code": self.code}


class ValidationError(MarketplaceError):
    """
    Raised when client input cannot be used as given.

    When:    An id argument is not a valid UUID string, or a required field
             is sent as null.
    """

    code = "BAD_USER_INPUT"

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


class TypeMismatchError(MarketplaceError):
    """
    Raised by the Date scalar when a value is not of the expected kind.

    When:    Serializing something that is not a datetime, or parsing a
             variable value that is not a number.
    """

    code = "BAD_USER_INPUT"

    def __init__(
        self,
        expected: str,
        received: Any,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Date scalar expected {expected}, got {type(received).__name__}"
        ctx = context or {}
        ctx["expected"] = expected
        super().__init__(message=message, context=ctx)
        self.expected = expected


class NotFoundError(MarketplaceError):
    """
    Raised when a record required by a mutation does not exist.

    Read handlers return null for missing records instead; this is only
    raised where the operation cannot proceed without the record.
    """

    code = "NOT_FOUND"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"No {resource} with id '{resource_id}' found."
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class UnauthenticatedError(MarketplaceError):
    """Raised when an operation needs a caller and the request has none."""

    code = "UNAUTHENTICATED"

    def __init__(
        self,
        action: str = "do that",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=f"You must be logged in to {action}.", context=context)


class ForbiddenError(MarketplaceError):
    """Raised when the caller tries to change a record they do not own."""

    code = "FORBIDDEN"

    def __init__(
        self,
        message: str = "You are not allowed to modify this record.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(MarketplaceError):
    """
    Raised when a storage call fails.

    The message returned to the client is always generic; the driver error is
    kept in `context` and logged server-side only.
    """

    expose = False

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
