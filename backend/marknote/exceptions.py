"""
Marknote Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the different failure outcomes.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{success: false, ...}` envelopes with the matching status code.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    MarknoteError (base)
    ├── AuthenticationRequiredError  → 401 Unauthorized
    ├── ForbiddenError               → 403 Forbidden
    ├── NotFoundError                → 404 Not Found
    ├── ValidationError              → 400 Bad Request
    └── DatabaseError                → 500 Internal Server Error

Ownership and existence failures always carry a specific, user-facing
message. DatabaseError messages are generic; details stay in `context`
and in the server log.
"""

from typing import Any, Dict, Optional


class MarknoteError(Exception):
    """
    Base exception for all Marknote application errors.

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


class AuthenticationRequiredError(MarknoteError):
    """
    Raised when a request carries no usable session identity.

    When:    Missing/expired session cookie, logged-out user, bad credentials.
    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Please log in to access this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(MarknoteError):
    """
    Raised when the caller is authenticated but does not own the resource.

    HTTP:    403 Forbidden

    Only raised after the resource is known to exist; an absent resource is
    always a NotFoundError.
    """

    def __init__(
        self,
        action: str = "access",
        resource: str = "resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Not authorized to {action} this {resource}"
        ctx = context or {}
        ctx["resource"] = resource
        ctx["action"] = action
        super().__init__(message=message, context=ctx)
        self.action = action


class ValidationError(MarknoteError):
    """
    Raised when client input fails validation.

    When:    Missing/empty title or content, malformed tags, bad credentials format.
    HTTP:    400 Bad Request
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


class NotFoundError(MarknoteError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/notes/{id} with an id no note has.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(MarknoteError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Query and driver
    details are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
