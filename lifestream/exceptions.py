"""
LifeStream Backend: Custom Exception Hierarchy
================================================

What:  Application-specific exceptions mapped to HTTP responses.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right status code.
Who:   Raised by the auth chain and services; caught by global handlers.

Exception Hierarchy:
    LifeStreamError (base)
    ├── UnauthorizedError      → 401 missing, malformed, tampered or expired token
    ├── ForbiddenError         → 403 role mismatch, or identity mismatch on self-only routes
    ├── InvalidIdentifierError → 500 path id is not an ObjectId (generic failure)
    └── DatabaseError          → 500 store operation failed
"""

from typing import Any, Dict, Optional


class LifeStreamError(Exception):
    """
    Base exception for all LifeStream application errors.

    Attributes:
        message:  Client-facing error description (safe to return)
        context:  Additional debug info (logged but NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthorizedError(LifeStreamError):
    """
    Raised by the token verifier.

    When:    No Authorization header, no token after the scheme, or the
             token fails signature/expiry verification.
    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "unauthorized access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(LifeStreamError):
    """
    Raised by the role authorizer and by self-only routes.

    When:    The stored role does not match the required one, or the email in
             the path is not the token subject's email.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "forbidden access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidIdentifierError(LifeStreamError):
    """
    Raised when a path identifier cannot be turned into an ObjectId.

    HTTP:    500 (generic failure, same as any other runtime error)
    """

    def __init__(
        self,
        value: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["value"] = value
        super().__init__(message=f"'{value}' is not a valid identifier", context=ctx)
        self.value = value


class DatabaseError(LifeStreamError):
    """
    Raised when a document store operation fails.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The driver error
    is kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
