"""
DogPatch Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for each error scenario.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    DogPatchError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── FileStorageError         → 500 Internal Server Error
    └── PersistenceError         → 500 Internal Server Error

Validation, authentication and conflict errors are always raised before any
write is attempted. PersistenceError is raised after the failing transaction
has been rolled back.
"""

from typing import Any, Dict, Optional


class DogPatchError(Exception):
    """
    Base exception for all DogPatch application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only some handlers return it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DogPatchError):
    """
    Raised when client input fails validation.

    When:    Rating outside the allowed range, missing registration fields,
             malformed request bodies, unsupported image uploads.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Rating must be between 1.0 and 5.0",
            "details": {"field": "rating", "rating": 7.0}
        }
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


class AuthenticationError(DogPatchError):
    """
    Raised when a request carries no usable credentials.

    When:    Missing or unknown bearer token on a protected route, or wrong
             email/password on login.
    HTTP:    401 Unauthorized, with a WWW-Authenticate challenge for `scheme`.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        scheme: str = "Bearer",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.scheme = scheme


class NotFoundError(DogPatchError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; the service layer converts
    that into this exception so routes never check for None themselves.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
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


class ConflictError(DogPatchError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Registering or switching to an email another user already owns
             (compared after trimming and lowercasing).
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(DogPatchError):
    """
    Raised when the image store cannot write a file.

    When:    Disk full, permission denied, directory not writable.
    HTTP:    500 Internal Server Error (paths are logged, never returned)
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PersistenceError(DogPatchError):
    """
    Raised when the underlying store fails.

    When:    Connection lost mid-query, constraint violation, deadlock.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The SQL error class
    travels in `context` and is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(DogPatchError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with Retry-After
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
