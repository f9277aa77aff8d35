"""
Domain error taxonomy.

Services raise these; main.py translates them into JSON error responses of the
form {"detail": ..., "code": ...} with the matching HTTP status.
"""

from __future__ import annotations


class MadadError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MadadError):
    """Out-of-range score or empty review text. Nothing is written."""

    status_code = 422
    code = "VALIDATION_ERROR"


class ConflictError(MadadError):
    """The user has already reviewed this restaurant."""

    status_code = 409
    code = "REVIEW_EXISTS"


class AuthenticationError(MadadError):
    """No authenticated caller where one is required."""

    status_code = 401
    code = "NOT_AUTHENTICATED"


class AuthorizationError(MadadError):
    """The caller is authenticated but does not own the resource."""

    status_code = 403
    code = "NOT_OWNER"


class NotFoundError(MadadError):
    status_code = 404
    code = "NOT_FOUND"


class UpstreamError(MadadError):
    """The embedding provider was unreachable or returned an error."""

    status_code = 502
    code = "EMBEDDING_UNAVAILABLE"
