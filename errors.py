"""HTTP error taxonomy shared by the auth core and the resource blueprints."""

from __future__ import annotations

from werkzeug.exceptions import (
    BadRequest,
    Forbidden,
    InternalServerError,
    NotFound,
    Unauthorized,
)


class ValidationError(BadRequest):
    """Missing or malformed input."""


class ConflictError(BadRequest):
    """A uniqueness rule was violated. Reported as 400 for client compatibility."""


class AuthenticationError(Unauthorized):
    """Missing, invalid or expired credentials."""


class AuthorizationError(Forbidden):
    """Authenticated, but the principal lacks the required role or ownership."""


class NotFoundError(NotFound):
    """The addressed record does not exist or is not visible to the caller."""


class StorageError(InternalServerError):
    """The backing store rejected a write."""


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
