"""Custom exceptions used across multiple layers.

Rules:
- Only put exceptions here if they need to be raised in one layer and caught in another.
- Keep exceptions simple and focused.
- No I/O, no config loading, no complex logic.

Every exception carries a stable machine-readable ``code``. The HTTP adapter
maps codes to status codes; messages must never contain filesystem paths.
"""

from __future__ import annotations


class FilmfolioError(Exception):
    """Base class for all domain errors surfaced to callers."""

    code = "error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class NotFoundError(FilmfolioError):
    """Raised when a document or entity does not exist."""

    code = "not_found"


class ValidationError(FilmfolioError):
    """Raised when a request would violate a domain invariant."""

    code = "validation_error"


class UnauthenticatedError(FilmfolioError):
    """Raised when a session token is missing, unknown, expired or revoked."""

    code = "unauthenticated"


class InvalidCredentialsError(FilmfolioError):
    """Raised when a username/password pair does not verify."""

    code = "invalid_credentials"


class ConflictError(FilmfolioError):
    """Raised when a mutation collides with existing state (duplicate id or slug)."""

    code = "conflict"


class StorageIOError(FilmfolioError):
    """Raised when durable storage fails. Never retried by the core."""

    code = "io_error"
