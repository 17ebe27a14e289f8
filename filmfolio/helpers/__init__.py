"""
Helpers package.
"""

from .exceptions import (
    ConflictError,
    FilmfolioError,
    InvalidCredentialsError,
    NotFoundError,
    StorageIOError,
    UnauthenticatedError,
    ValidationError,
)
from .files import RENDITION_DIRS, directory_size, filename_from_url, resolve_upload_path, validate_filename
from .logging_helper import SecretRedactingFilter, redact_secrets, sanitize_exception_message
from .time_helper import Milliseconds, Seconds, now_ms, now_s, utc_now

__all__ = [
    "RENDITION_DIRS",
    "ConflictError",
    "FilmfolioError",
    "InvalidCredentialsError",
    "Milliseconds",
    "NotFoundError",
    "Seconds",
    "SecretRedactingFilter",
    "StorageIOError",
    "UnauthenticatedError",
    "ValidationError",
    "directory_size",
    "filename_from_url",
    "now_ms",
    "now_s",
    "redact_secrets",
    "resolve_upload_path",
    "sanitize_exception_message",
    "utc_now",
    "validate_filename",
]
