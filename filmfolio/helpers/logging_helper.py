"""
Logging helpers for safe error handling and message sanitization.

This module provides utilities to prevent information leakage through
error messages and log records while preserving detailed logging for
debugging.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# bcrypt hashes ($2a$/$2b$/$2y$ + cost + 53 chars of salt and digest)
_BCRYPT_RE = re.compile(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}")
# token=..., session=..., "session_token": "..."
_TOKEN_RE = re.compile(r"((?:token|session)[\"']?\s*[:=]\s*[\"']?)([A-Za-z0-9_\-]{16,})", re.IGNORECASE)


def sanitize_exception_message(e: Exception, safe_message: str = "An error occurred") -> str:
    """
    Sanitize exception message for user display.

    Prevents information leakage through detailed error messages while
    preserving the ability to log full details.

    Args:
        e: The exception to sanitize
        safe_message: Generic message to return to users

    Returns:
        Safe error message for user display

    Example:
        >>> try:
        ...     raise OSError("/srv/data/albums.json: disk full")
        ... except Exception as e:
        ...     user_msg = sanitize_exception_message(e, "Failed to save album")
        ...     return {"error": user_msg}  # Returns generic message
    """
    logger.exception(f"[security] Exception sanitized: {e}")
    return safe_message


def redact_secrets(message: str) -> str:
    """Mask bcrypt hashes and session tokens inside a log message."""
    message = _BCRYPT_RE.sub("$2b$**$<redacted>", message)
    return _TOKEN_RE.sub(lambda m: m.group(1) + m.group(2)[:4] + "...", message)


class SecretRedactingFilter(logging.Filter):
    """
    Logging filter that redacts credentials from records.

    Attach to handlers (not loggers) so records propagated from any
    module are covered.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            rendered = record.getMessage()
        except (TypeError, ValueError):
            return True
        redacted = redact_secrets(rendered)
        if redacted != rendered:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: int = logging.INFO) -> None:
    """Configure process-wide logging once (called by start.py)."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, SecretRedactingFilter) for f in handler.filters):
            handler.addFilter(SecretRedactingFilter())
