"""
File system helpers for upload-directory operations.

This module provides the secure, upload-scoped filesystem API for filmfolio.
All path operations enforce validation to prevent traversal attacks and
ensure paths remain within the configured upload directory.

Path validation is built into this module - use these functions for all
filesystem operations involving names that came from a request or from a
persisted Photo entry.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath

from filmfolio.helpers.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Rendition subdirectories under the upload root
RENDITION_DIRS = ("originals", "display", "thumbnails")

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}


def validate_filename(filename: str) -> str:
    """
    Validate a bare filename (no directories).

    Args:
        filename: Name taken from a request or a Photo URL

    Returns:
        The filename unchanged

    Raises:
        ValidationError: If the name is empty or contains separators, NUL or ".."
    """
    if not filename or "\x00" in filename:
        raise ValidationError("invalid filename")
    if ".." in filename or "/" in filename or "\\" in filename:
        logger.warning(f"[security] Path traversal attempt in filename: {filename!r}")
        raise ValidationError("invalid filename: path traversal attempt detected")
    return filename


def resolve_upload_path(upload_root: str | Path, user_path: str | Path, must_exist: bool = False) -> Path:
    """
    Safely resolve a relative path within the upload root.

    Structural checks run before any filesystem access:
    1. Reject NUL bytes, absolute paths and any ".." component
    2. Join and normalize with os.path.normpath
    3. Verify the result is inside the root (prefix check)
    4. Resolve symlinks and verify again

    Args:
        upload_root: Configured upload directory
        user_path: Relative path such as "originals/abc.jpg"
        must_exist: If True, require the path to exist

    Returns:
        Resolved absolute Path within upload root

    Raises:
        ValidationError: If validation fails (generic message, no path leakage)

    Examples:
        >>> resolve_upload_path("/srv/uploads", "originals/p1.jpg")
        Path("/srv/uploads/originals/p1.jpg")

        >>> resolve_upload_path("/srv/uploads", "../../etc/passwd")
        ValidationError: Access denied
    """
    if not upload_root:
        raise ValidationError("Upload directory not configured")

    base = os.path.abspath(str(upload_root))
    user_path_string = str(user_path)

    if "\x00" in user_path_string:
        logger.warning(f"[security] NUL byte detected in path: {user_path_string!r}")
        raise ValidationError("Access denied")

    pure_path = PurePath(user_path_string)
    if pure_path.is_absolute() or ".." in pure_path.parts:
        logger.warning(f"[security] Rejected upload path: {user_path_string!r}")
        raise ValidationError("Access denied")

    fullpath = os.path.normpath(os.path.join(base, user_path_string))
    if fullpath != base and not fullpath.startswith(base + os.sep):
        logger.warning(f"[security] Path traversal attempt: {user_path_string!r}")
        raise ValidationError("Access denied")

    candidate = Path(fullpath)
    try:
        resolved_base = Path(base).resolve()
        resolved_candidate = candidate.resolve(strict=must_exist)
    except (OSError, RuntimeError) as e:
        logger.debug(f"[security] Failed to resolve {user_path_string!r}: {e}")
        raise ValidationError("Access denied") from e

    try:
        resolved_candidate.relative_to(resolved_base)
    except ValueError as e:
        logger.warning(f"[security] Symlink traversal detected for {user_path_string!r}")
        raise ValidationError("Access denied") from e

    return resolved_candidate


def filename_from_url(url: str) -> str:
    """Last path segment of an upload URL ("/uploads/display/x.webp" -> "x.webp")."""
    return url.rstrip("/").rsplit("/", 1)[-1] if url else ""


def directory_size(path: str | Path) -> tuple[int, int]:
    """
    Recursively total file sizes under a directory.

    Missing directories count as empty.

    Returns:
        (total_bytes, file_count)
    """
    total = 0
    count = 0
    root = Path(path)
    if not root.exists():
        return 0, 0
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            try:
                total += os.path.getsize(os.path.join(dirpath, name))
                count += 1
            except FileNotFoundError:
                # Removed between listing and stat
                continue
    return total, count
