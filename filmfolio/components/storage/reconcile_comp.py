"""Cross-check Photo references against files in the upload directory.

Two kinds of mismatch (both count as orphans):
- a file on disk that no Photo references (left by a failed JSON write)
- a Photo URL whose file is absent (left by a failed or partial delete)

Paths are reported relative to the upload root, e.g. "display/<id>.webp".
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from filmfolio.helpers.dto.album_dto import Album
from filmfolio.helpers.dto.storage_dto import MissingFile, ReconcileReport
from filmfolio.helpers.exceptions import StorageIOError, ValidationError
from filmfolio.helpers.files import RENDITION_DIRS, resolve_upload_path, validate_filename

logger = logging.getLogger(__name__)


def url_to_relative_path(url: str) -> str | None:
    """
    Map "/uploads/<rendition>/<file>" to "<rendition>/<file>".

    Returns None when the URL does not point into a known rendition
    directory or carries an unsafe filename.
    """
    parts = [p for p in url.split("/") if p]
    if len(parts) < 2 or parts[-2] not in RENDITION_DIRS:
        return None
    try:
        filename = validate_filename(parts[-1])
    except ValidationError:
        return None
    return f"{parts[-2]}/{filename}"


def referenced_paths(albums: Iterable[Album]) -> dict[str, tuple[str, str]]:
    """Relative path -> (album_id, photo_id) for every rendition URL of every photo."""
    refs: dict[str, tuple[str, str]] = {}
    for album in albums:
        for photo in album.photos:
            for url in photo.urls:
                rel = url_to_relative_path(url)
                if rel is None:
                    logger.warning(f"[Reconcile] Ignoring unusable URL on photo={photo.id} album={album.id}")
                    continue
                refs[rel] = (album.id, photo.id)
    return refs


def list_upload_files(upload_root: str | Path) -> set[str]:
    """
    Relative paths of every file directly inside the rendition directories.

    Dotfiles are skipped (in-progress staging files).

    Raises:
        StorageIOError: A rendition directory exists but cannot be listed
    """
    root = Path(upload_root)
    found: set[str] = set()
    for rendition in RENDITION_DIRS:
        directory = root / rendition
        if not directory.is_dir():
            continue
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    if entry.is_file() and not entry.name.startswith("."):
                        found.add(f"{rendition}/{entry.name}")
        except OSError as e:
            logger.error(f"[Reconcile] Cannot list {rendition}: {e}")
            raise StorageIOError("failed to list upload directory") from e
    return found


def compare(refs: dict[str, tuple[str, str]], on_disk: set[str]) -> ReconcileReport:
    """Build the report from a reference map and a disk listing."""
    orphans = sorted(on_disk - refs.keys())
    missing = [
        MissingFile(album_id=album_id, photo_id=photo_id, path=rel)
        for rel, (album_id, photo_id) in sorted(refs.items())
        if rel not in on_disk
    ]
    return ReconcileReport(
        referenced_files=len(refs),
        files_on_disk=len(on_disk),
        orphan_files=orphans,
        missing_files=missing,
    )


def split_by_age(upload_root: str | Path, relative_paths: Iterable[str], cutoff: float) -> tuple[list[str], list[str]]:
    """
    Partition files into (modified before cutoff, modified at or after cutoff).

    Files that vanish while being checked are dropped from both lists.
    """
    old: list[str] = []
    recent: list[str] = []
    for rel in relative_paths:
        try:
            mtime = resolve_upload_path(upload_root, rel).stat().st_mtime
        except FileNotFoundError:
            continue
        except (OSError, ValidationError) as e:
            logger.warning(f"[Reconcile] Could not stat {rel}: {e}")
            continue
        (old if mtime < cutoff else recent).append(rel)
    return old, recent


def delete_upload_files(upload_root: str | Path, relative_paths: Iterable[str]) -> int:
    """
    Delete files by upload-relative path. Already-missing files are ignored.

    Returns:
        Number of files actually removed
    """
    removed = 0
    for rel in relative_paths:
        try:
            path = resolve_upload_path(upload_root, rel)
            path.unlink()
            removed += 1
        except FileNotFoundError:
            continue
        except (OSError, ValidationError) as e:
            logger.warning(f"[Reconcile] Could not delete {rel}: {e}")
    return removed
