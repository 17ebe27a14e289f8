"""Disk usage accounting for the upload directory."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from filmfolio.helpers.dto.storage_dto import StorageBreakdown, StorageStats, StorageWarning
from filmfolio.helpers.exceptions import StorageIOError
from filmfolio.helpers.files import directory_size

logger = logging.getLogger(__name__)


def measure_breakdown(upload_root: str | Path) -> StorageBreakdown:
    """Bytes and file counts per rendition directory (missing ones count as empty)."""
    root = Path(upload_root)
    try:
        originals = directory_size(root / "originals")
        display = directory_size(root / "display")
        thumbnails = directory_size(root / "thumbnails")
    except OSError as e:
        logger.error(f"[DiskUsage] Failed to walk upload directory: {e}")
        raise StorageIOError("failed to calculate storage breakdown") from e
    return StorageBreakdown(
        originals_bytes=originals[0],
        display_bytes=display[0],
        thumbnails_bytes=thumbnails[0],
        originals_count=originals[1],
        display_count=display[1],
        thumbnails_count=thumbnails[1],
    )


def usage_warning(usage_percent: float, max_percent: int, margin_percent: int) -> StorageWarning | None:
    """
    Warning level for a disk usage figure.

    critical at or above max_percent, warning from max_percent - margin_percent.
    """
    if usage_percent >= max_percent:
        return StorageWarning(
            level="critical",
            message=f"Disk usage is at {usage_percent:.1f}%, exceeding the limit of {max_percent}%",
        )
    if usage_percent >= max_percent - margin_percent:
        return StorageWarning(
            level="warning",
            message=f"Disk usage is at {usage_percent:.1f}%, approaching the limit of {max_percent}%",
        )
    return None


def compute_storage_stats(
    upload_root: str | Path,
    max_percent: int,
    reserved_percent: int,
    margin_percent: int,
) -> StorageStats:
    """
    Combine filesystem totals with the upload breakdown.

    Args:
        upload_root: Upload directory (its filesystem is measured)
        max_percent: Configured max disk usage (0 means the default of 80)
        reserved_percent: Share of the disk never handed out to uploads
        margin_percent: Distance below max_percent where warnings start

    Raises:
        StorageIOError: Filesystem stats or directory walk failed
    """
    try:
        disk = shutil.disk_usage(str(upload_root))
    except OSError as e:
        logger.error(f"[DiskUsage] Failed to get filesystem stats: {e}")
        raise StorageIOError("failed to get filesystem stats") from e

    breakdown = measure_breakdown(upload_root)
    used_by_uploads = breakdown.originals_bytes + breakdown.display_bytes + breakdown.thumbnails_bytes
    file_count = breakdown.originals_count + breakdown.display_count + breakdown.thumbnails_count

    total = disk.total
    available = disk.free
    usage_percent = ((total - available) / total * 100) if total else 0.0
    reserved = int(total * reserved_percent / 100)
    usable = max(0, available - reserved)

    return StorageStats(
        total_bytes=total,
        used_bytes=used_by_uploads,
        available_bytes=available,
        reserved_bytes=reserved,
        usable_bytes=usable,
        reserved_percent=reserved_percent,
        usage_percent=usage_percent,
        file_count=file_count,
        breakdown=breakdown,
        warning=usage_warning(usage_percent, max_percent or 80, margin_percent),
    )
