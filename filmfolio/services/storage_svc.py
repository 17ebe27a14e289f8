"""Storage service.

Disk usage statistics for the upload directory and reconciliation of
stored files against the Photo entries in the ``albums`` document.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from filmfolio.components.storage.disk_usage_comp import compute_storage_stats
from filmfolio.components.storage.reconcile_comp import (
    compare,
    delete_upload_files,
    list_upload_files,
    referenced_paths,
    split_by_age,
)
from filmfolio.helpers.dto.storage_dto import ReconcileReport, StorageStats
from filmfolio.helpers.time_helper import now_s
from filmfolio.services.config_svc import (
    INTERNAL_ORPHAN_GRACE_SECONDS,
    INTERNAL_RESERVED_DISK_PERCENT,
    INTERNAL_WARNING_MARGIN_PERCENT,
)

if TYPE_CHECKING:
    from filmfolio.persistence.db import Database
    from filmfolio.services.site_config_svc import SiteConfigService

logger = logging.getLogger(__name__)


class StorageService:
    """Answers questions about what is on disk versus what is referenced."""

    def __init__(
        self,
        db: Database,
        upload_dir: str | Path,
        site_config_service: SiteConfigService,
        orphan_grace_seconds: float = INTERNAL_ORPHAN_GRACE_SECONDS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Args:
            orphan_grace_seconds: Unreferenced files younger than this are never
                deleted; an upload writes its files before its Photo entry exists
            clock: Returns wall-clock seconds, compared with file mtimes
        """
        self._db = db
        self.upload_dir = Path(upload_dir)
        self._site_config = site_config_service
        self._orphan_grace = orphan_grace_seconds
        self._clock = clock or (lambda: now_s().value)

    def get_stats(self) -> StorageStats:
        """
        Filesystem totals, per-rendition breakdown and a usage warning.

        Raises:
            StorageIOError: Filesystem could not be measured
        """
        storage = self._site_config.get_config().storage
        return compute_storage_stats(
            self.upload_dir,
            max_percent=storage.max_disk_usage_percent,
            reserved_percent=INTERNAL_RESERVED_DISK_PERCENT,
            margin_percent=INTERNAL_WARNING_MARGIN_PERCENT,
        )

    def reconcile(self) -> ReconcileReport:
        """
        Compare referenced files with files on disk. Read-only.

        The albums document is read before the directory is listed, so a
        concurrent upload can at worst show up as a transient orphan file.
        """
        refs = referenced_paths(self._db.albums.load())
        on_disk = list_upload_files(self.upload_dir)
        report = compare(refs, on_disk)
        if not report.is_consistent:
            logger.warning(
                f"[StorageService] Reconcile found {len(report.orphan_files)} orphan file(s) "
                f"and {len(report.missing_files)} missing file(s)"
            )
        return report

    def cleanup_orphans(self) -> ReconcileReport:
        """
        Delete files that no Photo references.

        Only files older than the grace period are removed, so an upload
        between its file write and its album write keeps its files. Missing
        files are only reported; entries are never removed here.
        """
        report = self.reconcile()
        if report.orphan_files:
            cutoff = self._clock() - self._orphan_grace
            expired, recent = split_by_age(self.upload_dir, report.orphan_files, cutoff)
            report.skipped_recent_orphans = len(recent)
            report.deleted_orphans = delete_upload_files(self.upload_dir, expired)
            logger.info(
                f"[StorageService] Deleted {report.deleted_orphans} orphan file(s), "
                f"kept {len(recent)} younger than {int(self._orphan_grace)}s"
            )
        return report
