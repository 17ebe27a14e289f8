"""Reconcile uploads workflow - report and optionally remove orphan files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from filmfolio.helpers.dto.storage_dto import ReconcileReport
    from filmfolio.services.storage_svc import StorageService


def reconcile_uploads_workflow(storage_service: StorageService, cleanup: bool = False) -> ReconcileReport:
    """Compare Photo references with the upload directory.

    Args:
        storage_service: Storage service instance
        cleanup: If True, delete unreferenced files (missing files are only reported)

    Returns:
        ReconcileReport

    """
    logging.info(f"[reconcile_uploads] Starting reconciliation (cleanup={cleanup})")

    if not cleanup:
        report = storage_service.reconcile()
    else:
        report = storage_service.cleanup_orphans()

    logging.info(
        f"[reconcile_uploads] referenced={report.referenced_files} on_disk={report.files_on_disk} "
        f"orphans={len(report.orphan_files)} missing={len(report.missing_files)} deleted={report.deleted_orphans}"
    )
    return report
