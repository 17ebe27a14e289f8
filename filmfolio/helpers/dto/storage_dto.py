"""
DTOs for upload storage and reconciliation.

Cross-layer data contracts for image/storage service operations (used by
services, workflows and interfaces).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from filmfolio.helpers.dto.album_dto import Photo


@dataclass
class StoredImage:
    """Files written for one upload, before the Photo entry exists in a document."""

    photo_id: str
    paths: list[str]
    photo: Photo


@dataclass
class StorageBreakdown:
    originals_bytes: int = 0
    display_bytes: int = 0
    thumbnails_bytes: int = 0
    originals_count: int = 0
    display_count: int = 0
    thumbnails_count: int = 0


@dataclass
class StorageWarning:
    level: str  # "warning" | "critical"
    message: str


@dataclass
class StorageStats:
    """Result from storage_service.get_stats."""

    total_bytes: int
    used_bytes: int
    available_bytes: int
    reserved_bytes: int
    usable_bytes: int
    reserved_percent: int
    usage_percent: float
    file_count: int
    breakdown: StorageBreakdown
    warning: StorageWarning | None = None


@dataclass
class MissingFile:
    """A Photo entry whose backing file is absent."""

    album_id: str
    photo_id: str
    path: str


@dataclass
class ReconcileReport:
    """Result from storage_service.reconcile."""

    referenced_files: int
    files_on_disk: int
    orphan_files: list[str] = field(default_factory=list)
    missing_files: list[MissingFile] = field(default_factory=list)
    deleted_orphans: int = 0
    # Orphans left alone because they may belong to an upload still in flight
    skipped_recent_orphans: int = 0

    @property
    def orphan_count(self) -> int:
        return len(self.orphan_files) + len(self.missing_files)

    @property
    def is_consistent(self) -> bool:
        return self.orphan_count == 0


@dataclass
class UploadPhotosResult:
    """Result from upload_photos_workflow."""

    uploaded: list[Photo] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    orphaned_photo_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"uploaded": [p.to_dict() for p in self.uploaded], "errors": list(self.errors)}
