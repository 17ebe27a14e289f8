"""Storage endpoints: disk statistics, reconciliation and upload files."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from filmfolio.helpers.exceptions import NotFoundError
from filmfolio.interfaces.api.auth import verify_session
from filmfolio.interfaces.api.web.dependencies import get_image_service, get_storage_service
from filmfolio.services.image_svc import ImageService
from filmfolio.services.storage_svc import StorageService
from filmfolio.workflows.storage.reconcile_uploads_wf import reconcile_uploads_workflow

router = APIRouter(prefix="/api/admin/storage", tags=["Storage"], dependencies=[Depends(verify_session)])
uploads_router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.get("/stats")
def get_stats(storage_service: StorageService = Depends(get_storage_service)) -> dict[str, Any]:
    stats = asdict(storage_service.get_stats())
    if stats["warning"] is None:
        stats.pop("warning")
    return stats


@router.get("/reconcile")
def reconcile(storage_service: StorageService = Depends(get_storage_service)) -> dict[str, Any]:
    """Report orphan and missing files without changing anything."""
    return asdict(reconcile_uploads_workflow(storage_service, cleanup=False))


@router.post("/cleanup")
def cleanup_orphans(storage_service: StorageService = Depends(get_storage_service)) -> dict[str, Any]:
    """Delete unreferenced files."""
    return asdict(reconcile_uploads_workflow(storage_service, cleanup=True))


@uploads_router.get("/{rendition}/{filename}")
def get_upload(rendition: str, filename: str, image_service: ImageService = Depends(get_image_service)) -> FileResponse:
    path = image_service.path_for(rendition, filename)
    if not path.is_file():
        raise NotFoundError("file not found")
    return FileResponse(str(path))
