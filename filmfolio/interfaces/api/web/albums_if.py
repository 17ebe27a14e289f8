"""Album and photo endpoints.

Reads are public (/api/albums); every mutation lives under /api/admin and
requires a session.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Response, UploadFile

from filmfolio.interfaces.api.auth import verify_session
from filmfolio.interfaces.api.types.album_types import (
    AlbumCreateRequest,
    AlbumPasswordRequest,
    AlbumUpdateRequest,
    PhotoUpdateRequest,
    ReorderPhotosRequest,
    SetCoverRequest,
)
from filmfolio.interfaces.api.web.dependencies import (
    get_album_service,
    get_image_service,
    get_site_config_service,
)
from filmfolio.services.album_svc import AlbumService
from filmfolio.services.config_svc import INTERNAL_MAX_UPLOAD_BYTES
from filmfolio.services.image_svc import ImageService
from filmfolio.services.site_config_svc import SiteConfigService
from filmfolio.workflows.albums.delete_album_wf import delete_album_workflow
from filmfolio.workflows.albums.delete_photo_wf import delete_all_photos_workflow, delete_photo_workflow
from filmfolio.workflows.albums.upload_photos_wf import upload_photos_workflow

public_router = APIRouter(prefix="/api/albums", tags=["Albums"])
router = APIRouter(prefix="/api/admin/albums", tags=["Albums"], dependencies=[Depends(verify_session)])


# ──────────────────────────────────────────────────────────────────────
# Public reads
# ──────────────────────────────────────────────────────────────────────


@public_router.get("")
def list_albums(album_service: AlbumService = Depends(get_album_service)) -> dict[str, Any]:
    return {"albums": [a.to_dict(include_secrets=False) for a in album_service.list_albums()]}


@public_router.get("/{album_id}")
def get_album(album_id: str, album_service: AlbumService = Depends(get_album_service)) -> dict[str, Any]:
    return album_service.get_album(album_id).to_dict(include_secrets=False)


@public_router.get("/by-slug/{slug}")
def get_album_by_slug(slug: str, album_service: AlbumService = Depends(get_album_service)) -> dict[str, Any]:
    return album_service.get_album_by_slug(slug).to_dict(include_secrets=False)


# ──────────────────────────────────────────────────────────────────────
# Albums
# ──────────────────────────────────────────────────────────────────────


@router.post("", status_code=201)
def create_album(
    request: AlbumCreateRequest,
    album_service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    album = album_service.create_album(**request.model_dump())
    return album.to_dict(include_secrets=False)


@router.put("/{album_id}")
def update_album(
    album_id: str,
    request: AlbumUpdateRequest,
    album_service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    return album_service.update_album(album_id, request.changes()).to_dict(include_secrets=False)


@router.delete("/{album_id}", status_code=204)
def delete_album(
    album_id: str,
    album_service: AlbumService = Depends(get_album_service),
    image_service: ImageService = Depends(get_image_service),
    site_config_service: SiteConfigService = Depends(get_site_config_service),
) -> Response:
    delete_album_workflow(album_service, image_service, site_config_service, album_id)
    return Response(status_code=204)


# ──────────────────────────────────────────────────────────────────────
# Photos
# ──────────────────────────────────────────────────────────────────────


@router.post("/{album_id}/photos/upload")
def upload_photos(
    album_id: str,
    photos: list[UploadFile] = File(...),
    album_service: AlbumService = Depends(get_album_service),
    image_service: ImageService = Depends(get_image_service),
    site_config_service: SiteConfigService = Depends(get_site_config_service),
) -> dict[str, Any]:
    """Multipart upload; form field ``photos`` may repeat."""
    # One byte past the hard cap is enough for the size check to reject it
    files = [(upload.filename or "", upload.file.read(INTERNAL_MAX_UPLOAD_BYTES + 1)) for upload in photos]
    result = upload_photos_workflow(album_service, image_service, site_config_service, album_id, files)
    return result.to_dict()


@router.put("/{album_id}/photos/{photo_id}")
def update_photo(
    album_id: str,
    photo_id: str,
    request: PhotoUpdateRequest,
    album_service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    return album_service.update_photo(album_id, photo_id, request.changes()).to_dict()


@router.delete("/{album_id}/photos/{photo_id}", status_code=204)
def delete_photo(
    album_id: str,
    photo_id: str,
    album_service: AlbumService = Depends(get_album_service),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    delete_photo_workflow(album_service, image_service, album_id, photo_id)
    return Response(status_code=204)


@router.delete("/{album_id}/photos", status_code=204)
def delete_all_photos(
    album_id: str,
    album_service: AlbumService = Depends(get_album_service),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    delete_all_photos_workflow(album_service, image_service, album_id)
    return Response(status_code=204)


@router.post("/{album_id}/set-cover")
def set_cover_photo(
    album_id: str,
    request: SetCoverRequest,
    album_service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    return album_service.set_cover_photo(album_id, request.photo_id).to_dict(include_secrets=False)


@router.delete("/{album_id}/cover")
def clear_cover_photo(album_id: str, album_service: AlbumService = Depends(get_album_service)) -> dict[str, Any]:
    return album_service.clear_cover_photo(album_id).to_dict(include_secrets=False)


@router.post("/{album_id}/reorder-photos")
def reorder_photos(
    album_id: str,
    request: ReorderPhotosRequest,
    album_service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    return album_service.reorder_photos(album_id, request.photo_ids).to_dict(include_secrets=False)


# ──────────────────────────────────────────────────────────────────────
# Album passwords
# ──────────────────────────────────────────────────────────────────────


@router.post("/{album_id}/set-password")
def set_album_password(
    album_id: str,
    request: AlbumPasswordRequest,
    album_service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    return album_service.set_album_password(album_id, request.password).to_dict(include_secrets=False)


@router.delete("/{album_id}/password")
def remove_album_password(album_id: str, album_service: AlbumService = Depends(get_album_service)) -> dict[str, Any]:
    return album_service.remove_album_password(album_id).to_dict(include_secrets=False)
