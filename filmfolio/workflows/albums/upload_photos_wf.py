"""Upload photos workflow - store files, then reference them.

Per file, two phases in a fixed order:
1. ImageService writes the original and both renditions
2. AlbumService appends the Photo entry to the albums document

If phase 2 is rejected before anything is written (album gone, ID clash)
the files are removed at once. If the document write itself fails the
files are orphans: the photo ID is logged and reported, and the files are
left for reconcile_uploads_workflow.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from filmfolio.helpers.dto.storage_dto import UploadPhotosResult
from filmfolio.helpers.exceptions import FilmfolioError, StorageIOError, ValidationError

if TYPE_CHECKING:
    from filmfolio.services.album_svc import AlbumService
    from filmfolio.services.image_svc import ImageService
    from filmfolio.services.site_config_svc import SiteConfigService

logger = logging.getLogger(__name__)


def upload_photos_workflow(
    album_service: AlbumService,
    image_service: ImageService,
    site_config_service: SiteConfigService,
    album_id: str,
    files: list[tuple[str, bytes]],
) -> UploadPhotosResult:
    """
    Upload several photos into one album.

    Per-file failures do not stop the batch; they are collected in
    ``errors`` as "<filename>: <message>".

    Args:
        album_service: Album document operations
        image_service: Upload directory operations
        site_config_service: Source of the per-image size limit
        album_id: Target album
        files: (client filename, bytes) pairs

    Returns:
        UploadPhotosResult with the added photos and per-file errors

    Raises:
        NotFoundError: Album does not exist
        ValidationError: No files given
    """
    album_service.get_album(album_id)
    if not files:
        raise ValidationError("no files uploaded")

    max_bytes = site_config_service.get_config().storage.max_image_size_mb * 1024 * 1024
    result = UploadPhotosResult()

    for filename, data in files:
        try:
            stored = image_service.process_upload(filename, data, max_bytes=max_bytes)
        except FilmfolioError as e:
            logger.warning(f"[upload_photos] Rejected {filename!r}: {e.message}")
            result.errors.append(f"{filename}: {e.message}")
            continue

        try:
            photo = album_service.add_photo(album_id, stored.photo)
        except StorageIOError as e:
            logger.error(
                f"[upload_photos] Album write failed; files of photo={stored.photo_id} are orphaned "
                f"until reconciliation: {e.message}"
            )
            result.errors.append(f"{filename}: {e.message}")
            result.orphaned_photo_ids.append(stored.photo_id)
            continue
        except FilmfolioError as e:
            image_service.delete_files(stored.paths)
            logger.warning(f"[upload_photos] Could not add photo={stored.photo_id}: {e.message}")
            result.errors.append(f"{filename}: {e.message}")
            continue

        result.uploaded.append(photo)

    logger.info(
        f"[upload_photos] album={album_id} uploaded={len(result.uploaded)} failed={len(result.errors)}"
    )
    return result
