"""Delete photo workflows - drop the reference, then the files.

The JSON entry goes first so no reader is ever handed a Photo whose files
are already gone. A file that cannot be removed afterwards is an orphan:
it is logged and left for reconciliation, never raised to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from filmfolio.helpers.exceptions import StorageIOError

if TYPE_CHECKING:
    from filmfolio.helpers.dto.album_dto import Photo
    from filmfolio.services.album_svc import AlbumService
    from filmfolio.services.image_svc import ImageService

logger = logging.getLogger(__name__)


def delete_photo_files_quietly(image_service: ImageService, photo: Photo) -> bool:
    """Remove a photo's files; on failure log the orphan and return False."""
    try:
        image_service.delete_photo_files(photo)
    except StorageIOError as e:
        logger.warning(f"[delete_photo] Orphaned files for photo={photo.id}: {e.message}")
        return False
    return True


def delete_photo_workflow(
    album_service: AlbumService,
    image_service: ImageService,
    album_id: str,
    photo_id: str,
) -> Photo:
    """
    Delete one photo from an album and from disk.

    Returns:
        The removed Photo

    Raises:
        NotFoundError: Unknown album or photo
        StorageIOError: albums document could not be written (files untouched)
    """
    photo = album_service.remove_photo(album_id, photo_id)
    delete_photo_files_quietly(image_service, photo)
    logger.info(f"[delete_photo] Deleted photo={photo_id} from album={album_id}")
    return photo


def delete_all_photos_workflow(
    album_service: AlbumService,
    image_service: ImageService,
    album_id: str,
) -> list[Photo]:
    """Empty an album, then remove every file its photos referenced."""
    photos = album_service.remove_all_photos(album_id)
    failed = sum(1 for photo in photos if not delete_photo_files_quietly(image_service, photo))
    logger.info(f"[delete_photo] Deleted {len(photos)} photo(s) from album={album_id} (file failures={failed})")
    return photos
