"""Delete album workflow.

Order is fixed so a crash at any point leaves valid references:
1. clear portfolio.main_album_id if it points at the album (site_config)
2. remove the album entry (albums)
3. delete the files of its photos (orphans are logged, not raised)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from filmfolio.workflows.albums.delete_photo_wf import delete_photo_files_quietly

if TYPE_CHECKING:
    from filmfolio.helpers.dto.album_dto import Album
    from filmfolio.services.album_svc import AlbumService
    from filmfolio.services.image_svc import ImageService
    from filmfolio.services.site_config_svc import SiteConfigService

logger = logging.getLogger(__name__)


def delete_album_workflow(
    album_service: AlbumService,
    image_service: ImageService,
    site_config_service: SiteConfigService,
    album_id: str,
) -> Album:
    """
    Delete an album, its portfolio reference and its files.

    Returns:
        The removed Album (with the photos it had)

    Raises:
        NotFoundError: Unknown album (nothing is changed)
        StorageIOError: A document write failed
    """
    album_service.get_album(album_id)

    site_config_service.clear_main_portfolio_album_if(album_id)
    album = album_service.delete_album(album_id)

    failed = sum(1 for photo in album.photos if not delete_photo_files_quietly(image_service, photo))
    if failed:
        logger.warning(f"[delete_album] album={album_id}: files of {failed} photo(s) left for reconciliation")
    logger.info(f"[delete_album] Deleted album={album_id} with {len(album.photos)} photo(s)")
    return album
