"""Image service.

Owns the upload directory layout:

    <upload_dir>/originals/<photo_id>.<ext>
    <upload_dir>/display/<photo_id>.webp      (fits 3840 px, quality 85)
    <upload_dir>/thumbnails/<photo_id>.webp   (fits 800 px, quality 80)

Files are only ever named after server-generated photo IDs; client file
names are recorded in ``filename_original`` and never touch a path.
"""

from __future__ import annotations

import contextlib
import logging
import uuid
from collections.abc import Callable
from pathlib import Path

from filmfolio.components.storage.image_processing_comp import (
    decode_image,
    extract_exif,
    save_webp_rendition,
    write_file,
)
from filmfolio.components.storage.reconcile_comp import url_to_relative_path
from filmfolio.helpers.dto.album_dto import Photo
from filmfolio.helpers.dto.storage_dto import StoredImage
from filmfolio.helpers.exceptions import StorageIOError, ValidationError
from filmfolio.helpers.files import RENDITION_DIRS, resolve_upload_path, validate_filename
from filmfolio.services.config_svc import (
    INTERNAL_DISPLAY_MAX_PX,
    INTERNAL_DISPLAY_QUALITY,
    INTERNAL_MAX_UPLOAD_BYTES,
    INTERNAL_THUMBNAIL_MAX_PX,
    INTERNAL_THUMBNAIL_QUALITY,
    INTERNAL_UPLOAD_URL_PREFIX,
)

logger = logging.getLogger(__name__)


class ImageService:
    """Store, render and delete photo files."""

    def __init__(self, upload_dir: str | Path, id_factory: Callable[[], str] | None = None) -> None:
        """
        Args:
            upload_dir: Root of the upload tree (rendition dirs are created)
            id_factory: Produces photo IDs; uuid4 by default

        Raises:
            StorageIOError: Upload directories cannot be created
        """
        self.upload_dir = Path(upload_dir)
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        try:
            for rendition in RENDITION_DIRS:
                (self.upload_dir / rendition).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"[ImageService] Cannot create upload directories: {e}")
            raise StorageIOError("failed to create upload directory") from e

    @staticmethod
    def url_for(rendition: str, filename: str) -> str:
        return f"{INTERNAL_UPLOAD_URL_PREFIX}/{rendition}/{filename}"

    def path_for(self, rendition: str, filename: str) -> Path:
        """
        Filesystem path of one stored file, for serving.

        Raises:
            ValidationError: Unknown rendition or unsafe filename
        """
        if rendition not in RENDITION_DIRS:
            raise ValidationError("unknown rendition")
        validate_filename(filename)
        return resolve_upload_path(self.upload_dir, f"{rendition}/{filename}")

    def _new_photo_id(self) -> str:
        for _ in range(16):
            candidate = self._id_factory()
            taken = any(next((self.upload_dir / d).glob(f"{candidate}.*"), None) is not None for d in RENDITION_DIRS)
            if not taken:
                return candidate
        raise StorageIOError("could not allocate a photo id")

    def process_upload(self, filename: str, data: bytes, max_bytes: int | None = None) -> StoredImage:
        """
        Validate, decode and store one upload with all its renditions.

        Nothing is left on disk if any step fails.

        Args:
            filename: Client-supplied name (recorded, never used as a path)
            data: Raw upload bytes
            max_bytes: Site limit; capped by the hard 100 MB limit

        Returns:
            StoredImage with the written paths and a Photo ready to be added
            to an album (order/uploaded_at still unset)

        Raises:
            ValidationError: Bad name, empty/oversized file, unsupported type
            StorageIOError: Writing any file failed
        """
        validate_filename(filename)
        limit = min(max_bytes, INTERNAL_MAX_UPLOAD_BYTES) if max_bytes else INTERNAL_MAX_UPLOAD_BYTES
        if not data:
            raise ValidationError("file is empty")
        if len(data) > limit:
            raise ValidationError(f"file size {len(data)} exceeds maximum {limit}")

        decoded = decode_image(data)
        exif = extract_exif(decoded.image)

        photo_id = self._new_photo_id()
        original_name = f"{photo_id}{decoded.extension}"
        rendition_name = f"{photo_id}.webp"
        original_path = self.upload_dir / "originals" / original_name
        display_path = self.upload_dir / "display" / rendition_name
        thumbnail_path = self.upload_dir / "thumbnails" / rendition_name

        written: list[Path] = []
        try:
            original_size = write_file(original_path, data)
            written.append(original_path)
            display_size = save_webp_rendition(
                decoded.image, display_path, INTERNAL_DISPLAY_MAX_PX, INTERNAL_DISPLAY_QUALITY
            )
            written.append(display_path)
            thumbnail_size = save_webp_rendition(
                decoded.image, thumbnail_path, INTERNAL_THUMBNAIL_MAX_PX, INTERNAL_THUMBNAIL_QUALITY
            )
            written.append(thumbnail_path)
        except (OSError, ValueError) as e:
            # A rendition may be half-written even if it never made it into the list
            for path in (original_path, display_path, thumbnail_path):
                with contextlib.suppress(OSError):
                    path.unlink(missing_ok=True)
            logger.error(f"[ImageService] Failed to store upload photo={photo_id}: {e}")
            raise StorageIOError("failed to store image") from e
        finally:
            decoded.image.close()

        photo = Photo(
            id=photo_id,
            filename_original=filename,
            url_original=self.url_for("originals", original_name),
            url_display=self.url_for("display", rendition_name),
            url_thumbnail=self.url_for("thumbnails", rendition_name),
            width=decoded.width,
            height=decoded.height,
            file_size_original=original_size,
            file_size_display=display_size,
            file_size_thumbnail=thumbnail_size,
            exif=exif,
        )
        logger.info(f"[ImageService] Stored photo={photo_id} ({decoded.format} {decoded.width}x{decoded.height})")
        return StoredImage(photo_id=photo_id, paths=[str(p) for p in written], photo=photo)

    def delete_files(self, paths: list[str]) -> None:
        """Remove files written by process_upload (rollback of a failed add)."""
        for path in paths:
            with contextlib.suppress(FileNotFoundError):
                Path(path).unlink()

    def delete_photo_files(self, photo: Photo) -> int:
        """
        Delete every rendition a photo references.

        Already-missing files are not an error.

        Returns:
            Number of files removed

        Raises:
            StorageIOError: At least one existing file could not be removed
        """
        removed = 0
        failures: list[str] = []
        for url in photo.urls:
            rel = url_to_relative_path(url)
            if rel is None:
                logger.warning(f"[ImageService] Skipping unusable URL on photo={photo.id}")
                continue
            try:
                resolve_upload_path(self.upload_dir, rel).unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except (OSError, ValidationError) as e:
                logger.error(f"[ImageService] Failed to delete {rel} for photo={photo.id}: {e}")
                failures.append(rel)
        if failures:
            raise StorageIOError(f"failed to delete {len(failures)} file(s) of photo {photo.id}")
        return removed
