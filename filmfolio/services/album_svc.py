"""Album service.

Typed operations over the ``albums`` document. Every mutation runs as one
locked read-modify-write through AlbumsDocument.edit(), so ID and slug
uniqueness checks see the same collection that gets written.

Validation always happens before the document is touched; a rejected
request never produces a write.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any, TypeVar

from filmfolio.components.albums.album_validation_comp import (
    renumber_photos,
    validate_album,
    validate_cover,
    validate_reorder,
)
from filmfolio.components.albums.identity_comp import generate_slug, generate_unique_slug, new_unique_id
from filmfolio.components.storage.reconcile_comp import referenced_paths
from filmfolio.helpers.dto.album_dto import Album, Photo
from filmfolio.helpers.exceptions import ConflictError, NotFoundError, ValidationError
from filmfolio.helpers.time_helper import to_iso, utc_now
from filmfolio.services.auth_svc import DEFAULT_BCRYPT_ROUNDS, AuthService

if TYPE_CHECKING:
    from filmfolio.persistence.db import Database

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fields update_album() may change; everything else is owned by the service
ALBUM_UPDATABLE_FIELDS = {
    "title",
    "slug",
    "subtitle",
    "description",
    "cover_photo_id",
    "visibility",
    "allow_downloads",
    "order",
}
PHOTO_UPDATABLE_FIELDS = {"caption", "alt_text"}


class AlbumService:
    """CRUD for albums and their photos."""

    def __init__(
        self,
        db: Database,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """
        Args:
            db: Database facade (albums document)
            bcrypt_rounds: Cost factor for album access passwords
            clock: Returns the current UTC datetime (for timestamps)
            id_factory: Produces candidate IDs; uuid4 by default
        """
        self._db = db
        self._rounds = bcrypt_rounds
        self._clock = clock or utc_now
        self._id_factory = id_factory

    def _now(self) -> str:
        return to_iso(self._clock())

    def _taken_photo_ids(self, albums: list[Album]) -> set[str]:
        return {p.id for a in albums for p in a.photos}

    def _mutate(self, album_id: str, fn: Callable[[Album, list[Album]], T]) -> T:
        """Apply fn to one album inside the document lock, validate, stamp and write."""
        with self._db.albums.edit() as albums:
            album = _find(albums, album_id)
            result = fn(album, albums)
            album.updated_at = self._now()
            validate_album(album)
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_albums(self) -> list[Album]:
        """All albums sorted by their ``order`` field (stable for ties)."""
        return sorted(self._db.albums.load(), key=lambda a: a.order)

    def get_album(self, album_id: str) -> Album:
        album = self._db.albums.find(album_id)
        if album is None:
            raise NotFoundError("album not found")
        return album

    def get_album_by_slug(self, slug: str) -> Album:
        for album in self._db.albums.load():
            if album.slug == slug:
                return album
        raise NotFoundError("album not found")

    def album_exists(self, album_id: str) -> bool:
        return self._db.albums.find(album_id) is not None

    def referenced_filenames(self) -> set[str]:
        """Upload-relative paths ("display/x.webp") referenced by any photo."""
        return set(referenced_paths(self._db.albums.load()))

    # ------------------------------------------------------------------
    # Album mutations
    # ------------------------------------------------------------------

    def create_album(
        self,
        title: str,
        slug: str = "",
        subtitle: str = "",
        description: str = "",
        visibility: str = "public",
        allow_downloads: bool = False,
        password: str | None = None,
        order: int | None = None,
        album_id: str | None = None,
    ) -> Album:
        """
        Create an album with a fresh unique ID.

        A slug is derived from the title when not given; a taken slug gets a
        numeric suffix ("coastline-1").

        Raises:
            ValidationError: Invalid title, slug or visibility
            ConflictError: album_id supplied and already taken
        """
        password_hash = AuthService.hash_password(password, rounds=self._rounds) if password else ""
        now = self._now()

        with self._db.albums.edit() as albums:
            taken_ids = {a.id for a in albums}
            if album_id:
                if album_id in taken_ids:
                    raise ConflictError("album with this id already exists")
                new_id = album_id
            else:
                new_id = new_unique_id(taken_ids, self._id_factory)

            base_slug = slug.strip() if slug else generate_slug(title or "")
            album = Album(
                id=new_id,
                title=title,
                slug=generate_unique_slug(base_slug, (a.slug for a in albums)),
                subtitle=subtitle,
                description=description,
                visibility=visibility,
                password_hash=password_hash,
                allow_downloads=allow_downloads,
                order=order if order is not None else max((a.order for a in albums), default=0) + 1,
                created_at=now,
                updated_at=now,
            )
            validate_album(album)
            albums.append(album)

        logger.info(f"[AlbumService] Created album id={album.id} slug={album.slug}")
        return album

    def update_album(self, album_id: str, changes: dict[str, Any]) -> Album:
        """
        Apply a partial update.

        Raises:
            NotFoundError: Unknown album
            ValidationError: Unknown field or invariant violated
            ConflictError: Slug already used by another album
        """
        unknown = set(changes) - ALBUM_UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"cannot update field(s): {', '.join(sorted(unknown))}")

        def apply(album: Album, albums: list[Album]) -> Album:
            for key, value in changes.items():
                setattr(album, key, value)
            if "slug" in changes and any(a.slug == album.slug and a.id != album.id for a in albums):
                raise ConflictError("album with this slug already exists")
            return album

        album = self._mutate(album_id, apply)
        logger.info(f"[AlbumService] Updated album id={album_id} fields={sorted(changes)}")
        return album

    def delete_album(self, album_id: str) -> Album:
        """Remove an album entry and return it (with its photos) for file cleanup."""
        with self._db.albums.edit() as albums:
            album = _find(albums, album_id)
            albums.remove(album)
        logger.info(f"[AlbumService] Deleted album id={album_id} photos={len(album.photos)}")
        return album

    # ------------------------------------------------------------------
    # Photos
    # ------------------------------------------------------------------

    def add_photo(self, album_id: str, photo: Photo) -> Photo:
        """
        Append a photo to the end of an album.

        The photo keeps its ID if it has one (the image service names files
        after it); otherwise one is assigned.

        Raises:
            NotFoundError: Unknown album
            ConflictError: Photo ID already used anywhere
        """

        def apply(album: Album, albums: list[Album]) -> Photo:
            taken = self._taken_photo_ids(albums)
            if photo.id:
                if photo.id in taken:
                    raise ConflictError("photo with this id already exists")
            else:
                photo.id = new_unique_id(taken, self._id_factory)
            if not photo.uploaded_at:
                photo.uploaded_at = self._now()
            album.photos.append(photo)
            renumber_photos(album.photos)
            return photo

        added = self._mutate(album_id, apply)
        logger.info(f"[AlbumService] Added photo id={added.id} to album id={album_id}")
        return added

    def update_photo(self, album_id: str, photo_id: str, changes: dict[str, Any]) -> Photo:
        """Update caption / alt text of a photo."""
        unknown = set(changes) - PHOTO_UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"cannot update field(s): {', '.join(sorted(unknown))}")

        def apply(album: Album, _albums: list[Album]) -> Photo:
            photo = _find_photo(album, photo_id)
            for key, value in changes.items():
                setattr(photo, key, "" if value is None else str(value))
            return photo

        return self._mutate(album_id, apply)

    def remove_photo(self, album_id: str, photo_id: str) -> Photo:
        """
        Remove a photo entry (files are the caller's concern).

        Clears the cover if it pointed at the photo and closes the gap in
        ``order``.
        """

        def apply(album: Album, _albums: list[Album]) -> Photo:
            photo = _find_photo(album, photo_id)
            album.photos.remove(photo)
            if album.cover_photo_id == photo_id:
                album.cover_photo_id = ""
            renumber_photos(album.photos)
            return photo

        removed = self._mutate(album_id, apply)
        logger.info(f"[AlbumService] Removed photo id={photo_id} from album id={album_id}")
        return removed

    def remove_all_photos(self, album_id: str) -> list[Photo]:
        """Empty an album; returns the removed photos."""

        def apply(album: Album, _albums: list[Album]) -> list[Photo]:
            removed = list(album.photos)
            album.photos.clear()
            album.cover_photo_id = ""
            return removed

        return self._mutate(album_id, apply)

    def set_cover_photo(self, album_id: str, photo_id: str) -> Album:
        """
        Raises:
            NotFoundError: Unknown album
            ValidationError: Photo is not in this album
        """

        def apply(album: Album, _albums: list[Album]) -> Album:
            if not photo_id:
                raise ValidationError("photo id is required")
            validate_cover(album, photo_id)
            album.cover_photo_id = photo_id
            return album

        return self._mutate(album_id, apply)

    def clear_cover_photo(self, album_id: str) -> Album:
        def apply(album: Album, _albums: list[Album]) -> Album:
            album.cover_photo_id = ""
            return album

        return self._mutate(album_id, apply)

    def reorder_photos(self, album_id: str, photo_ids: list[str]) -> Album:
        """
        Reorder photos; photo_ids must be an exact permutation of the album's photos.

        Raises:
            ValidationError: Missing, extra or repeated IDs
        """

        def apply(album: Album, _albums: list[Album]) -> Album:
            album.photos = validate_reorder(album, photo_ids)
            renumber_photos(album.photos)
            return album

        return self._mutate(album_id, apply)

    # ------------------------------------------------------------------
    # Album access passwords
    # ------------------------------------------------------------------

    def set_album_password(self, album_id: str, password: str) -> Album:
        """Protect an album with a password (switches visibility to password_protected)."""
        if not password:
            raise ValidationError("password must not be empty")
        password_hash = AuthService.hash_password(password, rounds=self._rounds)

        def apply(album: Album, _albums: list[Album]) -> Album:
            album.password_hash = password_hash
            album.visibility = "password_protected"
            return album

        return self._mutate(album_id, apply)

    def remove_album_password(self, album_id: str) -> Album:
        """Drop the password and make the album public."""

        def apply(album: Album, _albums: list[Album]) -> Album:
            album.password_hash = ""
            album.visibility = "public"
            return album

        return self._mutate(album_id, apply)

    def verify_album_password(self, album_id: str, password: str) -> bool:
        album = self.get_album(album_id)
        return AuthService.verify_password(password, album.password_hash)


def _find(albums: list[Album], album_id: str) -> Album:
    for album in albums:
        if album.id == album_id:
            return album
    raise NotFoundError("album not found")


def _find_photo(album: Album, photo_id: str) -> Photo:
    photo = album.find_photo(photo_id)
    if photo is None:
        raise NotFoundError("photo not found")
    return photo
