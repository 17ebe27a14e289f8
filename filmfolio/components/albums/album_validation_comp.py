"""Album invariants.

Pure checks run against in-memory Album objects before anything is written:
- required title, known visibility, well-formed slug
- cover photo, if set, is one of the album's photos
- photo ``order`` is 1..n matching list position
"""

from __future__ import annotations

import logging

from filmfolio.components.albums.identity_comp import SLUG_PATTERN
from filmfolio.helpers.dto.album_dto import VISIBILITIES, Album, Photo
from filmfolio.helpers.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200


def validate_album(album: Album) -> None:
    """
    Raise ValidationError if the album violates an invariant.

    Args:
        album: Album about to be persisted
    """
    if not album.title or not album.title.strip():
        raise ValidationError("album title is required")
    if len(album.title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"album title must be at most {MAX_TITLE_LENGTH} characters")
    if album.visibility not in VISIBILITIES:
        raise ValidationError(f"invalid visibility: {album.visibility!r}")
    if not album.slug or not SLUG_PATTERN.match(album.slug):
        raise ValidationError("slug must contain only lowercase letters, digits and single hyphens")
    if album.visibility == "password_protected" and not album.password_hash:
        raise ValidationError("password-protected albums need a password")
    validate_cover(album, album.cover_photo_id)

    seen: set[str] = set()
    for photo in album.photos:
        if photo.id in seen:
            raise ValidationError(f"duplicate photo id in album: {photo.id}")
        seen.add(photo.id)


def validate_cover(album: Album, photo_id: str) -> None:
    """Empty clears the cover; anything else must be a photo of this album."""
    if photo_id and album.find_photo(photo_id) is None:
        raise ValidationError("cover photo must be a photo in this album")


def renumber_photos(photos: list[Photo]) -> None:
    """Rewrite ``order`` to 1..n following list position (in place)."""
    for position, photo in enumerate(photos, start=1):
        photo.order = position


def validate_reorder(album: Album, photo_ids: list[str]) -> list[Photo]:
    """
    Resolve a requested ordering into the album's Photo objects.

    Args:
        album: Album being reordered
        photo_ids: Every photo ID of the album exactly once, in the new order

    Returns:
        Photos in the requested order

    Raises:
        ValidationError: Not an exact permutation of the album's photo IDs
    """
    if len(photo_ids) != len(album.photos):
        raise ValidationError("photo ID count does not match album photo count")
    if len(set(photo_ids)) != len(photo_ids):
        raise ValidationError("photo IDs must not repeat")

    by_id = {p.id: p for p in album.photos}
    ordered: list[Photo] = []
    for photo_id in photo_ids:
        photo = by_id.get(photo_id)
        if photo is None:
            raise ValidationError(f"photo ID {photo_id} not found in album")
        ordered.append(photo)
    return ordered
