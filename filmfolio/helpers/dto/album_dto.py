"""
Album domain DTOs.

Albums and the photos they own, exactly as they are serialized into the
``albums`` document.

Rules:
- Import only stdlib and typing (no filmfolio.* imports)
- Pure data structures only (no I/O, no DB access, no business logic)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Literal

Visibility = Literal["public", "unlisted", "password_protected"]
VISIBILITIES: tuple[str, ...] = ("public", "unlisted", "password_protected")


def _known(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class Exif:
    """Camera metadata captured from the original upload."""

    camera: str = ""
    lens: str = ""
    iso: int = 0
    aperture: str = ""
    shutter_speed: str = ""
    focal_length: str = ""
    date_taken: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Exif:
        return cls(**_known(cls, data))


@dataclass
class Photo:
    """Single photo entry. Owned by exactly one album."""

    id: str
    filename_original: str = ""
    url_original: str = ""
    url_display: str = ""
    url_thumbnail: str = ""
    width: int = 0
    height: int = 0
    file_size_original: int = 0
    file_size_display: int = 0
    file_size_thumbnail: int = 0
    order: int = 0
    uploaded_at: str = ""
    caption: str = ""
    alt_text: str = ""
    exif: Exif | None = None

    @property
    def urls(self) -> list[str]:
        """Every rendition URL this photo references (empty ones skipped)."""
        return [u for u in (self.url_original, self.url_display, self.url_thumbnail) if u]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.exif is None:
            data.pop("exif")
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Photo:
        values = _known(cls, data)
        exif = values.get("exif")
        values["exif"] = Exif.from_dict(exif) if isinstance(exif, dict) else None
        return cls(**values)


@dataclass
class Album:
    """Album with its ordered photos."""

    id: str
    title: str
    slug: str = ""
    subtitle: str = ""
    description: str = ""
    cover_photo_id: str = ""
    visibility: str = "public"
    password_hash: str = ""
    allow_downloads: bool = False
    order: int = 0
    created_at: str = ""
    updated_at: str = ""
    photos: list[Photo] = field(default_factory=list)

    @property
    def photo_ids(self) -> list[str]:
        return [p.id for p in self.photos]

    def find_photo(self, photo_id: str) -> Photo | None:
        for photo in self.photos:
            if photo.id == photo_id:
                return photo
        return None

    def to_dict(self, include_secrets: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "photos"}
        data["photos"] = [p.to_dict() for p in self.photos]
        if not include_secrets:
            data.pop("password_hash")
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Album:
        values = _known(cls, data)
        values["photos"] = [Photo.from_dict(p) for p in values.get("photos") or []]
        return cls(**values)
