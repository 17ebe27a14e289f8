"""Album API types - Pydantic models for album and photo endpoints.

Responses are plain dicts produced by the DTOs' to_dict(); only requests
are modelled here. ``password_hash`` is never returned over HTTP.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

VisibilityLiteral = Literal["public", "unlisted", "password_protected"]


class AlbumCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    slug: str = ""
    subtitle: str = ""
    description: str = ""
    visibility: VisibilityLiteral = "public"
    allow_downloads: bool = False
    password: str | None = None
    order: int | None = None


class AlbumUpdateRequest(BaseModel):
    """Partial update; only fields that are sent are changed."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    slug: str | None = None
    subtitle: str | None = None
    description: str | None = None
    cover_photo_id: str | None = None
    visibility: VisibilityLiteral | None = None
    allow_downloads: bool | None = None
    order: int | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class PhotoUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    caption: str | None = None
    alt_text: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class SetCoverRequest(BaseModel):
    photo_id: str = Field(..., min_length=1)


class ReorderPhotosRequest(BaseModel):
    photo_ids: list[str]


class AlbumPasswordRequest(BaseModel):
    password: str = Field(..., min_length=1)
