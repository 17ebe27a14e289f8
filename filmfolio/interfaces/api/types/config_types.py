"""Config API types - Pydantic models for site configuration endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class SiteConfigUpdateRequest(BaseModel):
    """Partial site config; sections merge key by key into the stored config.

    Intentionally flexible: presentation sections (owner, social, branding,
    navigation, features) are free-form.
    """

    model_config = ConfigDict(extra="forbid")

    site: dict[str, Any] | None = None
    owner: dict[str, Any] | None = None
    social: dict[str, Any] | None = None
    branding: dict[str, Any] | None = None
    portfolio: dict[str, Any] | None = None
    navigation: dict[str, Any] | None = None
    features: dict[str, Any] | None = None
    storage: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class MainPortfolioAlbumRequest(BaseModel):
    album_id: str = ""
