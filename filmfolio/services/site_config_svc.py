"""Site configuration service.

Singleton ``site_config`` document: defaults when absent, validated
updates, and the ``portfolio.main_album_id`` reference to an album.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import fields
from datetime import datetime
from typing import TYPE_CHECKING, Any

from filmfolio.helpers.dto.config_dto import PortfolioConfig, SiteConfig, SiteInfo, StorageConfig
from filmfolio.helpers.exceptions import ValidationError
from filmfolio.helpers.time_helper import to_iso, utc_now

if TYPE_CHECKING:
    from filmfolio.persistence.db import Database

logger = logging.getLogger(__name__)

# Upper bound for storage.max_image_size_mb (hard upload cap is 100 MB)
MAX_IMAGE_SIZE_MB_LIMIT = 100


def default_site_config() -> SiteConfig:
    """Configuration served before the admin has saved anything."""
    return SiteConfig(
        version="1.0.0",
        site=SiteInfo(title="My Photography Portfolio", language="en", timezone="America/Los_Angeles"),
        branding={
            "primary_color": "#000000",
            "secondary_color": "#666666",
            "accent_color": "#ff6b6b",
            "theme": {
                "mode": "system",
                "light": {
                    "background": "#ffffff",
                    "surface": "#f5f5f5",
                    "text_primary": "#000000",
                    "text_secondary": "#666666",
                    "border": "#e0e0e0",
                },
                "dark": {
                    "background": "#0a0a0a",
                    "surface": "#1a1a1a",
                    "text_primary": "#ffffff",
                    "text_secondary": "#999999",
                    "border": "#333333",
                },
            },
        },
        portfolio=PortfolioConfig(show_exif_data=True, enable_lightbox=True),
        navigation={"show_home": True, "show_albums": True, "show_about": True, "show_contact": True},
        features={"enable_analytics": False},
        storage=StorageConfig(),
    )


def _deep_merge(a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(a.get(k), dict):
            _deep_merge(a[k], v)
        else:
            a[k] = v
    return a


class SiteConfigService:
    """Read and update the site configuration."""

    def __init__(self, db: Database, clock: Callable[[], datetime] | None = None) -> None:
        self._db = db
        self._clock = clock or utc_now

    def get_config(self) -> SiteConfig:
        """Stored config, or the defaults if none was saved yet."""
        return self._db.site_config.load() or default_site_config()

    def validate(self, config: SiteConfig) -> None:
        """
        Raises:
            ValidationError: Missing title/language, bad storage limits or
                unknown main album
        """
        if not config.site.title or not str(config.site.title).strip():
            raise ValidationError("site title is required")
        if not config.site.language:
            raise ValidationError("site language is required")
        if not isinstance(config.storage.max_disk_usage_percent, int) or not (
            1 <= config.storage.max_disk_usage_percent <= 100
        ):
            raise ValidationError("storage.max_disk_usage_percent must be between 1 and 100")
        if not isinstance(config.storage.max_image_size_mb, int) or not (
            1 <= config.storage.max_image_size_mb <= MAX_IMAGE_SIZE_MB_LIMIT
        ):
            raise ValidationError(f"storage.max_image_size_mb must be between 1 and {MAX_IMAGE_SIZE_MB_LIMIT}")
        main_album_id = config.portfolio.main_album_id
        if main_album_id and self._db.albums.find(main_album_id) is None:
            raise ValidationError("portfolio.main_album_id does not reference an existing album")

    def update_config(self, changes: dict[str, Any]) -> SiteConfig:
        """
        Merge changes into the current config, validate and save.

        Nested sections merge key by key; ``version`` and ``last_updated``
        are owned by the service.
        """
        changes = {k: v for k, v in changes.items() if k not in ("version", "last_updated")}

        with self._db.site_config.edit(default_site_config) as config:
            merged = SiteConfig.from_dict(_deep_merge(config.to_dict(), changes))
            self.validate(merged)
            merged.last_updated = to_iso(self._clock())
            # edit() writes back the object it yielded
            for f in fields(SiteConfig):
                setattr(config, f.name, getattr(merged, f.name))

        logger.info(f"[SiteConfig] Updated sections={sorted(changes)}")
        return config

    def set_main_portfolio_album(self, album_id: str) -> SiteConfig:
        """Point the portfolio at an album ("" clears it)."""
        return self.update_config({"portfolio": {"main_album_id": album_id}})

    def clear_main_portfolio_album_if(self, album_id: str) -> bool:
        """
        Clear portfolio.main_album_id only if it equals album_id.

        Returns:
            True when the reference was cleared
        """
        current = self._db.site_config.load()
        if not album_id or current is None or current.portfolio.main_album_id != album_id:
            return False
        cleared = False
        with self._db.site_config.edit(default_site_config) as config:
            if config.portfolio.main_album_id == album_id:
                config.portfolio.main_album_id = ""
                config.last_updated = to_iso(self._clock())
                cleared = True
        if cleared:
            logger.info(f"[SiteConfig] Cleared main portfolio album (was album id={album_id})")
        return cleared
