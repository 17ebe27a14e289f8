"""
Config domain DTOs.

Data transfer objects for application configuration and the persisted
``site_config`` document.

Rules:
- Import only stdlib and typing (no filmfolio.* imports)
- Pure data structures only (no I/O, no DB access, no business logic)
"""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field, fields
from typing import Any


@dataclass
class ConfigResult:
    """Result from config_service.get_config and reload - wraps configuration dict."""

    config: dict[str, Any]


@dataclass
class SiteInfo:
    title: str = "My Photography Portfolio"
    tagline: str = ""
    description: str = ""
    language: str = "en"
    timezone: str = "America/Los_Angeles"


@dataclass
class PortfolioConfig:
    main_album_id: str = ""
    show_exif_data: bool = True
    default_photo_layout: str = ""
    enable_lightbox: bool = True
    show_photo_count: bool = False


@dataclass
class StorageConfig:
    max_disk_usage_percent: int = 80
    max_image_size_mb: int = 50


@dataclass
class SiteConfig:
    """Singleton site configuration.

    Presentation-only sections (owner, social, branding, navigation, features)
    are kept as plain mappings; the core never interprets them.
    """

    version: str = "1.0.0"
    last_updated: str = ""
    site: SiteInfo = field(default_factory=SiteInfo)
    owner: dict[str, Any] = field(default_factory=dict)
    social: dict[str, Any] = field(default_factory=dict)
    branding: dict[str, Any] = field(default_factory=dict)
    portfolio: PortfolioConfig = field(default_factory=PortfolioConfig)
    navigation: dict[str, Any] = field(default_factory=dict)
    features: dict[str, Any] = field(default_factory=dict)
    storage: StorageConfig = field(default_factory=StorageConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SiteConfig:
        def section(kind: type, value: Any) -> Any:
            names = {f.name for f in fields(kind)}
            return kind(**{k: v for k, v in (value or {}).items() if k in names})

        return cls(
            version=str(data.get("version") or "1.0.0"),
            last_updated=str(data.get("last_updated") or ""),
            site=section(SiteInfo, data.get("site")),
            owner=copy.deepcopy(data.get("owner") or {}),
            social=copy.deepcopy(data.get("social") or {}),
            branding=copy.deepcopy(data.get("branding") or {}),
            portfolio=section(PortfolioConfig, data.get("portfolio")),
            navigation=copy.deepcopy(data.get("navigation") or {}),
            features=copy.deepcopy(data.get("features") or {}),
            storage=section(StorageConfig, data.get("storage")),
        )
