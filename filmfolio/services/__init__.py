"""
Services package.
"""

from .album_svc import AlbumService
from .auth_svc import SESSION_TIMEOUT_SECONDS, AuthService, SessionStore
from .config_svc import (
    INTERNAL_DISPLAY_MAX_PX,
    INTERNAL_MAX_UPLOAD_BYTES,
    INTERNAL_RESERVED_DISK_PERCENT,
    INTERNAL_SESSION_COOKIE,
    INTERNAL_THUMBNAIL_MAX_PX,
    ConfigService,
)
from .image_svc import ImageService
from .infrastructure.session_sweeper_svc import SessionSweeperService
from .site_config_svc import SiteConfigService, default_site_config
from .storage_svc import StorageService

__all__ = [
    "INTERNAL_DISPLAY_MAX_PX",
    "INTERNAL_MAX_UPLOAD_BYTES",
    "INTERNAL_RESERVED_DISK_PERCENT",
    "INTERNAL_SESSION_COOKIE",
    "INTERNAL_THUMBNAIL_MAX_PX",
    "SESSION_TIMEOUT_SECONDS",
    "AlbumService",
    "AuthService",
    "ConfigService",
    "ImageService",
    "SessionStore",
    "SessionSweeperService",
    "SiteConfigService",
    "StorageService",
    "default_site_config",
]
