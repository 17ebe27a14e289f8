"""
Document operation classes, one per persisted JSON document.
"""

from .admin_config_doc import ADMIN_CONFIG_DOCUMENT, AdminConfigDocument
from .albums_doc import ALBUMS_DOCUMENT, AlbumsDocument
from .site_config_doc import SITE_CONFIG_DOCUMENT, SiteConfigDocument

__all__ = [
    "ADMIN_CONFIG_DOCUMENT",
    "ALBUMS_DOCUMENT",
    "SITE_CONFIG_DOCUMENT",
    "AdminConfigDocument",
    "AlbumsDocument",
    "SiteConfigDocument",
]
