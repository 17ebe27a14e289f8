"""
Domain-specific DTOs (Data Transfer Objects) used across multiple layers.

Domain-specific DTOs live in helpers/dto/<domain>_dto.py and form cross-layer contracts
within that domain (interfaces -> services -> workflows -> components).

Rules for DTO modules:
- Contain ONLY dataclass/type definitions, simple type aliases and (de)serialization
- No I/O, no document store access, no business logic
"""

from .album_dto import VISIBILITIES, Album, Exif, Photo
from .auth_dto import AdminCredential, LoginResult, Principal, Session
from .config_dto import ConfigResult, PortfolioConfig, SiteConfig, SiteInfo, StorageConfig
from .storage_dto import (
    MissingFile,
    ReconcileReport,
    StorageBreakdown,
    StorageStats,
    StorageWarning,
    StoredImage,
    UploadPhotosResult,
)

__all__ = [
    "VISIBILITIES",
    "AdminCredential",
    "Album",
    "ConfigResult",
    "Exif",
    "LoginResult",
    "MissingFile",
    "Photo",
    "PortfolioConfig",
    "Principal",
    "ReconcileReport",
    "Session",
    "SiteConfig",
    "SiteInfo",
    "StorageBreakdown",
    "StorageConfig",
    "StorageStats",
    "StorageWarning",
    "StoredImage",
    "UploadPhotosResult",
]
