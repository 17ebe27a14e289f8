"""
FastAPI dependency injection helpers for web endpoints.

ARCHITECTURE:
- Endpoints should ONLY inject services, never Database or raw infrastructure
- Services encapsulate all business logic and data access
- Endpoints are thin presentation layers that call services and format responses

The Application is looked up on ``request.app.state`` so each FastAPI app
(including the ones tests build) talks to its own container.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Request

if TYPE_CHECKING:
    from filmfolio.app import Application
    from filmfolio.services.album_svc import AlbumService
    from filmfolio.services.auth_svc import AuthService
    from filmfolio.services.image_svc import ImageService
    from filmfolio.services.site_config_svc import SiteConfigService
    from filmfolio.services.storage_svc import StorageService


def get_application(request: Request) -> Application:
    """Application bound to this FastAPI instance."""
    application = getattr(request.app.state, "application", None)
    if application is None or not application.is_running():
        raise HTTPException(status_code=503, detail="Application not started")
    return application  # type: ignore[no-any-return]


def get_auth_service(application: Application = Depends(get_application)) -> AuthService:
    return application.get_service("auth")  # type: ignore[no-any-return]


def get_album_service(application: Application = Depends(get_application)) -> AlbumService:
    return application.get_service("albums")  # type: ignore[no-any-return]


def get_site_config_service(application: Application = Depends(get_application)) -> SiteConfigService:
    return application.get_service("site_config")  # type: ignore[no-any-return]


def get_image_service(application: Application = Depends(get_application)) -> ImageService:
    return application.get_service("images")  # type: ignore[no-any-return]


def get_storage_service(application: Application = Depends(get_application)) -> StorageService:
    return application.get_service("storage")  # type: ignore[no-any-return]
