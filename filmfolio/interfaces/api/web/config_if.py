"""Site configuration endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from filmfolio.interfaces.api.auth import verify_session
from filmfolio.interfaces.api.types.config_types import MainPortfolioAlbumRequest, SiteConfigUpdateRequest
from filmfolio.interfaces.api.web.dependencies import get_site_config_service
from filmfolio.services.site_config_svc import SiteConfigService

public_router = APIRouter(prefix="/api/config", tags=["Config"])
router = APIRouter(prefix="/api/admin/config", tags=["Config"], dependencies=[Depends(verify_session)])


@public_router.get("")
def get_config(site_config_service: SiteConfigService = Depends(get_site_config_service)) -> dict[str, Any]:
    return site_config_service.get_config().to_dict()


@router.put("")
def update_config(
    request: SiteConfigUpdateRequest,
    site_config_service: SiteConfigService = Depends(get_site_config_service),
) -> dict[str, Any]:
    """Merge the given sections into the stored configuration."""
    return site_config_service.update_config(request.changes()).to_dict()


@router.put("/main-portfolio-album")
def set_main_portfolio_album(
    request: MainPortfolioAlbumRequest,
    site_config_service: SiteConfigService = Depends(get_site_config_service),
) -> dict[str, Any]:
    return site_config_service.set_main_portfolio_album(request.album_id).to_dict()
