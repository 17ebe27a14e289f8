"""
Combined router for all web endpoints.

This module aggregates the public and admin routers into a single router
that can be included in the main FastAPI app.
"""

from fastapi import APIRouter

from filmfolio.interfaces.api.web import albums_if, auth_if, config_if, storage_if

# Create combined router
router = APIRouter()

router.include_router(auth_if.router)
router.include_router(albums_if.public_router)
router.include_router(albums_if.router)
router.include_router(config_if.public_router)
router.include_router(config_if.router)
router.include_router(storage_if.router)
router.include_router(storage_if.uploads_router)
