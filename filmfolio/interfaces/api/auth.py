"""
Authentication logic for the FastAPI application.
Thin wrapper around AuthService for FastAPI dependency injection.

A session token is accepted from the ``photoadmin_session`` cookie or an
``Authorization: Bearer`` header (cookie first).
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from filmfolio.helpers.dto.auth_dto import Principal
from filmfolio.interfaces.api.web.dependencies import get_auth_service
from filmfolio.services.auth_svc import AuthService
from filmfolio.services.config_svc import INTERNAL_SESSION_COOKIE

auth_scheme = HTTPBearer(auto_error=False)


def session_token(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
) -> str | None:
    """Raw session token from cookie or bearer header, if any."""
    cookie = request.cookies.get(INTERNAL_SESSION_COOKIE)
    if cookie:
        return cookie
    if creds is not None:
        return creds.credentials.strip() or None
    return None


def verify_session(
    token: str | None = Depends(session_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Principal:
    """Validate the session; UnauthenticatedError becomes a 401 via the app's handler."""
    return auth_service.validate(token)
