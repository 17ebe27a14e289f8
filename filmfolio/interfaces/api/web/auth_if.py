"""Authentication endpoints for the admin UI."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from filmfolio.helpers.dto.auth_dto import Principal
from filmfolio.interfaces.api.auth import session_token, verify_session
from filmfolio.interfaces.api.types.auth_types import (
    AuthCheckResponse,
    ChangePasswordRequest,
    ChangePasswordResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
)
from filmfolio.interfaces.api.web.dependencies import get_auth_service
from filmfolio.services.auth_svc import AuthService
from filmfolio.services.config_svc import INTERNAL_SESSION_COOKIE

router = APIRouter(prefix="/api/admin", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Authenticate and receive a session.

    The token is returned in the body and set as an HttpOnly cookie; either
    may be used on subsequent /api/admin requests.
    """
    result = auth_service.login(request.username, request.password)
    response.set_cookie(
        key=INTERNAL_SESSION_COOKIE,
        value=result.token,
        max_age=result.expires_in,
        httponly=True,
        samesite="strict",
        path="/",
    )
    logging.info(f"[Web API] Login user={result.username}")
    return LoginResponse(token=result.token, username=result.username, expires_in=result.expires_in)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    token: str | None = Depends(session_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Invalidate the current session. Always succeeds."""
    auth_service.logout(token)
    response.delete_cookie(INTERNAL_SESSION_COOKIE, path="/")
    return MessageResponse(message="Logged out successfully")


@router.get("/auth/check", response_model=AuthCheckResponse)
def auth_check(principal: Principal = Depends(verify_session)) -> AuthCheckResponse:
    return AuthCheckResponse(authenticated=True, username=principal.username)


@router.post("/change-password", response_model=ChangePasswordResponse)
def change_password(
    request: ChangePasswordRequest,
    principal: Principal = Depends(verify_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> ChangePasswordResponse:
    """Rotate the admin password; every other session is signed out."""
    revoked = auth_service.change_password(request.old_password, request.new_password, keep_token=principal.token)
    return ChangePasswordResponse(message="Password changed successfully", revoked_sessions=revoked)
