"""Auth API types - Pydantic models for login, logout and password rotation."""

from __future__ import annotations

from pydantic import BaseModel, Field

# ──────────────────────────────────────────────────────────────────────
# Request Models
# ──────────────────────────────────────────────────────────────────────


class LoginRequest(BaseModel):
    username: str
    password: str


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=1)


# ──────────────────────────────────────────────────────────────────────
# Response Models
# ──────────────────────────────────────────────────────────────────────


class LoginResponse(BaseModel):
    token: str
    username: str
    expires_in: int  # seconds


class AuthCheckResponse(BaseModel):
    authenticated: bool
    username: str


class MessageResponse(BaseModel):
    message: str


class ChangePasswordResponse(BaseModel):
    message: str
    revoked_sessions: int
