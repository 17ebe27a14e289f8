"""
Auth domain DTOs.

Sessions live only in process memory; AdminCredential is the persisted
``admin_config`` document.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Session:
    """In-memory session record keyed by its opaque token."""

    token: str
    username: str
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Expired once now reaches expires_at (a TTL of 0 is expired immediately)."""
        return now >= self.expires_at


@dataclass
class Principal:
    """Authenticated identity returned by a successful validation."""

    username: str
    token: str
    expires_at: float


@dataclass
class LoginResult:
    """Result from auth_service.login."""

    token: str
    username: str
    expires_at: float
    expires_in: int


@dataclass
class AdminCredential:
    """Singleton admin account stored in the admin_config document."""

    username: str
    password_hash: str

    def to_dict(self) -> dict[str, Any]:
        return {"username": self.username, "password_hash": self.password_hash}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AdminCredential:
        return cls(username=str(data.get("username") or ""), password_hash=str(data.get("password_hash") or ""))
