"""Session authentication service.

Gatekeeper for every mutating admin operation:
- Admin credential (username + bcrypt hash) held in memory, persisted in
  the ``admin_config`` document
- Opaque session tokens with a fixed TTL, kept only in process memory
- Password rotation that revokes every other session of the user

Architecture Notes:
- Sessions live in an injected SessionStore owned by the Application; this
  module holds no session state of its own.
- Expiry is enforced by validate(); cleanup_expired_sessions() only frees
  memory and is driven by SessionSweeperService.
- ``clock`` is injectable so tests can move time without sleeping.
"""

from __future__ import annotations

import hmac
import logging
import secrets
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

import bcrypt

from filmfolio.helpers.dto.auth_dto import AdminCredential, LoginResult, Principal, Session
from filmfolio.helpers.exceptions import InvalidCredentialsError, UnauthenticatedError, ValidationError
from filmfolio.helpers.time_helper import now_s

if TYPE_CHECKING:
    from filmfolio.persistence.db import Database

logger = logging.getLogger(__name__)

SESSION_TIMEOUT_SECONDS = 86400
DEFAULT_BCRYPT_ROUNDS = 12
# bcrypt ignores (or rejects) anything past 72 bytes
MAX_PASSWORD_BYTES = 72


def _wall_clock() -> float:
    return now_s().value


class SessionStore:
    """Thread-safe token -> Session mapping.

    Constructed by the Application and injected into AuthService so tests
    and multiple app instances never share sessions.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def add(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.token] = session

    def get(self, token: str) -> Session | None:
        with self._lock:
            return self._sessions.get(token)

    def remove(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def remove_where(self, predicate: Callable[[Session], bool]) -> int:
        """Remove every session matching predicate; returns how many were removed."""
        with self._lock:
            doomed = [token for token, session in self._sessions.items() if predicate(session)]
            for token in doomed:
                del self._sessions[token]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class AuthService:
    """Login, session validation, logout and password rotation.

    This service requires Database and SessionStore injection at construction
    time. Interfaces get the singleton from Application.services["auth"].
    """

    def __init__(
        self,
        db: Database,
        sessions: SessionStore,
        ttl_seconds: float = SESSION_TIMEOUT_SECONDS,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Args:
            db: Database facade (admin_config document)
            sessions: Session registry shared with the sweeper
            ttl_seconds: Session lifetime; 0 means tokens are born expired
            bcrypt_rounds: Cost factor for new hashes
            clock: Returns wall-clock seconds; defaults to time.time()

        Raises:
            ValueError: Negative TTL
        """
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self._db = db
        self._sessions = sessions
        self._ttl = ttl_seconds
        self._rounds = bcrypt_rounds
        self._clock = clock or _wall_clock

        self._username = ""
        self._password_hash = ""
        # Serializes credential changes; never held while bcrypt runs for login
        self._credential_lock = threading.Lock()
        # Bumped on every credential change; a login only commits its session
        # if the credential it verified against is still current
        self._credential_generation = 0
        # Compared against when the username is unknown so both paths cost the same
        self._dummy_hash = self.hash_password(secrets.token_urlsafe(16), rounds=bcrypt_rounds)

    # ------------------------------------------------------------------
    # Hashing
    # ------------------------------------------------------------------

    @staticmethod
    def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
        """Hash a password using bcrypt (salt embedded in the result).

        Raises:
            ValidationError: Password longer than bcrypt accepts
        """
        pwd_bytes = password.encode("utf-8")
        if len(pwd_bytes) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(pwd_bytes, salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """Constant-time check of a password against a stored bcrypt hash."""
        if not password_hash:
            return False
        try:
            return bool(bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8")))
        except ValueError:
            # Malformed hash or over-long password
            return False

    # ------------------------------------------------------------------
    # Credential bootstrap
    # ------------------------------------------------------------------

    @property
    def username(self) -> str:
        return self._username

    def set_credentials(self, username: str, password_hash: str) -> None:
        """Install credentials in memory without persisting them."""
        with self._credential_lock:
            self._username = username
            self._password_hash = password_hash
            self._credential_generation += 1

    def bootstrap_credentials(self, username: str | None = None, password: str | None = None) -> str:
        """Resolve the admin credential at startup.

        Precedence for the password:
        1. ``password`` (ADMIN_PASSWORD): hashed in memory only, never written
        2. The hash persisted in admin_config
        3. A random password, whose hash is persisted and plaintext logged once

        ``username`` (ADMIN_USERNAME) overrides the persisted username.

        Returns:
            The generated plaintext password, or "" when none was generated

        Raises:
            StorageIOError: admin_config unreadable or not writable
        """
        stored = self._db.admin_config.load()
        effective_username = username or (stored.username if stored else "") or "admin"

        if password:
            self.set_credentials(effective_username, self.hash_password(password, rounds=self._rounds))
            logger.info("[Auth] Admin password taken from environment (not persisted)")
            return ""

        if stored and stored.password_hash:
            self.set_credentials(effective_username, stored.password_hash)
            logger.info(f"[Auth] Loaded admin credential for user={effective_username}")
            return ""

        generated = secrets.token_urlsafe(16)
        credential = AdminCredential(
            username=effective_username,
            password_hash=self.hash_password(generated, rounds=self._rounds),
        )
        self._db.admin_config.save(credential)
        self.set_credentials(credential.username, credential.password_hash)
        logger.warning("[Auth] ========================================")
        logger.warning("[Auth] AUTO-GENERATED ADMIN PASSWORD:")
        logger.warning(f"[Auth]   {generated}")
        logger.warning("[Auth] ========================================")
        logger.warning("[Auth] Save this password - it won't be shown again!")
        return generated

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def _check_credentials(self, username: str, password: str) -> tuple[bool, int]:
        """Verify outside the lock; returns (ok, generation the check ran against)."""
        with self._credential_lock:
            expected_username = self._username
            password_hash = self._password_hash
            generation = self._credential_generation
        username_ok = hmac.compare_digest(username.encode("utf-8"), expected_username.encode("utf-8"))
        if not username_ok or not password_hash:
            self.verify_password(password, self._dummy_hash)
            return False, generation
        return self.verify_password(password, password_hash), generation

    def login(self, username: str, password: str) -> LoginResult:
        """Verify credentials and mint a session.

        Raises:
            InvalidCredentialsError: Unknown user or wrong password
        """
        ok, generation = self._check_credentials(username, password)
        if not ok:
            logger.warning("[Auth] Login failed: invalid credentials")
            raise InvalidCredentialsError("invalid credentials")

        created = self._clock()
        session = Session(
            token=secrets.token_urlsafe(32),
            username=username,
            created_at=created,
            expires_at=created + self._ttl,
        )
        with self._credential_lock:
            if generation != self._credential_generation:
                logger.warning("[Auth] Login rejected: credential changed while verifying")
                raise InvalidCredentialsError("invalid credentials")
            self._sessions.add(session)
        logger.info(f"[Auth] Created new session (expires in {int(self._ttl)}s)")
        return LoginResult(
            token=session.token,
            username=session.username,
            expires_at=session.expires_at,
            expires_in=int(self._ttl),
        )

    def validate(self, token: str | None) -> Principal:
        """Resolve a token to its principal.

        Expired sessions are evicted on the way out. Validation never
        extends a session.

        Raises:
            UnauthenticatedError: Missing, unknown, expired or revoked token
        """
        if not token:
            raise UnauthenticatedError("authentication required")
        session = self._sessions.get(token)
        if session is None:
            raise UnauthenticatedError("invalid session")
        if session.is_expired(self._clock()):
            self._sessions.remove(token)
            raise UnauthenticatedError("session expired")
        return Principal(username=session.username, token=session.token, expires_at=session.expires_at)

    def logout(self, token: str | None) -> None:
        """Revoke a session. Unknown tokens are ignored."""
        if token and self._sessions.remove(token):
            logger.info("[Auth] Session invalidated (logout)")

    def revoke_all_sessions(self, username: str | None = None, keep_token: str | None = None) -> int:
        """Revoke every session (of ``username`` if given) except ``keep_token``."""
        removed = self._sessions.remove_where(
            lambda s: (username is None or s.username == username) and s.token != keep_token
        )
        if removed:
            logger.info(f"[Auth] Revoked {removed} session(s)")
        return removed

    def cleanup_expired_sessions(self) -> int:
        """Drop expired sessions from memory. Returns the number removed."""
        now = self._clock()
        removed = self._sessions.remove_where(lambda s: s.is_expired(now))
        if removed:
            logger.info(f"[Auth] Cleaned up {removed} expired session(s)")
        return removed

    def active_session_count(self) -> int:
        return len(self._sessions)

    # ------------------------------------------------------------------
    # Password rotation
    # ------------------------------------------------------------------

    def change_password(self, old_password: str, new_password: str, keep_token: str | None = None) -> int:
        """Rotate the admin password.

        The new hash is persisted before it replaces the in-memory one, so a
        failed write leaves the old password fully in effect. Afterwards every
        session of the user except ``keep_token`` is revoked.

        Returns:
            Number of sessions revoked

        Raises:
            InvalidCredentialsError: old_password does not verify
            ValidationError: new_password empty or too long
            StorageIOError: admin_config could not be written
        """
        if not new_password:
            raise ValidationError("new password must not be empty")

        with self._credential_lock:
            if not self.verify_password(old_password, self._password_hash):
                logger.warning("[Auth] Password change rejected: invalid current password")
                raise InvalidCredentialsError("invalid current password")

            new_hash = self.hash_password(new_password, rounds=self._rounds)
            self._db.admin_config.save(AdminCredential(username=self._username, password_hash=new_hash))
            self._password_hash = new_hash
            self._credential_generation += 1
            # Under the lock so no login verified against the old hash can commit afterwards
            revoked = self.revoke_all_sessions(username=self._username, keep_token=keep_token)

        logger.warning(f"[Auth] Admin password changed - {revoked} other session(s) invalidated")
        return revoked
