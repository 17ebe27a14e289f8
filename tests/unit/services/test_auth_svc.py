"""
Unit tests for filmfolio.services.auth_svc.

Time is driven by the FakeClock fixture; no test sleeps.
"""

import logging
import threading

import pytest

from filmfolio.helpers.dto.auth_dto import AdminCredential
from filmfolio.helpers.exceptions import (
    InvalidCredentialsError,
    StorageIOError,
    UnauthenticatedError,
    ValidationError,
)
from filmfolio.persistence.db import Database
from filmfolio.services.auth_svc import MAX_PASSWORD_BYTES, AuthService, SessionStore
from tests.conftest import TEST_ADMIN_PASSWORD, TEST_ADMIN_USERNAME, TEST_BCRYPT_ROUNDS, FakeClock


def _service(db: Database, ttl: float, clock: FakeClock) -> AuthService:
    service = AuthService(db, SessionStore(), ttl_seconds=ttl, bcrypt_rounds=TEST_BCRYPT_ROUNDS, clock=clock)
    service.set_credentials("admin", AuthService.hash_password("pw", rounds=TEST_BCRYPT_ROUNDS))
    return service


class TestPasswordHashing:
    @pytest.mark.unit
    def test_hash_is_bcrypt_with_salt(self) -> None:
        first = AuthService.hash_password("secret", rounds=TEST_BCRYPT_ROUNDS)
        second = AuthService.hash_password("secret", rounds=TEST_BCRYPT_ROUNDS)

        assert first.startswith("$2b$04$")
        assert first != second

    @pytest.mark.unit
    def test_verify(self) -> None:
        hashed = AuthService.hash_password("secret", rounds=TEST_BCRYPT_ROUNDS)
        assert AuthService.verify_password("secret", hashed) is True
        assert AuthService.verify_password("wrong", hashed) is False

    @pytest.mark.unit
    @pytest.mark.parametrize("stored", ["", "not-a-bcrypt-hash"])
    def test_verify_bad_hash_is_false(self, stored: str) -> None:
        assert AuthService.verify_password("secret", stored) is False

    @pytest.mark.unit
    def test_overlong_password_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AuthService.hash_password("x" * (MAX_PASSWORD_BYTES + 1), rounds=TEST_BCRYPT_ROUNDS)


class TestLoginValidateLogout:
    @pytest.mark.unit
    def test_login_then_validate(self, auth_service: AuthService) -> None:
        # Act
        result = auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)
        principal = auth_service.validate(result.token)

        # Assert
        assert principal.username == TEST_ADMIN_USERNAME
        assert principal.token == result.token
        assert result.expires_in == 3600
        assert len(result.token) >= 43

    @pytest.mark.unit
    def test_logout_invalidates(self, auth_service: AuthService) -> None:
        token = auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD).token

        auth_service.logout(token)

        with pytest.raises(UnauthenticatedError):
            auth_service.validate(token)

    @pytest.mark.unit
    def test_logout_is_idempotent(self, auth_service: AuthService) -> None:
        auth_service.logout("never-issued")
        auth_service.logout(None)

    @pytest.mark.unit
    @pytest.mark.parametrize(("username", "password"), [("admin", "wrong"), ("root", TEST_ADMIN_PASSWORD), ("", "")])
    def test_bad_credentials(self, auth_service: AuthService, username: str, password: str) -> None:
        with pytest.raises(InvalidCredentialsError):
            auth_service.login(username, password)
        assert auth_service.active_session_count() == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("token", [None, "", "unknown-token"])
    def test_validate_rejects_missing_or_unknown(self, auth_service: AuthService, token: str | None) -> None:
        with pytest.raises(UnauthenticatedError):
            auth_service.validate(token)

    @pytest.mark.unit
    def test_tokens_are_unique(self, auth_service: AuthService) -> None:
        tokens = {auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD).token for _ in range(5)}
        assert len(tokens) == 5


class TestExpiry:
    @pytest.mark.unit
    @pytest.mark.parametrize("ttl", [0, 1, 60, 86400])
    def test_expired_for_every_ttl(self, db: Database, ttl: float) -> None:
        """Any token past its TTL is rejected, including TTL 0."""
        clock = FakeClock()
        service = _service(db, ttl, clock)
        token = service.login("admin", "pw").token

        clock.advance(ttl)

        with pytest.raises(UnauthenticatedError, match="expired"):
            service.validate(token)
        assert service.active_session_count() == 0

    @pytest.mark.unit
    def test_valid_just_before_expiry(self, db: Database) -> None:
        clock = FakeClock()
        service = _service(db, 60, clock)
        token = service.login("admin", "pw").token

        clock.advance(59.999)

        assert service.validate(token).username == "admin"

    @pytest.mark.unit
    def test_validate_does_not_extend(self, db: Database) -> None:
        clock = FakeClock()
        service = _service(db, 60, clock)
        token = service.login("admin", "pw").token

        clock.advance(30)
        service.validate(token)
        clock.advance(30)

        with pytest.raises(UnauthenticatedError):
            service.validate(token)

    @pytest.mark.unit
    def test_negative_ttl_rejected(self, db: Database) -> None:
        with pytest.raises(ValueError):
            AuthService(db, SessionStore(), ttl_seconds=-1, bcrypt_rounds=TEST_BCRYPT_ROUNDS)

    @pytest.mark.unit
    def test_cleanup_expired_sessions(self, auth_service: AuthService, clock: FakeClock) -> None:
        auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)
        clock.advance(1800)
        fresh = auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD).token
        clock.advance(1800)

        removed = auth_service.cleanup_expired_sessions()

        assert removed == 1
        assert auth_service.active_session_count() == 1
        assert auth_service.validate(fresh).username == TEST_ADMIN_USERNAME


class TestChangePassword:
    @pytest.mark.unit
    def test_revokes_other_sessions(self, auth_service: AuthService, db: Database) -> None:
        # Arrange
        initiating = auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD).token
        other = auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD).token

        # Act
        revoked = auth_service.change_password(TEST_ADMIN_PASSWORD, "new-password", keep_token=initiating)

        # Assert
        assert revoked == 1
        assert auth_service.validate(initiating).username == TEST_ADMIN_USERNAME
        with pytest.raises(UnauthenticatedError):
            auth_service.validate(other)

    @pytest.mark.unit
    def test_login_racing_rotation_gets_no_session(
        self, auth_service: AuthService, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A login that verified the old password while it was being rotated must not commit."""
        # Arrange - hold the login thread right after bcrypt accepts the old password
        verified = threading.Event()
        resume = threading.Event()
        real_verify = AuthService.verify_password

        def slow_verify(password: str, password_hash: str) -> bool:
            result = real_verify(password, password_hash)
            if threading.current_thread().name == "slow-login":
                verified.set()
                resume.wait(5)
            return result

        monkeypatch.setattr(auth_service, "verify_password", slow_verify)
        outcome: dict[str, object] = {}

        def attempt_login() -> None:
            try:
                outcome["token"] = auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD).token
            except InvalidCredentialsError as e:
                outcome["error"] = e

        login_thread = threading.Thread(target=attempt_login, name="slow-login")
        login_thread.start()
        assert verified.wait(5)

        # Act
        auth_service.change_password(TEST_ADMIN_PASSWORD, "rotated-password")
        resume.set()
        login_thread.join(5)

        # Assert
        assert not login_thread.is_alive()
        assert "token" not in outcome
        assert isinstance(outcome["error"], InvalidCredentialsError)
        assert auth_service.active_session_count() == 0

    @pytest.mark.unit
    def test_new_password_persisted_and_effective(self, auth_service: AuthService, db: Database) -> None:
        auth_service.change_password(TEST_ADMIN_PASSWORD, "new-password")

        stored = db.admin_config.load()
        assert stored is not None
        assert AuthService.verify_password("new-password", stored.password_hash)
        assert auth_service.login(TEST_ADMIN_USERNAME, "new-password").username == TEST_ADMIN_USERNAME
        with pytest.raises(InvalidCredentialsError):
            auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)

    @pytest.mark.unit
    def test_wrong_old_password(self, auth_service: AuthService, db: Database) -> None:
        with pytest.raises(InvalidCredentialsError):
            auth_service.change_password("wrong", "new-password")
        assert db.admin_config.load() is None

    @pytest.mark.unit
    def test_empty_new_password(self, auth_service: AuthService) -> None:
        with pytest.raises(ValidationError):
            auth_service.change_password(TEST_ADMIN_PASSWORD, "")

    @pytest.mark.unit
    def test_persist_failure_keeps_old_password(
        self, auth_service: AuthService, db: Database, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """If admin_config cannot be written the old hash stays in effect."""
        token = auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD).token

        def failing_save(_credential: AdminCredential) -> None:
            raise StorageIOError("failed to write document 'admin_config'")

        monkeypatch.setattr(db.admin_config, "save", failing_save)

        with pytest.raises(StorageIOError):
            auth_service.change_password(TEST_ADMIN_PASSWORD, "new-password")

        assert auth_service.validate(token).username == TEST_ADMIN_USERNAME
        assert auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD).token


class TestBootstrapCredentials:
    @pytest.mark.unit
    def test_env_password_wins_and_is_not_persisted(self, db: Database) -> None:
        db.admin_config.save(
            AdminCredential("admin", AuthService.hash_password("from-file", rounds=TEST_BCRYPT_ROUNDS))
        )
        service = AuthService(db, SessionStore(), bcrypt_rounds=TEST_BCRYPT_ROUNDS)

        generated = service.bootstrap_credentials(password="from-env")

        assert generated == ""
        assert service.login("admin", "from-env").username == "admin"
        with pytest.raises(InvalidCredentialsError):
            service.login("admin", "from-file")
        stored = db.admin_config.load()
        assert stored is not None
        assert AuthService.verify_password("from-file", stored.password_hash)

    @pytest.mark.unit
    def test_persisted_hash_used(self, db: Database) -> None:
        db.admin_config.save(
            AdminCredential("curator", AuthService.hash_password("from-file", rounds=TEST_BCRYPT_ROUNDS))
        )
        service = AuthService(db, SessionStore(), bcrypt_rounds=TEST_BCRYPT_ROUNDS)

        service.bootstrap_credentials()

        assert service.username == "curator"
        assert service.login("curator", "from-file").username == "curator"

    @pytest.mark.unit
    def test_generates_and_persists_when_nothing_configured(
        self, db: Database, caplog: pytest.LogCaptureFixture
    ) -> None:
        service = AuthService(db, SessionStore(), bcrypt_rounds=TEST_BCRYPT_ROUNDS)

        with caplog.at_level(logging.WARNING):
            generated = service.bootstrap_credentials()

        assert generated
        assert generated in caplog.text
        stored = db.admin_config.load()
        assert stored is not None
        assert stored.username == "admin"
        assert service.login("admin", generated).username == "admin"

    @pytest.mark.unit
    def test_username_override(self, db: Database) -> None:
        service = AuthService(db, SessionStore(), bcrypt_rounds=TEST_BCRYPT_ROUNDS)
        service.bootstrap_credentials(username="editor", password="pw")
        assert service.login("editor", "pw").username == "editor"


class TestSessionStore:
    @pytest.mark.unit
    def test_stores_are_independent(self, db: Database) -> None:
        """Two services never see each other's sessions."""
        first = _service(db, 60, FakeClock())
        second = _service(db, 60, FakeClock())

        token = first.login("admin", "pw").token

        with pytest.raises(UnauthenticatedError):
            second.validate(token)

    @pytest.mark.unit
    def test_revoke_all_sessions(self, auth_service: AuthService) -> None:
        keep = auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD).token
        auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)
        auth_service.login(TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)

        assert auth_service.revoke_all_sessions(keep_token=keep) == 2
        assert auth_service.active_session_count() == 1
