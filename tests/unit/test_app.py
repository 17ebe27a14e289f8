"""Unit tests for filmfolio.app.Application lifecycle."""

from pathlib import Path

import pytest

from filmfolio.app import Application
from filmfolio.services.config_svc import ConfigService
from tests.conftest import TEST_BCRYPT_ROUNDS


class TestApplicationLifecycle:
    @pytest.mark.unit
    def test_construction_touches_nothing(self, tmp_path: Path) -> None:
        config = ConfigService(overrides={"data_dir": str(tmp_path / "d"), "upload_dir": str(tmp_path / "u")})

        app = Application(config_service=config)

        assert not app.is_running()
        assert app.services == {}
        assert not (tmp_path / "d").exists()

    @pytest.mark.unit
    def test_start_registers_services(self, application: Application) -> None:
        application.start()

        assert application.is_running()
        assert set(application.services) == {"config", "auth", "albums", "site_config", "images", "storage"}
        assert application.generated_admin_password == ""

    @pytest.mark.unit
    def test_unknown_service(self, application: Application) -> None:
        with pytest.raises(KeyError, match="nope"):
            application.get_service("nope")

    @pytest.mark.unit
    def test_stop_is_idempotent_and_drops_sessions(self, application: Application) -> None:
        application.start()
        application.get_service("auth").login(application.admin_username, "correct horse battery staple")

        application.stop()
        application.stop()

        assert not application.is_running()
        assert len(application.sessions) == 0

    @pytest.mark.unit
    def test_generates_password_once(self, tmp_path: Path) -> None:
        # Arrange - no admin password configured anywhere
        overrides = {
            "data_dir": str(tmp_path / "d"),
            "upload_dir": str(tmp_path / "u"),
            "bcrypt_rounds": TEST_BCRYPT_ROUNDS,
        }
        first = Application(config_service=ConfigService(overrides=overrides))

        # Act
        first.start()
        first.stop()
        second = Application(config_service=ConfigService(overrides=overrides))
        second.start()
        second.stop()

        # Assert - the persisted hash is reused on restart
        assert first.generated_admin_password
        assert second.generated_admin_password == ""
        assert (tmp_path / "d" / "admin_config.json").exists()
