"""Unit tests for filmfolio.services.site_config_svc."""

import pytest

from filmfolio.helpers.exceptions import ValidationError
from filmfolio.persistence.db import Database
from filmfolio.services.album_svc import AlbumService
from filmfolio.services.site_config_svc import MAX_IMAGE_SIZE_MB_LIMIT, SiteConfigService, default_site_config


class TestGetConfig:
    @pytest.mark.unit
    def test_defaults_when_absent(self, site_config_service: SiteConfigService, db: Database) -> None:
        config = site_config_service.get_config()

        assert config == default_site_config()
        assert config.storage.max_disk_usage_percent == 80
        assert not db.store.exists("site_config")


class TestUpdateConfig:
    @pytest.mark.unit
    def test_deep_merge_keeps_siblings(self, site_config_service: SiteConfigService) -> None:
        updated = site_config_service.update_config({"site": {"tagline": "Light on water"}})

        assert updated.site.tagline == "Light on water"
        assert updated.site.title == "My Photography Portfolio"
        assert updated.branding["theme"]["mode"] == "system"
        assert updated.last_updated == "2024-05-01T12:00:00Z"

    @pytest.mark.unit
    def test_persists(self, site_config_service: SiteConfigService, db: Database) -> None:
        site_config_service.update_config({"social": {"instagram": "@shore"}})

        stored = db.site_config.load()
        assert stored is not None
        assert stored.social == {"instagram": "@shore"}

    @pytest.mark.unit
    def test_version_and_last_updated_are_service_owned(self, site_config_service: SiteConfigService) -> None:
        updated = site_config_service.update_config({"version": "9.9.9", "last_updated": "yesterday"})

        assert updated.version == "1.0.0"
        assert updated.last_updated == "2024-05-01T12:00:00Z"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "changes",
        [
            {"site": {"title": ""}},
            {"site": {"language": ""}},
            {"storage": {"max_disk_usage_percent": 0}},
            {"storage": {"max_disk_usage_percent": 101}},
            {"storage": {"max_image_size_mb": MAX_IMAGE_SIZE_MB_LIMIT + 1}},
            {"storage": {"max_image_size_mb": "big"}},
            {"portfolio": {"main_album_id": "ghost"}},
        ],
    )
    def test_invalid_changes_write_nothing(
        self, site_config_service: SiteConfigService, db: Database, changes: dict
    ) -> None:
        with pytest.raises(ValidationError):
            site_config_service.update_config(changes)
        assert not db.store.exists("site_config")


class TestMainPortfolioAlbum:
    @pytest.mark.unit
    def test_set_existing_album(self, site_config_service: SiteConfigService, album_service: AlbumService) -> None:
        album = album_service.create_album("Coastline")

        config = site_config_service.set_main_portfolio_album(album.id)

        assert config.portfolio.main_album_id == album.id

    @pytest.mark.unit
    def test_set_unknown_album(self, site_config_service: SiteConfigService) -> None:
        with pytest.raises(ValidationError):
            site_config_service.set_main_portfolio_album("ghost")

    @pytest.mark.unit
    def test_clear_with_empty(self, site_config_service: SiteConfigService, album_service: AlbumService) -> None:
        album = album_service.create_album("Coastline")
        site_config_service.set_main_portfolio_album(album.id)

        assert site_config_service.set_main_portfolio_album("").portfolio.main_album_id == ""

    @pytest.mark.unit
    def test_clear_if_matches(self, site_config_service: SiteConfigService, album_service: AlbumService) -> None:
        album = album_service.create_album("Coastline")
        site_config_service.set_main_portfolio_album(album.id)

        assert site_config_service.clear_main_portfolio_album_if("other") is False
        assert site_config_service.clear_main_portfolio_album_if(album.id) is True
        assert site_config_service.get_config().portfolio.main_album_id == ""

    @pytest.mark.unit
    def test_clear_if_without_document_writes_nothing(
        self, site_config_service: SiteConfigService, db: Database
    ) -> None:
        assert site_config_service.clear_main_portfolio_album_if("A1") is False
        assert not db.store.exists("site_config")
