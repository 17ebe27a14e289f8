"""
Application composition root and dependency injection container.

This module defines the Application class, which serves as the DI container
and lifecycle manager for filmfolio. All services and background threads are
owned and initialized by the Application instance.

Architecture:
- Application owns: config, db, session store, services, session sweeper
- All configuration values are instance attributes (no module-level config globals)
- Services are registered via register_service() during start()
- Access services via: application.get_service("name") or application.services["name"]
- Do NOT construct services directly outside of this class

The singleton instance used by start.py is available as `application` at
module level. Constructing it only composes configuration; nothing touches
the disk until start().
"""

from __future__ import annotations

import logging
from typing import Any

from filmfolio.persistence.db import Database
from filmfolio.services.album_svc import AlbumService
from filmfolio.services.auth_svc import AuthService, SessionStore
from filmfolio.services.config_svc import INTERNAL_SESSION_COOKIE, ConfigService
from filmfolio.services.image_svc import ImageService
from filmfolio.services.infrastructure.session_sweeper_svc import SessionSweeperService
from filmfolio.services.site_config_svc import SiteConfigService
from filmfolio.services.storage_svc import StorageService


# ----------------------------------------------------------------------
#  Application Class - Composition Root & DI Container
# ----------------------------------------------------------------------
class Application:
    """
    Application composition root and dependency injection container.

    Configuration Access:
    - Raw config is PRIVATE (_config) and used only internally in Application
    - Outside app.py use application.get_service("config").get_config()
    - Prefer the instance attributes (data_dir, api_port, ...) over raw config
    """

    def __init__(self, config_service: ConfigService | None = None):
        """
        Initialize application with configuration only.

        Args:
            config_service: Pre-built ConfigService (tests pass overrides here)
        """
        config_service = config_service or ConfigService()
        self._config = config_service.get_config().config
        self._config_service = config_service

        # User-configurable settings
        self.data_dir: str = str(self._config["data_dir"])
        self.upload_dir: str = str(self._config["upload_dir"])
        self.admin_username: str = str(self._config.get("admin_username") or "")
        self.admin_password_config: str | None = self._config.get("admin_password") or None
        self.session_ttl_seconds: float = float(self._config.get("session_ttl_seconds", 86400))
        self.session_sweep_interval: float = float(self._config.get("session_sweep_interval", 3600))
        self.bcrypt_rounds: int = int(self._config.get("bcrypt_rounds", 12))
        self.api_host: str = str(self._config.get("host", "0.0.0.0"))
        self.api_port: int = int(self._config.get("port", 3001))
        self.log_level: str = str(self._config.get("log_level", "INFO")).upper()

        # Internal constants
        self.session_cookie_name: str = INTERNAL_SESSION_COOKIE

        # Core dependencies (created in start())
        self.db: Database | None = None
        self.sessions: SessionStore | None = None
        self.session_sweeper: SessionSweeperService | None = None

        # Services container (DI registry)
        self.services: dict[str, Any] = {}

        # Set when start() had to invent an admin password
        self.generated_admin_password: str = ""

        self._running = False

    def register_service(self, name: str, service: Any) -> None:
        """
        Register a service in the DI container.

        Args:
            name: Service name for lookup
            service: Service instance
        """
        self.services[name] = service

    def get_service(self, name: str) -> Any:
        """
        Get a service from the DI container.

        Raises:
            KeyError: If service not found
        """
        if name not in self.services:
            raise KeyError(f"Service '{name}' not found. Available services: {list(self.services.keys())}")
        return self.services[name]

    def start(self) -> None:
        """
        Build persistence and services, resolve admin credentials and start
        the session sweeper.

        Raises:
            StorageIOError: Data or upload directory unusable
        """
        if self._running:
            logging.warning("[Application] Already running")
            return

        logging.info(f"[Application] Starting (data_dir={self.data_dir} upload_dir={self.upload_dir})")

        self.db = Database(self.data_dir)
        # Only safe before any writer exists
        self.db.cleanup_stale_temp_files()

        self.sessions = SessionStore()
        self.register_service("config", self._config_service)

        auth_service = AuthService(
            self.db,
            self.sessions,
            ttl_seconds=self.session_ttl_seconds,
            bcrypt_rounds=self.bcrypt_rounds,
        )
        self.generated_admin_password = auth_service.bootstrap_credentials(
            username=self.admin_username or None,
            password=self.admin_password_config,
        )
        self.register_service("auth", auth_service)

        album_service = AlbumService(self.db, bcrypt_rounds=self.bcrypt_rounds)
        site_config_service = SiteConfigService(self.db)
        image_service = ImageService(self.upload_dir)
        storage_service = StorageService(self.db, self.upload_dir, site_config_service)

        self.register_service("albums", album_service)
        self.register_service("site_config", site_config_service)
        self.register_service("images", image_service)
        self.register_service("storage", storage_service)

        self.session_sweeper = SessionSweeperService(auth_service, interval_s=self.session_sweep_interval)
        self.session_sweeper.start()

        self._running = True
        logging.info("[Application] Started")

    def stop(self) -> None:
        """Stop background threads and drop all sessions."""
        if not self._running:
            return

        logging.info("[Application] Shutting down...")

        if self.session_sweeper:
            self.session_sweeper.stop()
            self.session_sweeper = None

        if self.sessions is not None:
            self.sessions.clear()

        self._running = False
        logging.info("[Application] Shutdown complete")

    def is_running(self) -> bool:
        """Check if application is running."""
        return self._running


# ----------------------------------------------------------------------
#  Singleton Instance
# ----------------------------------------------------------------------
application = Application()
