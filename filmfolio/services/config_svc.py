# ======================================================================
#  Config Service - Configuration loading and caching
#  - Loads config from defaults, YAML files and environment variables
#  - Caches composed config for performance
#  - Provides reload() for runtime changes
# ======================================================================

from __future__ import annotations

import logging
import os
from typing import Any

import yaml

from filmfolio.__version__ import __version__
from filmfolio.helpers.dto.config_dto import ConfigResult

# ======================================================================
# Internal Constants (Not User-Configurable)
# ======================================================================
# Operational parameters that are not exposed in config.yaml or the
# environment.

INTERNAL_SESSION_COOKIE = "photoadmin_session"
INTERNAL_UPLOAD_URL_PREFIX = "/uploads"
INTERNAL_RESERVED_DISK_PERCENT = 5
INTERNAL_WARNING_MARGIN_PERCENT = 10  # warn at max_disk_usage_percent - 10
INTERNAL_MAX_UPLOAD_BYTES = 100 * 1024 * 1024
INTERNAL_ORPHAN_GRACE_SECONDS = 3600  # cleanup never deletes files younger than this
INTERNAL_DISPLAY_MAX_PX = 3840
INTERNAL_DISPLAY_QUALITY = 85
INTERNAL_THUMBNAIL_MAX_PX = 800
INTERNAL_THUMBNAIL_QUALITY = 80

# Keys accepted from YAML and environment
ALLOWED_KEYS = {
    "data_dir",
    "upload_dir",
    "admin_username",
    "admin_password",
    "session_ttl_seconds",
    "session_sweep_interval",
    "host",
    "port",
    "bcrypt_rounds",
    "log_level",
}

# Never type-coerced (a numeric password stays a string)
STRING_KEYS = {"data_dir", "upload_dir", "admin_username", "admin_password", "host", "log_level"}

# Bare environment names honoured in addition to FILMFOLIO_<KEY>
BARE_ENV_KEYS = {
    "DATA_DIR": "data_dir",
    "UPLOAD_DIR": "upload_dir",
    "ADMIN_USERNAME": "admin_username",
    "ADMIN_PASSWORD": "admin_password",
    "PORT": "port",
}


class ConfigService:
    """
    Service for loading and caching application configuration.

    Loads config from multiple sources (defaults -> YAML -> overrides -> env),
    caches the result, and provides reload capability.
    """

    def __init__(self, overrides: dict[str, Any] | None = None) -> None:
        """
        Args:
            overrides: Values applied after YAML but before environment variables
        """
        self._config: dict[str, Any] | None = None
        self._overrides = dict(overrides or {})
        self._logger = logging.getLogger(__name__)

    def get_config(self, force_reload: bool = False) -> ConfigResult:
        """
        Get the composed configuration.

        Args:
            force_reload: If True, bypass cache and reload from sources
        """
        if self._config is None or force_reload:
            self._config = self._compose()
        return ConfigResult(config=self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value.

        Example:
            >>> service.get("port")
            3001
        """
        return self.get_config().config.get(key, default)

    def reload(self) -> ConfigResult:
        """Force reload configuration from all sources."""
        self._logger.info("[ConfigService] Reloading configuration from all sources")
        return self.get_config(force_reload=True)

    @property
    def version(self) -> str:
        return __version__

    # ----------------------------------------------------------------------
    # Private composition logic
    # ----------------------------------------------------------------------

    def _compose(self) -> dict[str, Any]:
        """
        Load final configuration from:
          1) Built-in defaults
          2) /etc/filmfolio/config.yaml (if present)
          3) ./config/config.yaml
          4) $CONFIG_PATH (if set)
          5) overrides passed to the constructor
          6) Environment variables (FILMFOLIO_* and the bare names)
        """
        cfg = self._default_config()

        self._deep_merge(cfg, self._load_yaml("/etc/filmfolio/config.yaml"))
        self._deep_merge(cfg, self._load_yaml(os.path.join(os.getcwd(), "config", "config.yaml")))

        env_path = os.getenv("CONFIG_PATH")
        if env_path:
            self._deep_merge(cfg, self._load_yaml(env_path))

        if self._overrides:
            self._deep_merge(cfg, self._overrides)

        self._apply_env_overrides(cfg)

        self._logger.debug(f"[ConfigService] Composed config keys: {sorted(cfg)}")
        return cfg

    def _default_config(self) -> dict[str, Any]:
        """Base defaults for user-configurable settings only."""
        return {
            # Filesystem paths
            "data_dir": "./data",
            "upload_dir": "./uploads",
            # Admin account (password auto-generated if unset and nothing persisted)
            "admin_username": "admin",
            "admin_password": None,
            # Sessions
            "session_ttl_seconds": 86400,
            "session_sweep_interval": 3600,
            # HTTP
            "host": "0.0.0.0",
            "port": 3001,
            # bcrypt cost factor
            "bcrypt_rounds": 12,
            "log_level": "INFO",
        }

    def _deep_merge(self, a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
        """
        Recursively merge dict b into dict a (mutates a, returns it).
        """
        for k, v in b.items():
            if isinstance(v, dict) and isinstance(a.get(k), dict):
                self._deep_merge(a[k], v)
            else:
                a[k] = v
        return a

    def _load_yaml(self, path: str) -> dict[str, Any]:
        """
        Load a YAML file; returns {} if not found or invalid.
        """
        if not path or not os.path.exists(path):
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self._logger.warning(f"[ConfigService] Ignoring unreadable config file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            self._logger.warning(f"[ConfigService] Ignoring config file {path}: top level is not a mapping")
            return {}
        unknown = set(data) - ALLOWED_KEYS
        if unknown:
            self._logger.debug(f"[ConfigService] Ignoring unknown keys in {path}: {sorted(unknown)}")
        return {k: v for k, v in data.items() if k in ALLOWED_KEYS}

    def _apply_env_overrides(self, cfg: dict[str, Any]) -> None:
        """
        Support environment overrides for user-configurable keys only.

        Supported formats:
          FILMFOLIO_DATA_DIR=/srv/data
          FILMFOLIO_SESSION_TTL_SECONDS=3600
          DATA_DIR=/srv/data
          ADMIN_PASSWORD=secretpass
          PORT=8080

        FILMFOLIO_* wins over the bare name when both are set.
        """
        bare = {BARE_ENV_KEYS[k]: v for k, v in os.environ.items() if k in BARE_ENV_KEYS}
        prefixed = {
            k[len("FILMFOLIO_") :].lower(): v for k, v in os.environ.items() if k.startswith("FILMFOLIO_")
        }

        for key, raw in {**bare, **prefixed}.items():
            if key not in ALLOWED_KEYS:
                self._logger.debug(f"[ConfigService] Ignoring environment override for internal key: {key}")
                continue
            cfg[key] = raw if key in STRING_KEYS else self._parse_value(raw)

    @staticmethod
    def _parse_value(value: str) -> Any:
        """Parse typed values from environment strings."""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"
        if value.isdigit():
            return int(value)
        if value.replace(".", "", 1).replace("-", "", 1).isdigit():
            return float(value)
        return value
