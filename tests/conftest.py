"""
Pytest fixtures and configuration for the test suite.

Strategy:
- Real dependencies only (bcrypt, Pillow, FastAPI); nothing is mocked
- Every test gets its own data and upload directories under tmp_path
- bcrypt runs at the minimum cost factor so hashing stays fast
- Time-dependent code receives a FakeClock instead of sleeping
"""

import io
import os
import sys
from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from PIL import Image

# Add project root to path so tests can import the filmfolio package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from filmfolio.app import Application  # noqa: E402
from filmfolio.persistence.db import Database  # noqa: E402
from filmfolio.services.album_svc import AlbumService  # noqa: E402
from filmfolio.services.auth_svc import AuthService, SessionStore  # noqa: E402
from filmfolio.services.config_svc import BARE_ENV_KEYS, ConfigService  # noqa: E402
from filmfolio.services.image_svc import ImageService  # noqa: E402
from filmfolio.services.site_config_svc import SiteConfigService  # noqa: E402
from filmfolio.services.storage_svc import StorageService  # noqa: E402

TEST_BCRYPT_ROUNDS = 4
TEST_ADMIN_USERNAME = "admin"
TEST_ADMIN_PASSWORD = "correct horse battery staple"


# === TIME ===


class FakeClock:
    """Manually advanced wall clock (seconds since epoch)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUtcClock:
    """Manually advanced datetime clock for document timestamps."""

    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class SequenceIds:
    """ID factory yielding a fixed sequence, then falling back to a counter."""

    def __init__(self, *ids: str, prefix: str = "id") -> None:
        self._ids = list(ids)
        self._counter = 0
        self._prefix = prefix

    def __call__(self) -> str:
        if self._ids:
            return self._ids.pop(0)
        self._counter += 1
        return f"{self._prefix}{self._counter}"


def backdate(path: Path, seconds: float = 2 * 3600) -> Path:
    """Move a file's mtime into the past (older than the orphan grace period)."""
    stamp = path.stat().st_mtime - seconds
    os.utime(path, (stamp, stamp))
    return path


# === ENVIRONMENT ===


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer environment variables and config files out of every test."""
    for key in list(os.environ):
        if key.startswith("FILMFOLIO_") or key in BARE_ENV_KEYS or key == "CONFIG_PATH":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


# === DIRECTORIES ===


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


# === PERSISTENCE ===


@pytest.fixture
def db(data_dir: Path) -> Database:
    """Real document database in a temp directory."""
    return Database(data_dir)


# === SERVICES ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def utc_clock() -> FakeUtcClock:
    return FakeUtcClock()


@pytest.fixture
def sessions() -> SessionStore:
    return SessionStore()


@pytest.fixture
def auth_service(db: Database, sessions: SessionStore, clock: FakeClock) -> AuthService:
    """AuthService with a known admin credential and a one hour TTL."""
    service = AuthService(db, sessions, ttl_seconds=3600, bcrypt_rounds=TEST_BCRYPT_ROUNDS, clock=clock)
    service.set_credentials(
        TEST_ADMIN_USERNAME,
        AuthService.hash_password(TEST_ADMIN_PASSWORD, rounds=TEST_BCRYPT_ROUNDS),
    )
    return service


@pytest.fixture
def album_service(db: Database, utc_clock: FakeUtcClock) -> AlbumService:
    return AlbumService(db, bcrypt_rounds=TEST_BCRYPT_ROUNDS, clock=utc_clock)


@pytest.fixture
def site_config_service(db: Database, utc_clock: FakeUtcClock) -> SiteConfigService:
    return SiteConfigService(db, clock=utc_clock)


@pytest.fixture
def image_service(upload_dir: Path) -> ImageService:
    return ImageService(upload_dir)


@pytest.fixture
def storage_service(db: Database, upload_dir: Path, site_config_service: SiteConfigService) -> StorageService:
    return StorageService(db, upload_dir, site_config_service)


# === IMAGES ===


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory for small in-memory images: make_image("JPEG", (64, 48))."""

    def _make(image_format: str = "JPEG", size: tuple[int, int] = (64, 48), color: str = "steelblue") -> bytes:
        mode = "RGBA" if image_format == "PNG" else "RGB"
        image = Image.new(mode, size, color)
        buf = io.BytesIO()
        image.save(buf, format=image_format)
        return buf.getvalue()

    return _make


@pytest.fixture
def jpeg_bytes(make_image: Callable[..., bytes]) -> bytes:
    return make_image("JPEG", (640, 480))


# === APPLICATION ===


@pytest.fixture
def application(tmp_path: Path) -> Generator[Application, None, None]:
    """Fully wired Application over temp directories (not started)."""
    config = ConfigService(
        overrides={
            "data_dir": str(tmp_path / "app-data"),
            "upload_dir": str(tmp_path / "app-uploads"),
            "admin_username": TEST_ADMIN_USERNAME,
            "admin_password": TEST_ADMIN_PASSWORD,
            "bcrypt_rounds": TEST_BCRYPT_ROUNDS,
            "session_sweep_interval": 3600,
        }
    )
    app = Application(config_service=config)
    yield app
    app.stop()
