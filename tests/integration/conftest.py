"""Common fixtures for integration tests."""

from typing import Dict

import pytest
from fastapi.testclient import TestClient

import mediahub.infrastructure.database.session as session_module
from mediahub.api.dependencies import get_media_storage
from mediahub.config import get_settings
from mediahub.core.domain.entities import MediaAsset
from mediahub.core.exceptions import UpstreamFailureException
from mediahub.core.services.interfaces import MediaStorageInterface

API = "/api/v1"
PASSWORD = "password123"


class FakeMediaStorage(MediaStorageInterface):
    """In-memory media store recording uploads and deletions."""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}
        self.deleted = []
        self.fail_uploads = False
        self._counter = 0

    async def upload(self, filename: str, content: bytes) -> MediaAsset:
        if self.fail_uploads:
            raise UpstreamFailureException("Media storage", "unavailable")
        self._counter += 1
        url = f"/media/{self._counter}-{filename}"
        self.files[url] = content
        return MediaAsset(url=url, duration_seconds=12.5)

    async def delete(self, url: str) -> bool:
        self.deleted.append(url)
        return self.files.pop(url, None) is not None


@pytest.fixture
def media_storage():
    """Fake media storage shared by all requests of a test."""
    return FakeMediaStorage()


@pytest.fixture
def client(tmp_path, monkeypatch, media_storage):
    """Test client backed by a fresh SQLite database file per test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("MEDIA_ROOT", str(tmp_path / "media"))
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("COOKIE_SECURE", "false")
    get_settings.cache_clear()
    monkeypatch.setattr(session_module, "_engine", None)
    monkeypatch.setattr(session_module, "_async_session_maker", None)

    from tests.integration.test_app import create_test_app

    app = create_test_app()
    app.dependency_overrides[get_media_storage] = lambda: media_storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    get_settings.cache_clear()


class ApiHelper:
    """Shortcuts for the requests most tests start with."""

    def __init__(self, client: TestClient) -> None:
        self.client = client

    def register(self, username: str, password: str = PASSWORD) -> dict:
        response = self.client.post(
            f"{API}/auth/register",
            data={
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
                "full_name": username.capitalize(),
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    def login(self, username: str, password: str = PASSWORD) -> dict:
        """Log in and return the token body; cookies are dropped so requests stay explicit."""
        response = self.client.post(
            f"{API}/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        self.client.cookies.clear()
        return response.json()

    @staticmethod
    def bearer(tokens: dict) -> dict:
        return {"Authorization": f"Bearer {tokens['access_token']}"}

    def publish_video(self, headers: dict, title: str = "Sunset") -> dict:
        response = self.client.post(
            f"{API}/videos",
            data={"title": title, "description": f"{title} description"},
            files={
                "video_file": ("clip.mp4", b"video-bytes", "video/mp4"),
                "thumbnail": ("thumb.png", b"png-bytes", "image/png"),
            },
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()


@pytest.fixture
def api(client):
    """Request helpers bound to the test client."""
    return ApiHelper(client)


@pytest.fixture
def alice(api):
    """Registered and logged-in account alice."""
    account = api.register("alice")
    return {"account": account, "headers": api.bearer(api.login("alice"))}


@pytest.fixture
def bob(api):
    """Registered and logged-in account bob."""
    account = api.register("bob")
    return {"account": account, "headers": api.bearer(api.login("bob"))}
