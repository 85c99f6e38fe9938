"""Shared fixtures and fakes for tourneyphotos tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from tourneyphotos.client.api import NotFoundError
from tourneyphotos.client.store import LocalPhotoStore
from tourneyphotos.client.sync import RateLimitGate, RequestPolicy
from tourneyphotos.core.config import StorageConfig

BASE_URL = "https://test.supabase.co"
API_KEY = "test-anon-key-123456"
BUCKET = "tournament-players"

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SOI = b"\xff\xd8\xff\xe0"


def png_bytes(size: int = 2048) -> bytes:
    """PNG-looking content of the given size."""
    return PNG_SIGNATURE + b"\x00" * (size - len(PNG_SIGNATURE))


def jpeg_bytes(size: int = 2048) -> bytes:
    """JPEG-looking content of the given size."""
    return JPEG_SOI + b"\x00" * (size - len(JPEG_SOI))


def html_page(size: int = 2048) -> bytes:
    """An HTML error body padded to the given size."""
    body = b"<!DOCTYPE html><html><body><h1>Access Denied</h1></body></html>"
    return body + b" " * (size - len(body))


def make_config(**overrides: Any) -> StorageConfig:
    """Create a StorageConfig for testing."""
    values: dict[str, Any] = {"url": BASE_URL, "api_key": API_KEY, "rate_limit_ms": 0}
    values.update(overrides)
    return StorageConfig(**values)


class FakeStorageClient:
    """In-memory stand-in for StorageClient.

    Objects are kept in a dict; calls are recorded for assertions.
    """

    def __init__(
        self,
        objects: dict[str, bytes] | None = None,
        listable: bool = True,
        config: StorageConfig | None = None,
    ) -> None:
        self.config = config or make_config()
        self.objects: dict[str, bytes] = dict(objects or {})
        self.listable = listable
        self.list_error: Exception | None = None
        self.upload_errors: dict[str, Exception] = {}
        self.uploads: list[str] = []
        self.downloads: list[tuple[str, bool, bool]] = []
        self.closed = False

    def list_objects(
        self, prefix: str = "", limit: int = 1000, offset: int = 0
    ) -> list[dict[str, Any]]:
        if self.list_error is not None:
            raise self.list_error
        if not self.listable:
            return []
        names = sorted(self.objects)[offset : offset + limit]
        return [{"name": name, "id": f"id-{name}"} for name in names]

    def upload_object(self, name: str, data: bytes, content_type: str) -> str:
        if name in self.upload_errors:
            raise self.upload_errors[name]
        self.objects[name] = data
        self.uploads.append(name)
        return f"{self.config.url}/storage/v1/object/public/{self.config.bucket}/{name}"

    def download_object(
        self,
        name: str,
        target: Path,
        *,
        public: bool = True,
        authenticated: bool = False,
    ) -> int:
        self.downloads.append((name, public, authenticated))
        if name not in self.objects:
            raise NotFoundError("404: Object not found", 404)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.objects[name])
        return len(self.objects[name])

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fast_policy() -> RequestPolicy:
    """Request policy without rate limiting or backoff delays."""
    return RequestPolicy(
        gate=RateLimitGate(min_interval=0),
        initial_backoff=0,
        max_backoff=0,
    )


@pytest.fixture
def photo_dir(tmp_path: Path) -> Path:
    """Directory for the local photo store."""
    return tmp_path / "photos"


@pytest.fixture
def store(photo_dir: Path) -> LocalPhotoStore:
    """Create a LocalPhotoStore instance."""
    s = LocalPhotoStore(photo_dir)
    yield s
    s.close()


@pytest.fixture
def capture(tmp_path: Path) -> Path:
    """A freshly captured image file outside the store."""
    path = tmp_path / "camera" / "capture.jpg"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(jpeg_bytes(4096))
    return path
