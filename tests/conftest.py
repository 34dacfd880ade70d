"""
Pytest configuration and fixtures for eventgallery tests.
"""

import io
from collections.abc import Callable, Generator

import pytest
import structlog
from PIL import Image

from eventgallery.config import get_config
from eventgallery.models.photo import PhotoRecord, to_data_url
from eventgallery.storage.memory import InMemoryKeyValueStore


def create_test_image(size=(100, 100), format_type="JPEG", mode="RGB", color="red") -> bytes:
    """Create a test image in memory."""
    image = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    image.save(buffer, format=format_type)
    return buffer.getvalue()


def make_record(photo_id: str, captured_at: int, source_name: str | None = None) -> PhotoRecord:
    """Build a small photo record without running the transcoder."""
    return PhotoRecord(
        id=photo_id,
        payload=to_data_url(b"\xff\xd8\xff\xd9", "image/jpeg"),
        captured_at=captured_at,
        width=4,
        height=3,
        source_name=source_name or f"{photo_id}.jpg",
    )


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, milliseconds: int) -> None:
        self.now += milliseconds


@pytest.fixture(autouse=True)
def reset_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Give every test a clean configuration cache and test environment."""
    monkeypatch.setenv("ENVIRONMENT", "testing")
    for key in (
        "GALLERY_STORAGE_BACKEND",
        "GALLERY_STORAGE_PATH",
        "GALLERY_STORAGE_QUOTA_BYTES",
        "GALLERY_DEFAULT_TITLE",
        "GALLERY_DEFAULT_BANNER",
        "GALLERY_VIEWER_REFRESH_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
    get_config().clear_cache()
    yield
    get_config().clear_cache()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def image_factory() -> Callable[..., bytes]:
    """Provide the in-memory image builder."""
    return create_test_image


@pytest.fixture
def record_factory() -> Callable[..., PhotoRecord]:
    """Provide the photo record builder."""
    return make_record


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_backend() -> InMemoryKeyValueStore:
    """Unlimited in-memory key/value backend."""
    return InMemoryKeyValueStore()
