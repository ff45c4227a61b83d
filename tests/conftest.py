import io
import random
from datetime import UTC, datetime, timedelta

import pytest
from PIL import Image

from imgstash.coordinator import RetrievalCoordinator
from imgstash.keys import KeyGenerator
from imgstash.storage.durable import SQLiteImageStore
from imgstash.storage.fast import MemoryImageCache

_ENV_VARS = (
    "IMGSTASH_DB_PATH",
    "IMGSTASH_TTL_SECONDS",
    "IMGSTASH_KEY_LENGTH",
    "IMGSTASH_CACHE_MAX_MB",
    "IMGSTASH_REPOPULATE_ON_READ",
    "IMGSTASH_JPEG_QUALITY",
    "IMGSTASH_LOG_LEVEL",
)


class FakeClock:
    """Clock frozen at a fixed instant until advanced."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store(tmp_path):
    s = SQLiteImageStore(db_path=tmp_path / "images.db")
    yield s
    s.close()


@pytest.fixture
def cache():
    return MemoryImageCache()


@pytest.fixture
def coordinator(store, cache, clock, rng):
    return RetrievalCoordinator(
        store=store,
        cache=cache,
        clock=clock,
        key_generator=KeyGenerator(rng),
    )


@pytest.fixture
def sample_image_bytes():
    """Small RGBA PNG."""
    buf = io.BytesIO()
    Image.new("RGBA", (8, 8), (255, 0, 0, 128)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def sample_image_file(tmp_path, sample_image_bytes):
    path = tmp_path / "sample.png"
    path.write_bytes(sample_image_bytes)
    return path
