"""Top-level entry point: ImageStash."""

from __future__ import annotations

import logging
import random
from datetime import timedelta
from pathlib import Path
from typing import Any

from imgstash.clock import Clock
from imgstash.config.hierarchy import load_config_hierarchy
from imgstash.coordinator import RetrievalCoordinator
from imgstash.errors.exceptions import NotFoundError
from imgstash.keys import KeyGenerator
from imgstash.storage.durable import SQLiteImageStore
from imgstash.storage.fast import MemoryImageCache
from imgstash.storage.stats import RetrievalStats
from imgstash.types import RetrievalOutcome
from imgstash.utils.image import encode_image, load_image

logger = logging.getLogger(__name__)


class ImageStash:
    """Upload images, hand out keys, serve them back until they expire."""

    def __init__(
        self,
        db_path: str | Path | None = None,
        ttl_seconds: float | None = None,
        key_length: int | None = None,
        cache_max_mb: float | None = None,
        jpeg_quality: int | None = None,
        repopulate_on_read: bool | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = load_config_hierarchy(
            db_path=str(db_path) if db_path is not None else None,
            ttl_seconds=ttl_seconds,
            key_length=key_length,
            cache_max_mb=cache_max_mb,
            jpeg_quality=jpeg_quality,
            repopulate_on_read=repopulate_on_read,
        )
        self._jpeg_quality = self._config["jpeg_quality"]

        self._store = SQLiteImageStore(db_path=Path(self._config["db_path"]).expanduser())
        self._cache = MemoryImageCache(max_size_mb=self._config["cache_max_mb"])
        self._coordinator = RetrievalCoordinator(
            store=self._store,
            cache=self._cache,
            clock=clock,
            key_generator=KeyGenerator(rng),
            ttl=timedelta(seconds=self._config["ttl_seconds"]),
            key_length=self._config["key_length"],
            repopulate_on_read=self._config["repopulate_on_read"],
        )

    @property
    def config(self) -> dict[str, Any]:
        return dict(self._config)

    @property
    def coordinator(self) -> RetrievalCoordinator:
        return self._coordinator

    def upload(self, image_bytes: bytes) -> str:
        """Re-encode an image as JPEG, store it, and return its key.

        Raises DecodeError before either tier is touched if the bytes are
        not an image, and StoreWriteError if the durable write fails.
        """
        payload = encode_image(image_bytes, quality=self._jpeg_quality)
        return self._coordinator.store(payload)

    def upload_file(self, path: str | Path) -> str:
        return self.upload(load_image(path))

    def retrieve(self, key: str) -> RetrievalOutcome:
        return self._coordinator.retrieve(key)

    def fetch_payload(self, key: str) -> bytes:
        outcome = self._coordinator.retrieve(key)
        if outcome.record is None:
            raise NotFoundError(key)
        return outcome.record.payload

    def stats(self) -> RetrievalStats:
        return self._coordinator.stats()

    def close(self) -> None:
        self._store.close()

    def __enter__(self) -> ImageStash:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
