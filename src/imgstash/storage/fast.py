"""Fast tier — in-memory LRU mirror of the durable store."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Protocol

from pydantic import ValidationError

from imgstash.errors.exceptions import CacheError
from imgstash.types import ImageRecord

_DEFAULT_MAX_SIZE_MB = 64


class FastCache(Protocol):
    """Volatile, non-authoritative cache. Entries may vanish at any time."""

    def set(self, key: str, record: ImageRecord) -> None: ...

    def get(self, key: str) -> ImageRecord | None: ...

    def delete(self, key: str) -> None: ...


class MemoryImageCache:
    """In-memory LRU cache with size-based eviction.

    Entries are held as JSON, the way a memcache-style tier would hold
    them, so a record read back is always a fresh copy. Expiration is not
    checked here.
    """

    def __init__(self, max_size_mb: float = _DEFAULT_MAX_SIZE_MB) -> None:
        self._store: OrderedDict[str, str] = OrderedDict()
        self._max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._current_size_bytes = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> ImageRecord | None:
        with self._lock:
            raw = self._store.get(key)
            if raw is None:
                return None
            # Move to end (most recently used)
            self._store.move_to_end(key)
        try:
            return ImageRecord.model_validate_json(raw)
        except ValidationError as e:
            raise CacheError(f"Unreadable cache entry for {key}", key=key, original=e) from e

    def set(self, key: str, record: ImageRecord) -> None:
        raw = record.model_dump_json()
        entry_size = len(raw)
        with self._lock:
            self._remove(key)
            if entry_size > self._max_size_bytes:
                return
            # Evict until there's room
            while self._current_size_bytes + entry_size > self._max_size_bytes and self._store:
                _, evicted = self._store.popitem(last=False)
                self._current_size_bytes -= len(evicted)
            self._store[key] = raw
            self._current_size_bytes += entry_size

    def delete(self, key: str) -> None:
        with self._lock:
            self._remove(key)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._current_size_bytes = 0

    @property
    def size_mb(self) -> float:
        return self._current_size_bytes / (1024 * 1024)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def _remove(self, key: str) -> None:
        raw = self._store.pop(key, None)
        if raw is not None:
            self._current_size_bytes -= len(raw)
