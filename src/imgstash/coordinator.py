"""Retrieval coordinator — write-through storage and two-tier lookup."""

from __future__ import annotations

import logging
import threading
from datetime import timedelta

from imgstash.clock import Clock, SystemClock
from imgstash.errors.fallback import TierGuard
from imgstash.keys import DEFAULT_KEY_LENGTH, KeyGenerator
from imgstash.storage.durable import DurableStore
from imgstash.storage.fast import FastCache
from imgstash.storage.stats import RetrievalStats
from imgstash.types import ImageRecord, LookupState, RetrievalOutcome

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=5)


class RetrievalCoordinator:
    """Two tiers behind one entry point: fast cache first, durable store second.

    Writes go to the durable store, then the cache. Reads trust a live
    cache hit outright. Any expired record found on a read is deleted
    before the lookup reports not-found. Tier errors on the read path are
    degraded to misses; a failed durable write is raised.
    """

    def __init__(
        self,
        store: DurableStore,
        cache: FastCache,
        clock: Clock | None = None,
        key_generator: KeyGenerator | None = None,
        ttl: timedelta = DEFAULT_TTL,
        key_length: int = DEFAULT_KEY_LENGTH,
        repopulate_on_read: bool = False,
    ) -> None:
        self._store = store
        self._cache = cache
        self._clock = clock or SystemClock()
        self._keys = key_generator or KeyGenerator()
        self._ttl = ttl
        if key_length < 1:
            raise ValueError(f"Key length must be positive, got {key_length}")
        self._key_length = key_length
        self._repopulate_on_read = repopulate_on_read
        self._cache_guard = TierGuard("cache")
        self._store_guard = TierGuard("store")
        self._stats = RetrievalStats()
        self._stats_lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def store(self, payload: bytes) -> str:
        """Persist an encoded payload and return its new key.

        Raises StoreWriteError if the durable write fails; the cache is
        left untouched and no key is issued.
        """
        key = self._keys.generate(self._key_length)
        record = ImageRecord(
            payload=payload,
            id=key,
            expires_at=self._clock.now() + self._ttl,
        )

        self._store.put(record)
        self._cache_guard.call("set", self._cache.set, key, record)
        self._count("writes")
        logger.info("Stored image %s, expires at %s", key, record.expires_at.isoformat())
        return key

    def retrieve(self, key: str) -> RetrievalOutcome:
        """Look up a key. Always returns an outcome; never raises for tier errors."""
        now = self._clock.now()

        cached = self._cache_guard.call("get", self._cache.get, key)
        if cached is not None:
            if cached.is_live(now):
                logger.debug("Cache hit for %s", key)
                self._count("cache_hits")
                return RetrievalOutcome(
                    key=key, state=LookupState.HIT_LIVE, record=cached, source="cache"
                )
            logger.info("Cached image %s expired at %s, cleaning up", key, cached.expires_at)
            self._expire(key, evict_cache=True)
            return RetrievalOutcome(key=key, state=LookupState.HIT_EXPIRED)

        logger.debug("Lookup %s: %s, checking store", key, LookupState.MISS)
        record = self._store_guard.call("find_by_id", self._store.find_by_id, key)
        if record is None:
            self._count("misses")
            return RetrievalOutcome(key=key, state=LookupState.NOT_FOUND)

        if not record.is_live(now):
            logger.info("Stored image %s expired at %s, cleaning up", key, record.expires_at)
            self._expire(key, evict_cache=False)
            return RetrievalOutcome(key=key, state=LookupState.NOT_FOUND)

        if self._repopulate_on_read:
            self._cache_guard.call("set", self._cache.set, key, record)
        self._count("store_hits")
        return RetrievalOutcome(key=key, state=LookupState.FOUND, record=record, source="store")

    def stats(self) -> RetrievalStats:
        with self._stats_lock:
            return self._stats.model_copy(
                update={
                    "cache_errors": self._cache_guard.failures,
                    "store_errors": self._store_guard.failures,
                }
            )

    def _count(self, counter: str) -> None:
        with self._stats_lock:
            setattr(self._stats, counter, getattr(self._stats, counter) + 1)

    def _expire(self, key: str, evict_cache: bool) -> None:
        # Deletes only remove; a concurrent reader sees the old record or nothing.
        if evict_cache:
            self._cache_guard.call("delete", self._cache.delete, key)
        self._store_guard.call("delete_by_id", self._store.delete_by_id, key)
        self._count("expired")
