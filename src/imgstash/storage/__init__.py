"""Storage tiers — durable SQLite store and in-memory fast cache."""

from imgstash.storage.durable import DurableStore, SQLiteImageStore
from imgstash.storage.fast import FastCache, MemoryImageCache
from imgstash.storage.stats import RetrievalStats

__all__ = [
    "DurableStore",
    "SQLiteImageStore",
    "FastCache",
    "MemoryImageCache",
    "RetrievalStats",
]
