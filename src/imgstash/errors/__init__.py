"""Error handling — exceptions and the read-path fail-open guard."""

from imgstash.errors.exceptions import (
    CacheError,
    DecodeError,
    ImageStashError,
    NotFoundError,
    StoreDeleteError,
    StoreError,
    StoreReadError,
    StoreWriteError,
)
from imgstash.errors.fallback import TierGuard

__all__ = [
    "ImageStashError",
    "DecodeError",
    "StoreError",
    "StoreWriteError",
    "StoreReadError",
    "StoreDeleteError",
    "CacheError",
    "NotFoundError",
    "TierGuard",
]
