"""Custom exception hierarchy for imgstash."""

from __future__ import annotations


class ImageStashError(Exception):
    """Base exception for all imgstash errors."""

    def __init__(self, message: str = "", original: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original = original


class DecodeError(ImageStashError):
    """The uploaded bytes could not be decoded or re-encoded as an image."""


class StoreError(ImageStashError):
    """Durable store failure."""

    def __init__(
        self,
        message: str = "",
        key: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message, original=original)
        self.key = key


class StoreWriteError(StoreError):
    """Durable write failed — the upload is aborted and no key is issued."""


class StoreReadError(StoreError):
    """Durable lookup failed. Degraded to a miss on the read path."""


class StoreDeleteError(StoreError):
    """Durable cleanup failed. Logged and ignored on the read path."""


class CacheError(ImageStashError):
    """Fast cache failure (unreadable entry, unavailable tier).

    Never surfaced to callers of the coordinator; every cache error is a miss.
    """

    def __init__(
        self,
        message: str = "",
        key: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message, original=original)
        self.key = key


class NotFoundError(ImageStashError):
    """No live image exists for a key.

    Only raised by convenience helpers; the coordinator returns a not-found
    outcome instead.
    """

    def __init__(self, key: str) -> None:
        super().__init__(f"No live image for key: {key}")
        self.key = key
