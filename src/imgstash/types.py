"""Shared Pydantic models for imgstash."""

from __future__ import annotations

import base64
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

# ── Enums ──


class LookupState(StrEnum):
    HIT_LIVE = "hit_live"
    HIT_EXPIRED = "hit_expired"
    MISS = "miss"
    FOUND = "found"
    NOT_FOUND = "not_found"


# ── Records ──


class ImageRecord(BaseModel):
    """A stored image: re-encoded payload, its key, and when it dies."""

    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    payload: bytes
    id: str
    expires_at: datetime

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at

    def to_renderable_string(self) -> str:
        """Standard base64 of the payload, suitable for a data URI."""
        return base64.b64encode(self.payload).decode("ascii")

    @property
    def size_bytes(self) -> int:
        return len(self.payload)


class RetrievalOutcome(BaseModel):
    """Result of a lookup. Not-found is a value here, never an exception."""

    key: str
    state: LookupState
    record: ImageRecord | None = None
    source: str | None = None  # "cache", "store", or None

    @property
    def found(self) -> bool:
        return self.record is not None
