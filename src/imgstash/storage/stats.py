"""Retrieval statistics model."""

from __future__ import annotations

from pydantic import BaseModel


class RetrievalStats(BaseModel):
    """Counters kept by the coordinator over its lifetime."""

    writes: int = 0
    cache_hits: int = 0
    store_hits: int = 0
    misses: int = 0
    expired: int = 0
    cache_errors: int = 0
    store_errors: int = 0

    @property
    def hits(self) -> int:
        return self.cache_hits + self.store_hits

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
