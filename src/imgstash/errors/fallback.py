"""Fail-open wrapper — storage tier errors on the read path become misses."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TierGuard:
    """Runs fallible tier calls and degrades any failure to ``None``.

    Unavailable infrastructure and a genuine miss look the same to end
    users. Each swallowed failure is logged and counted.
    """

    def __init__(self, tier: str) -> None:
        self._tier = tier
        self._lock = threading.Lock()
        self._failures = 0

    @property
    def tier(self) -> str:
        return self._tier

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    def call(self, operation: str, fn: Callable[..., T], *args: Any) -> T | None:
        try:
            return fn(*args)
        except Exception as exc:
            with self._lock:
                self._failures += 1
            logger.warning(
                "%s %s failed, treating as miss: %s",
                self._tier,
                operation,
                exc,
            )
            return None
