"""Tests for the fail-open tier guard."""

import logging
import threading

from imgstash.errors.exceptions import StoreReadError
from imgstash.errors.fallback import TierGuard


def _boom(*args):
    raise StoreReadError("connection refused")


class TestTierGuard:
    def test_passes_through_result(self):
        guard = TierGuard("store")
        assert guard.call("get", lambda k: k.upper(), "abc") == "ABC"
        assert guard.failures == 0

    def test_passes_through_none(self):
        guard = TierGuard("cache")
        assert guard.call("get", lambda k: None, "abc") is None
        assert guard.failures == 0

    def test_failure_becomes_none(self):
        guard = TierGuard("store")
        assert guard.call("find_by_id", _boom, "abc") is None
        assert guard.failures == 1

    def test_unexpected_errors_also_degrade(self):
        def _runtime(*args):
            raise RuntimeError("tier unavailable")

        guard = TierGuard("cache")
        assert guard.call("get", _runtime, "abc") is None
        assert guard.failures == 1

    def test_counts_accumulate(self):
        guard = TierGuard("store")
        guard.call("find_by_id", _boom, "a")
        guard.call("delete_by_id", _boom, "b")
        assert guard.failures == 2

    def test_logs_warning(self, caplog):
        guard = TierGuard("store")
        with caplog.at_level(logging.WARNING, logger="imgstash.errors.fallback"):
            guard.call("find_by_id", _boom, "abc")
        assert "store find_by_id failed" in caplog.text
        assert "connection refused" in caplog.text

    def test_tier_name(self):
        assert TierGuard("cache").tier == "cache"

    def test_counts_from_many_threads(self):
        guard = TierGuard("store")

        def _work():
            for _ in range(500):
                guard.call("find_by_id", _boom, "abc")

        threads = [threading.Thread(target=_work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert guard.failures == 2000
