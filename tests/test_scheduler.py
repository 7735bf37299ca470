"""Tests for the periodic cache sweeper."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from garba.cache.store import TTLCache
from garba.scheduler import SWEEP_JOB_ID, start_cache_sweeper, sweep_cache


class TestSweepJob:
    def test_sweep_evicts_expired(self):
        now = {"ms": 0.0}
        cache = TTLCache(clock=lambda: now["ms"])
        cache.set("GET:/api/events", {"total": 1}, 100)
        cache.set("GET:/api/events/1", {"id": 1}, 10_000)
        now["ms"] = 500
        assert sweep_cache(cache) == 1
        assert cache.stats()["keys"] == ["GET:/api/events/1"]

    def test_sweep_swallows_failures(self):
        cache = MagicMock(spec=TTLCache)
        cache.cleanup.side_effect = RuntimeError("boom")
        assert sweep_cache(cache) == 0


class TestStartSweeper:
    @pytest.mark.parametrize("interval", [None, 0, -1])
    def test_disabled_without_interval(self, interval):
        assert start_cache_sweeper(TTLCache(), interval) is None

    def test_starts_interval_job(self):
        scheduler = start_cache_sweeper(TTLCache(), 60)
        try:
            assert scheduler is not None
            assert scheduler.running
            assert scheduler.get_job(SWEEP_JOB_ID) is not None
        finally:
            scheduler.shutdown(wait=False)
