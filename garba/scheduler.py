"""Background scheduler for periodic cache sweeps.

Uses APScheduler to evict expired entries between writes.
Activated by setting GARBA_CACHE_SWEEP_SECONDS.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from garba.cache.store import TTLCache

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "cache_sweep"


def sweep_cache(cache: TTLCache) -> int:
    """Job body executed by the scheduler. Returns the number evicted."""
    try:
        evicted = cache.cleanup()
    except Exception:
        logger.exception("Scheduled cache sweep failed")
        return 0
    if evicted:
        logger.info("Cache sweep evicted %d expired entries", evicted)
    return evicted


def start_cache_sweeper(cache: TTLCache, interval_seconds: float | None) -> BackgroundScheduler | None:
    """Start the background sweeper if configured.

    Returns the running scheduler, or None when no interval is set.
    """
    if not interval_seconds or interval_seconds <= 0:
        logger.info("Cache sweeper not configured (set GARBA_CACHE_SWEEP_SECONDS)")
        return None

    scheduler = BackgroundScheduler()
    scheduler.add_job(sweep_cache, "interval", seconds=interval_seconds, args=[cache], id=SWEEP_JOB_ID)
    scheduler.start()
    logger.info("Cache sweeper started, runs every %.1f seconds", interval_seconds)
    return scheduler
