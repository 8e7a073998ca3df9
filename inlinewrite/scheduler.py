"""Scheduler — drives the foreground sync on a fixed interval using APScheduler."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

if TYPE_CHECKING:
    from inlinewrite.sync import ForegroundSync

logger = logging.getLogger(__name__)

FOREGROUND_SYNC_JOB_ID = "foreground_sync"


def build_trigger(interval_seconds: float) -> IntervalTrigger:
    """Fixed-period trigger. Raises ValueError for a non-positive interval."""
    if interval_seconds <= 0:
        raise ValueError(f"Interval must be positive, got {interval_seconds}")
    return IntervalTrigger(seconds=interval_seconds)


def setup_scheduler(sync: ForegroundSync, interval_seconds: float) -> AsyncIOScheduler:
    """Build a scheduler with one job polling the handoff store.

    The job is a coroutine so it runs on the event loop, not the executor
    thread pool that plain callables would be sent to.
    """
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        sync.tick,
        trigger=build_trigger(interval_seconds),
        id=FOREGROUND_SYNC_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    logger.info(f"Scheduled foreground sync every {interval_seconds}s")
    return scheduler
