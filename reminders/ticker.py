"""Fixed-cadence ticker built on APScheduler.

Runs the tick callback immediately on start, then every POLL_INTERVAL_SECONDS.
max_instances=1 + coalesce=True means a slow tick is never overlapped and
missed runs collapse into one instead of bursting.
"""

from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from logger import logger
from . import config


class Ticker:
    """Owns one interval job (and the scheduler itself, if none was shared)."""

    JOB_ID = "reminder_tick"

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        scheduler: Optional[AsyncIOScheduler] = None
    ):
        """Initialize ticker.

        Args:
            callback: Async function run on every tick
            scheduler: Shared APScheduler instance; a private one is created
                (and shut down on stop) when omitted
        """
        self.callback = callback
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler  # Private one is created in start(), inside the loop
        self._job = None

    @property
    def running(self) -> bool:
        return self._job is not None

    @property
    def next_run_time(self) -> Optional[datetime]:
        if self._job is None:
            return None
        return getattr(self._job, "next_run_time", None)

    def start(self) -> None:
        """Register the tick job and start the scheduler if we own it.

        Must be called from inside a running asyncio event loop.
        """
        if self._job is not None:
            return

        if self.scheduler is None:
            self.scheduler = AsyncIOScheduler()

        self._job = self.scheduler.add_job(
            self.callback,
            trigger=IntervalTrigger(seconds=config.POLL_INTERVAL_SECONDS),
            id=self.JOB_ID,
            name="Reminder tick",
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now(timezone.utc),
            replace_existing=True
        )

        if self._owns_scheduler and not self.scheduler.running:
            self.scheduler.start()

        logger.info(f"Reminder ticker started (every {config.POLL_INTERVAL_SECONDS}s)")

    def stop(self) -> None:
        """Remove the tick job; an in-flight tick is allowed to finish."""
        if self._job is not None:
            try:
                self._job.remove()
            except JobLookupError:
                pass
            self._job = None

        if self._owns_scheduler and self.scheduler is not None:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
            self.scheduler = None

        logger.info("Reminder ticker stopped")
