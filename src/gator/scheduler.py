"""Feed polling scheduler using APScheduler.

Runs one ingestion step immediately and then once per interval until
stopped. Steps never overlap.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from enum import Enum

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from gator.exceptions import GatorError, NoFeedsError
from gator.services.ingest_service import IngestResult, IngestService
from gator.utils.durations import format_duration

logger = structlog.get_logger()

JOB_ID = "feed_ingest"


class SchedulerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"


def create_scheduler(
    job: Callable[[], Awaitable[None]],
    interval: timedelta,
) -> AsyncIOScheduler:
    """Create a scheduler that runs ``job`` now and then every ``interval``.

    Ticks that come due while the job is still running are dropped rather
    than queued (``max_instances=1``, ``coalesce=True``).

    Args:
        job: Coroutine function to run on each tick.
        interval: Time between ticks.

    Returns:
        Configured (not yet started) AsyncIOScheduler.
    """
    scheduler = AsyncIOScheduler(timezone=timezone.utc)

    scheduler.add_job(
        job,
        trigger=IntervalTrigger(seconds=interval.total_seconds(), timezone=timezone.utc),
        id=JOB_ID,
        name="Feed ingestion",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=None,
        next_run_time=datetime.now(timezone.utc),
    )

    logger.info("Scheduler configured", job_id=JOB_ID, interval=format_duration(interval))

    return scheduler


class FeedScheduler:
    """Alternates between IDLE and POLLING, one ingestion step per tick."""

    def __init__(self, ingest_service: IngestService, interval: timedelta):
        self._ingest_service = ingest_service
        self._interval = interval
        self._state = SchedulerState.IDLE
        self._cycles = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def cycles(self) -> int:
        """Number of completed ticks."""
        return self._cycles

    @property
    def interval(self) -> timedelta:
        return self._interval

    async def tick(self) -> IngestResult | None:
        """Run exactly one ingestion step.

        Errors from the step are logged, never raised.

        Returns:
            The step's result, or None if it failed or was skipped.
        """
        # Reason: a tick started by hand can overlap one fired by APScheduler
        if self._state is SchedulerState.POLLING:
            logger.debug("Tick skipped, previous step still running")
            return None

        self._state = SchedulerState.POLLING
        try:
            return await self._ingest_service.ingest_one_feed()
        except NoFeedsError:
            logger.info("Nothing to fetch, waiting for next tick")
            return None
        except GatorError as e:
            logger.warning("Ingestion step failed", error=str(e))
            return None
        finally:
            self._state = SchedulerState.IDLE
            self._cycles += 1

    async def run(
        self,
        stop_event: asyncio.Event | None = None,
        max_cycles: int | None = None,
    ) -> int:
        """Poll feeds until ``stop_event`` is set.

        Args:
            stop_event: Event that ends the loop. Without one the loop runs
                until the process is terminated (or ``max_cycles`` is hit).
            max_cycles: Stop after this many ticks.

        Returns:
            Number of completed ticks.
        """
        stop_event = stop_event or asyncio.Event()

        async def job() -> None:
            await self.tick()
            if max_cycles is not None and self._cycles >= max_cycles:
                stop_event.set()

        scheduler = create_scheduler(job, self._interval)
        scheduler.start()
        logger.info("Scheduler started")
        try:
            await stop_event.wait()
        finally:
            scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped", cycles=self._cycles)

        return self._cycles
