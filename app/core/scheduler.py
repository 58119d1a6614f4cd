"""In-process scheduler for recurring background jobs.

Jobs are named and run one at a time from a single asyncio task, in
registration order when several fall due together. A job that is still
running when it is triggered again is skipped, not queued.
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


def next_midnight(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)


def seconds_until_next_midnight(now: datetime) -> float:
    return (next_midnight(now) - now).total_seconds()


@dataclass
class RecurringJob:
    name: str
    callback: Callable[[], Awaitable[Any]]
    interval: timedelta
    next_run_at: datetime
    running: bool = False
    last_run_at: Optional[datetime] = None


class Scheduler:
    """Owns named recurring jobs. Call start() inside a running event loop."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None, tick_seconds: float = 1.0):
        self.clock = clock or datetime.utcnow
        self.tick_seconds = tick_seconds
        self._jobs: Dict[str, RecurringJob] = {}
        self._task: Optional[asyncio.Task] = None

    @property
    def jobs(self) -> List[RecurringJob]:
        return list(self._jobs.values())

    def get_job(self, name: str) -> RecurringJob:
        try:
            return self._jobs[name]
        except KeyError:
            raise LookupError(f"No scheduled job named '{name}'") from None

    def add_job(
        self,
        name: str,
        callback: Callable[[], Awaitable[Any]],
        interval: timedelta,
        first_run_at: Optional[datetime] = None,
    ) -> RecurringJob:
        if name in self._jobs:
            raise ValueError(f"Job '{name}' is already registered")
        if interval <= timedelta(0):
            raise ValueError("Job interval must be positive")

        job = RecurringJob(
            name=name,
            callback=callback,
            interval=interval,
            next_run_at=first_run_at or self.clock() + interval,
        )
        self._jobs[name] = job
        logger.info("Registered job %s every %s, first run at %s", name, interval, job.next_run_at)
        return job

    async def run_job(self, name: str) -> bool:
        """Run a job now. Returns False if it was skipped because it is still running."""
        job = self.get_job(name)
        if job.running:
            logger.warning("Job %s is still running; skipping this run", name)
            return False

        job.running = True
        started = self.clock()
        try:
            await job.callback()
        except Exception:
            logger.exception("Scheduled job %s failed", name)
        finally:
            job.running = False
            job.last_run_at = started
        return True

    async def run_pending(self) -> List[str]:
        """Run every job that is due. Returns the names of jobs that ran."""
        now = self.clock()
        ran = []
        for job in self.jobs:
            if job.next_run_at > now:
                continue
            # Missed intervals are collapsed into a single run.
            while job.next_run_at <= now:
                job.next_run_at += job.interval
            if await self.run_job(job.name):
                ran.append(job.name)
        return ran

    async def _run_forever(self) -> None:
        while True:
            await self.run_pending()
            await asyncio.sleep(self.tick_seconds)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run_forever())
            logger.info("Scheduler started with %d jobs", len(self._jobs))

    async def shutdown(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Scheduler stopped")
