"""Registration of the work-time and compliance jobs on the scheduler."""

import logging
from datetime import timedelta

from app.core.scheduler import Scheduler, next_midnight, seconds_until_next_midnight
from app.services.suspension_service import check_daily_compliance
from app.services.work_time_tracker import WorkTimeTracker

logger = logging.getLogger(__name__)

HOURLY_SWEEP_JOB = "work-time-hourly"
DAILY_COMPLIANCE_JOB = "daily-compliance"
DAILY_RESET_JOB = "daily-reset"


def register_jobs(scheduler: Scheduler, tracker: WorkTimeTracker) -> None:
    """Register the hourly sweep and the midnight compliance check + reset.

    Compliance is registered before the reset so that both falling due at
    midnight evaluate yesterday's totals before they are zeroed.
    """
    now = scheduler.clock()
    top_of_next_hour = now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    midnight = next_midnight(now)

    async def run_daily_compliance():
        await tracker.checkpoint()
        check_date = (scheduler.clock() - timedelta(days=1)).date()
        await check_daily_compliance(
            session_factory=tracker.session_factory,
            check_date=check_date,
        )

    scheduler.add_job(HOURLY_SWEEP_JOB, tracker.hourly_sweep, timedelta(hours=1), first_run_at=top_of_next_hour)
    scheduler.add_job(DAILY_COMPLIANCE_JOB, run_daily_compliance, timedelta(days=1), first_run_at=midnight)
    scheduler.add_job(DAILY_RESET_JOB, tracker.reset_daily, timedelta(days=1), first_run_at=midnight)

    logger.info(
        "🔍 Work-time monitoring jobs registered; next day rollover at %s (in %.0fs)",
        midnight,
        seconds_until_next_midnight(now),
    )
