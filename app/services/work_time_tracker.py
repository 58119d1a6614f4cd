"""Work-time tracking for the daily 8-hour requirement.

Clients send an activity heartbeat every minute or two while the app is in the
foreground. Elapsed time between two heartbeats is credited only when the gap
is within the grace window, so a single stale heartbeat cannot claim hours of
idle time.

Live sessions are kept in memory and written through to users.daily_work_minutes
on every heartbeat. The persisted total is what other processes (and the
suspension engine) read. The tracker reports hours only; it never changes
account status.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional
from uuid import UUID

from app.core.config import settings
from app.core.database import async_session
from app.models.user import User
from app.services.notification_service import create_work_time_warning
from app.services.user_queries import (
    list_users_below_target,
    reset_all_daily_work,
    save_work_progress,
)

logger = logging.getLogger(__name__)


@dataclass
class WorkSession:
    start_time: datetime
    last_active: datetime
    total_minutes: float = 0.0


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


class WorkTimeTracker:
    """Per-user daily work-time accumulator with a write-through database checkpoint."""

    def __init__(
        self,
        session_factory=None,
        clock: Optional[Callable[[], datetime]] = None,
        grace_minutes: Optional[int] = None,
        target_hours: Optional[int] = None,
    ):
        self.session_factory = session_factory or async_session
        self.clock = clock or datetime.utcnow
        self.grace_minutes = grace_minutes if grace_minutes is not None else settings.HEARTBEAT_GRACE_MINUTES
        self.target_hours = target_hours if target_hours is not None else settings.DAILY_TARGET_HOURS
        self._sessions: Dict[UUID, WorkSession] = {}
        self._locks: Dict[UUID, asyncio.Lock] = {}
        # Bumped by every daily reset
        self._generation = 0

    @property
    def target_minutes(self) -> int:
        return self.target_hours * 60

    def _lock_for(self, user_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def _start_locked(self, user_id: UUID, now: datetime) -> WorkSession:
        session = self._sessions.get(user_id)
        if session is None:
            session = WorkSession(start_time=now, last_active=now)
            self._sessions[user_id] = session
        else:
            session.last_active = now
        return session

    async def start_tracking(self, user_id: UUID) -> WorkSession:
        """Open today's session for a user, or just refresh last_active if one exists."""
        async with self._lock_for(user_id):
            return self._start_locked(user_id, self.clock())

    async def _resume_session(self, user_id: UUID, now: datetime) -> WorkSession:
        """Rebuild a session after a restart from the persisted daily total.

        Only a total written since today's boundary is trusted; anything older
        belongs to a previous day.
        """
        generation = self._generation
        user = None
        try:
            async with self.session_factory() as db:
                user = await db.get(User, user_id)
        except Exception as e:
            logger.error("Failed to load persisted work time for user %s: %s", user_id, e)

        if generation != self._generation:
            # A reset ran while the row was loading; what we read is stale.
            user = None

        last_active = user.last_active_time if user else None
        if last_active is not None and user.daily_work_minutes:
            boundary = start_of_day(now)
            if user.daily_work_reset_at and user.daily_work_reset_at > boundary:
                boundary = user.daily_work_reset_at
            if last_active >= boundary:
                session = WorkSession(
                    start_time=last_active,
                    last_active=last_active,
                    total_minutes=float(user.daily_work_minutes),
                )
                self._sessions[user_id] = session
                logger.info(
                    "Resumed work session for user %s at %.1f minutes", user_id, session.total_minutes
                )
                return session

        return self._start_locked(user_id, now)

    async def update_activity(self, user_id: UUID) -> None:
        """Record a heartbeat. Never raises; storage errors are logged."""
        async with self._lock_for(user_id):
            now = self.clock()
            session = self._sessions.get(user_id)
            if session is None:
                session = await self._resume_session(user_id, now)

            elapsed_minutes = (now - session.last_active).total_seconds() / 60
            if 0 <= elapsed_minutes <= self.grace_minutes:
                session.total_minutes += elapsed_minutes
            else:
                logger.debug(
                    "Heartbeat gap of %.1f min for user %s not credited", elapsed_minutes, user_id
                )
            session.last_active = now

            await self._persist(user_id, session.total_minutes, now, session.start_time)

    async def _persist(
        self,
        user_id: UUID,
        minutes: float,
        last_active: datetime,
        session_start: datetime,
    ) -> bool:
        try:
            async with self.session_factory() as db:
                written = await save_work_progress(db, user_id, minutes, last_active, session_start)
        except Exception as e:
            # The in-memory total stays authoritative; the next write corrects storage.
            logger.error("Failed to update work time for user %s: %s", user_id, e)
            return False

        if not written:
            logger.debug("Work time for user %s not written: reset since session start", user_id)
        return written

    def get_user_work_hours(self, user_id: UUID) -> Dict[str, Any]:
        session = self._sessions.get(user_id)
        minutes = session.total_minutes if session else 0.0
        hours_worked = minutes / 60

        return {
            "hours_worked": round(hours_worked, 2),
            "hours_remaining": round(max(0.0, self.target_hours - hours_worked), 2),
            "is_requirement_met": minutes >= self.target_minutes,
            "last_active_time": session.last_active if session else None,
        }

    def get_work_statistics(self) -> Dict[str, Any]:
        """Aggregate snapshot of the sessions tracked by this process."""
        stats = {
            "total_active_users": len(self._sessions),
            "average_hours_worked": 0.0,
            "users_met_requirement": 0,
            "users_pending_suspension": 0,
        }

        total_hours = 0.0
        for session in list(self._sessions.values()):
            total_hours += session.total_minutes / 60
            if session.total_minutes >= self.target_minutes:
                stats["users_met_requirement"] += 1
            else:
                stats["users_pending_suspension"] += 1

        if stats["total_active_users"]:
            stats["average_hours_worked"] = round(total_hours / stats["total_active_users"], 2)

        return stats

    async def checkpoint(self) -> int:
        """Write every live session to storage. Returns how many writes succeeded."""
        snapshot = [
            (user_id, session.total_minutes, session.last_active, session.start_time)
            for user_id, session in list(self._sessions.items())
        ]
        written = 0
        for user_id, minutes, last_active, started in snapshot:
            if await self._persist(user_id, minutes, last_active, started):
                written += 1
        return written

    async def reset_daily(self) -> None:
        """Clear all sessions and zero every user's persisted daily total.

        Heartbeat writes still in flight carry their session's start time and
        are dropped by the database once the reset timestamp is newer.
        """
        now = self.clock()
        logger.info("Resetting daily work hours for all users...")
        self._generation += 1
        self._sessions.clear()

        try:
            async with self.session_factory() as db:
                count = await reset_all_daily_work(db, now)
            logger.info("Daily work hours reset completed for %d users", count)
        except Exception as e:
            logger.error("Failed to reset daily work hours: %s", e)

    async def hourly_sweep(self) -> int:
        """Checkpoint live sessions; at the check hour warn users still below target.

        Returns the number of warnings sent.
        """
        await self.checkpoint()

        now = self.clock()
        if now.hour != settings.WORK_TIME_CHECK_HOUR:
            return 0

        try:
            async with self.session_factory() as db:
                users = await list_users_below_target(db, self.target_minutes)
                behind = [
                    (user.id, float(user.daily_work_minutes or 0), user.consecutive_failed_days)
                    for user in users
                ]
        except Exception as e:
            logger.error("Work-time warning sweep could not load users: %s", e)
            return 0

        warned = 0
        for user_id, minutes, failed_days in behind:
            try:
                async with self.session_factory() as db:
                    await create_work_time_warning(
                        db,
                        user_id,
                        hours_worked=round(minutes / 60, 2),
                        target_hours=self.target_hours,
                        failed_days=failed_days,
                    )
            except Exception as e:
                logger.error("Work-time warning failed for user %s: %s", user_id, e)
                continue
            warned += 1

        logger.info("Work-time warning sweep sent %d of %d warnings", warned, len(behind))
        return warned


work_time_tracker = WorkTimeTracker()
