"""User-store queries shared by the work-time tracker and the suspension engine."""

from datetime import datetime
from typing import Optional
from uuid import UUID
from sqlalchemy import select, update, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, KycStatus, VerificationStatus, AccountStatus


def kyc_complete_filter():
    """SQL filter matching users subject to work-time monitoring."""
    return and_(
        User.kyc_status == KycStatus.APPROVED.value,
        User.verification_status == VerificationStatus.VERIFIED.value,
    )


def eligible_active_filter():
    return and_(
        kyc_complete_filter(),
        User.status == AccountStatus.ACTIVE.value,
    )


async def load_user_for_update(db: AsyncSession, user_id: UUID) -> Optional[User]:
    """Fetch a user row with a row-level lock held until commit/rollback."""
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def save_work_progress(
    db: AsyncSession,
    user_id: UUID,
    minutes: float,
    last_active_time: datetime,
    session_start: Optional[datetime] = None,
) -> bool:
    """Write a session's running total.

    With session_start, the write only lands if no daily reset happened after
    the session began. Returns False when the row was left untouched.
    """
    query = update(User).where(User.id == user_id)
    if session_start is not None:
        query = query.where(
            or_(
                User.daily_work_reset_at.is_(None),
                User.daily_work_reset_at <= session_start,
            )
        )
    result = await db.execute(
        query.values(daily_work_minutes=minutes, last_active_time=last_active_time)
    )
    await db.commit()
    return bool(result.rowcount)


async def reset_all_daily_work(db: AsyncSession, reset_at: datetime) -> int:
    """Zero every user's daily work total. Returns the number of rows touched."""
    result = await db.execute(
        update(User).values(daily_work_minutes=0.0, daily_work_reset_at=reset_at)
    )
    await db.commit()
    return result.rowcount or 0


async def list_users_below_target(db: AsyncSession, target_minutes: int) -> list[User]:
    result = await db.execute(
        select(User).where(
            and_(
                eligible_active_filter(),
                User.daily_work_minutes < target_minutes,
            )
        )
    )
    return list(result.scalars().all())
