"""Account suspension engine.

Only KYC-completed users (kyc_status='approved' AND verification_status='verified')
are monitored. A user who misses the daily work-time target on
SUSPENSION_THRESHOLD_DAYS consecutive evaluated days is suspended and must pay
the reactivation fee from their balance to restore access.

This module is the only writer of users.status / users.suspension_reason.
"""

import asyncio
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Optional, TypedDict
from uuid import UUID
from sqlalchemy import select, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import async_session
from app.models.user import User, AccountStatus
from app.services.auth import get_user_by_id
from app.services.ledger_service import build_reactivation_fee_charge
from app.services.notification_service import (
    suspension_notification,
    reactivation_notification,
)
from app.services.user_queries import (
    eligible_active_filter,
    load_user_for_update,
)

logger = logging.getLogger(__name__)

ADMIN_REASON_PREFIX = "Admin suspension: "


class ReactivationResult(TypedDict):
    success: bool
    message: str


class SuspensionStatus(TypedDict, total=False):
    """Suspension summary. A missing user only carries the three flag fields."""
    is_suspended: bool
    suspended_at: Optional[datetime]
    reason: Optional[str]
    reactivation_fee: Optional[Decimal]
    reactivation_fee_paid: Optional[bool]
    consecutive_failed_days: int
    eligible_for_suspension: bool


def _result(success: bool, message: str) -> ReactivationResult:
    return {"success": success, "message": message}


def _apply_suspension(db: AsyncSession, user: User, reason: str, now: datetime) -> None:
    """Flip a loaded user to suspended inside the caller's transaction."""
    user.status = AccountStatus.SUSPENDED.value
    user.suspended_at = now
    user.suspension_reason = reason
    user.reactivation_fee_paid = False
    user.reactivation_fee_amount = settings.REACTIVATION_FEE
    db.add(suspension_notification(user.id, reason, settings.REACTIVATION_FEE))


async def is_eligible_for_suspension(db: AsyncSession, user_id: UUID) -> bool:
    """True iff the user exists and has completed KYC and identity verification."""
    user = await get_user_by_id(db, user_id)
    return bool(user and user.is_kyc_complete)


async def check_user_daily_compliance(
    db: AsyncSession,
    user_id: UUID,
    check_date: date,
) -> Optional[str]:
    """Evaluate one user's work time for check_date.

    Returns "met", "failed" or "suspended", or None when the user was skipped
    (missing, ineligible, not active, or already evaluated for that date).
    """
    user = await load_user_for_update(db, user_id)
    if not user or not user.is_kyc_complete or user.status != AccountStatus.ACTIVE.value:
        await db.rollback()
        return None

    if user.last_compliance_date is not None and user.last_compliance_date >= check_date:
        logger.debug("User %s already evaluated for %s", user_id, check_date)
        await db.rollback()
        return None

    worked_minutes = float(user.daily_work_minutes or 0)
    user.last_compliance_date = check_date

    if worked_minutes >= settings.daily_target_minutes:
        user.consecutive_failed_days = 0
        outcome = "met"
    else:
        user.consecutive_failed_days = (user.consecutive_failed_days or 0) + 1
        outcome = "failed"

        if user.consecutive_failed_days >= settings.SUSPENSION_THRESHOLD_DAYS:
            reason = (
                f"Failed to meet the {settings.DAILY_TARGET_HOURS}-hour daily work target for "
                f"{user.consecutive_failed_days} consecutive days "
                f"(worked {worked_minutes / 60:.2f} hours on {check_date.isoformat()})"
            )
            _apply_suspension(db, user, reason, datetime.utcnow())
            outcome = "suspended"

    await db.commit()

    if outcome == "suspended":
        logger.warning("⚠️ User %s suspended: %s", user_id, user.suspension_reason)
    else:
        logger.info(
            "Compliance %s for user %s on %s: %.1f min, failed streak %d",
            outcome,
            user_id,
            check_date,
            worked_minutes,
            user.consecutive_failed_days,
        )
    return outcome


async def check_daily_compliance(
    session_factory=None,
    check_date: Optional[date] = None,
) -> Dict[str, Any]:
    """Run the daily compliance sweep over every active, KYC-completed user.

    Each user is evaluated in its own session with a soft timeout, so one
    failing or slow user does not abort the sweep.
    """
    session_factory = session_factory or async_session
    if check_date is None:
        check_date = (datetime.utcnow() - timedelta(days=1)).date()

    summary = {
        "check_date": check_date,
        "checked": 0,
        "met": 0,
        "failed": 0,
        "suspended": 0,
        "skipped": 0,
        "errors": 0,
    }

    try:
        async with session_factory() as db:
            result = await db.execute(select(User.id).where(eligible_active_filter()))
            user_ids = list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error("❌ Daily compliance check could not load users: %s", e)
        summary["errors"] += 1
        return summary

    for user_id in user_ids:
        summary["checked"] += 1
        try:
            async with session_factory() as db:
                outcome = await asyncio.wait_for(
                    check_user_daily_compliance(db, user_id, check_date),
                    timeout=settings.COMPLIANCE_USER_TIMEOUT_SECONDS,
                )
        except asyncio.TimeoutError:
            logger.warning("Compliance check timed out for user %s; skipping", user_id)
            summary["errors"] += 1
            continue
        except Exception as e:
            logger.error("Compliance check failed for user %s: %s", user_id, e)
            summary["errors"] += 1
            continue

        summary[outcome or "skipped"] += 1

    logger.info(
        "✅ Daily compliance check for %s completed: %d checked, %d met, %d failed, %d suspended, %d errors",
        check_date,
        summary["checked"],
        summary["met"],
        summary["failed"],
        summary["suspended"],
        summary["errors"],
    )
    return summary


async def suspend_user(db: AsyncSession, user_id: UUID, reason: str) -> bool:
    """Suspend an active user account.

    Returns False when the user does not exist or is not active. An existing
    suspension keeps its original timestamp and reason, and a banned account
    stays banned.
    """
    user = await load_user_for_update(db, user_id)
    if not user:
        await db.rollback()
        logger.warning("Cannot suspend missing user %s", user_id)
        return False

    if user.status != AccountStatus.ACTIVE.value:
        status = user.status
        await db.rollback()
        logger.info("User %s is %s; not suspending", user_id, status)
        return False

    _apply_suspension(db, user, reason, datetime.utcnow())
    await db.commit()

    logger.warning("⚠️ User %s suspended: %s", user_id, reason)
    return True


async def admin_suspend_user(db: AsyncSession, user_id: UUID, reason: str) -> bool:
    """Manual suspension. Bypasses the eligibility and threshold rules."""
    return await suspend_user(db, user_id, f"{ADMIN_REASON_PREFIX}{reason}")


async def process_reactivation_fee(db: AsyncSession, user_id: UUID) -> ReactivationResult:
    """Charge the reactivation fee from the user's balance and lift the suspension.

    The balance deduction, status change and ledger entry are committed in a
    single transaction. Never raises; failures come back as
    {"success": False, "message": ...}.
    """
    try:
        user = await load_user_for_update(db, user_id)
    except SQLAlchemyError as e:
        logger.error("Error loading user %s for reactivation: %s", user_id, e)
        return _result(False, "Failed to process payment")

    if not user:
        await db.rollback()
        return _result(False, "User not found")

    if not user.is_suspended:
        await db.rollback()
        return _result(False, "Account is not suspended")

    if user.reactivation_fee_paid:
        await db.rollback()
        return _result(False, "Reactivation fee already paid")

    fee = Decimal(str(user.reactivation_fee_amount or settings.REACTIVATION_FEE))
    balance = Decimal(str(user.balance or 0))

    if balance < fee:
        await db.rollback()
        return _result(
            False,
            f"Insufficient balance. Required: {fee:.2f}, Available: {balance:.2f}",
        )

    try:
        user.balance = balance - fee
        user.status = AccountStatus.ACTIVE.value
        user.reactivation_fee_paid = True
        user.consecutive_failed_days = 0
        user.suspended_at = None
        user.suspension_reason = None
        db.add(build_reactivation_fee_charge(user.id, fee))
        db.add(reactivation_notification(user.id, fee))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error processing reactivation fee for user %s: %s", user_id, e)
        return _result(False, "Failed to process payment")

    logger.info("User %s reactivated; fee %s deducted", user_id, fee)
    return _result(True, f"Account reactivated successfully. {fee:.2f} deducted from balance.")


async def get_suspension_status(db: AsyncSession, user_id: UUID) -> SuspensionStatus:
    """Read-only suspension summary for a user."""
    user = await get_user_by_id(db, user_id)
    if not user:
        return {
            "is_suspended": False,
            "consecutive_failed_days": 0,
            "eligible_for_suspension": False,
        }

    return {
        "is_suspended": user.is_suspended,
        "suspended_at": user.suspended_at,
        "reason": user.suspension_reason,
        "reactivation_fee": user.reactivation_fee_amount,
        "reactivation_fee_paid": user.reactivation_fee_paid,
        "consecutive_failed_days": user.consecutive_failed_days,
        "eligible_for_suspension": user.is_kyc_complete,
    }


async def get_users_at_risk(db: AsyncSession) -> list[User]:
    """Active, eligible users one missed day (or fewer) away from suspension."""
    result = await db.execute(
        select(User)
        .where(
            and_(
                eligible_active_filter(),
                User.consecutive_failed_days >= settings.AT_RISK_THRESHOLD_DAYS,
            )
        )
        .order_by(User.consecutive_failed_days.desc())
    )
    return list(result.scalars().all())
