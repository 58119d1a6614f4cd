"""Notification service for creating user notifications."""

import logging
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)


def build_notification(
    user_id: UUID,
    title: str,
    message: str,
    notification_type: NotificationType,
) -> Notification:
    """Build an unread notification without committing it.

    Used where the notification must land in the same transaction as a state
    change (suspension, reactivation).
    """
    return Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=notification_type,
        is_read=False,
    )


async def create_notification(
    db: AsyncSession,
    user_id: UUID,
    title: str,
    message: str,
    notification_type: NotificationType,
) -> Notification:
    """Create and commit a notification for a user."""
    notification = build_notification(user_id, title, message, notification_type)
    db.add(notification)
    await db.commit()
    await db.refresh(notification)

    logger.info(
        "Created notification for user %s: %s (%s)",
        user_id,
        title,
        notification_type.value,
    )

    return notification


def suspension_notification(user_id: UUID, reason: str, fee) -> Notification:
    return build_notification(
        user_id,
        title="Account Suspended",
        message=f"Your account has been suspended: {reason}. Pay the reactivation fee of {fee} to restore access.",
        notification_type=NotificationType.ACCOUNT,
    )


def reactivation_notification(user_id: UUID, fee) -> Notification:
    return build_notification(
        user_id,
        title="Account Reactivated",
        message=f"Your account is active again. {fee} was deducted from your balance.",
        notification_type=NotificationType.ACCOUNT,
    )


async def create_work_time_warning(
    db: AsyncSession,
    user_id: UUID,
    hours_worked: float,
    target_hours: int,
    failed_days: int,
):
    """Warn a user who is below today's work-time target."""
    await create_notification(
        db=db,
        user_id=user_id,
        title="⏰ Daily Work Target Not Met Yet",
        message=(
            f"You have worked {hours_worked} of {target_hours} hours today. "
            f"Missed days in a row: {failed_days}. Complete your hours to avoid account suspension."
        ),
        notification_type=NotificationType.WORK_TIME,
    )
