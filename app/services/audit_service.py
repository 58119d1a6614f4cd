"""Admin audit trail.

Every admin write (a manual suspension, an on-demand compliance sweep) leaves
one row naming the admin, the action and, where there is one, the affected
user. Rows are never updated or deleted.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.admin_audit_log import AdminAuditLog, AuditAction

logger = logging.getLogger(__name__)


def _json_safe(details: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    safe = {}
    for key, value in (details or {}).items():
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        elif isinstance(value, (Decimal, UUID)):
            value = str(value)
        safe[key] = value
    return safe


async def log_admin_action(
    db: AsyncSession,
    admin_id: UUID,
    action: AuditAction,
    target_user_id: Optional[UUID] = None,
    details: Optional[Dict[str, Any]] = None,
) -> AdminAuditLog:
    """Record and commit one admin action.

    Dates, decimals and UUIDs in details are stored as strings.
    """
    entry = AdminAuditLog(
        admin_id=admin_id,
        action=AuditAction(action).value,
        target_user_id=target_user_id,
        details=_json_safe(details),
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    logger.info("🔐 Admin %s: %s (target=%s)", admin_id, entry.action, target_user_id or "-")
    return entry


async def list_admin_actions(db: AsyncSession, target_user_id: UUID, limit: int = 50) -> List[AdminAuditLog]:
    """Most recent admin actions taken against a user."""
    result = await db.execute(
        select(AdminAuditLog)
        .where(AdminAuditLog.target_user_id == target_user_id)
        .order_by(AdminAuditLog.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
