"""Admin endpoints for work-time monitoring and account suspension.

All routes require the admin role.
"""

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import require_admin, get_work_time_tracker, get_session_factory
from app.models.admin_audit_log import AuditAction
from app.models.user import User, AccountStatus
from app.schemas.common import MessageResponse
from app.schemas.suspension import (
    AdminSuspendRequest,
    AtRiskUser,
    AuditLogEntry,
    AtRiskUserList,
    ComplianceRunResponse,
    SuspensionStatusResponse,
)
from app.schemas.work_time import WorkStatistics
from app.services.audit_service import log_admin_action, list_admin_actions
from app.services.auth import get_user_by_id
from app.services.suspension_service import (
    admin_suspend_user,
    check_daily_compliance,
    get_suspension_status,
    get_users_at_risk,
)
from app.services.work_time_tracker import WorkTimeTracker

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/work-statistics", response_model=WorkStatistics)
async def get_work_statistics(
    current_user: User = Depends(require_admin),
    tracker: WorkTimeTracker = Depends(get_work_time_tracker),
):
    """Aggregate work-time stats for users tracked by this server process."""
    return tracker.get_work_statistics()


@router.get("/users-at-risk", response_model=AtRiskUserList)
async def list_users_at_risk(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Eligible active users one missed day away from suspension."""
    users = await get_users_at_risk(db)
    return AtRiskUserList(
        users=[AtRiskUser.model_validate(u) for u in users],
        total=len(users),
    )


@router.get("/users/{user_id}/suspension-status", response_model=SuspensionStatusResponse)
async def get_user_suspension_status(
    user_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if not await get_user_by_id(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return await get_suspension_status(db, user_id)


@router.post("/users/{user_id}/suspend", response_model=MessageResponse)
async def suspend_user_account(
    user_id: UUID,
    payload: AdminSuspendRequest,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Suspend any account regardless of KYC state."""
    target = await get_user_by_id(db, user_id)
    if not target:
        raise HTTPException(status_code=404, detail="User not found")

    current_status = target.status
    if not await admin_suspend_user(db, user_id, payload.reason):
        if current_status == AccountStatus.SUSPENDED.value:
            raise HTTPException(status_code=409, detail="User is already suspended")
        raise HTTPException(status_code=409, detail=f"User account is {current_status}")

    await log_admin_action(
        db,
        admin_id=current_user.id,
        action=AuditAction.USER_SUSPEND,
        target_user_id=user_id,
        details={"reason": payload.reason},
    )

    logger.info("Admin %s suspended user %s", current_user.email, user_id)
    return MessageResponse(message="User suspended")


@router.post("/compliance/run", response_model=ComplianceRunResponse)
async def run_compliance_check(
    check_date: Optional[date] = Query(None, description="Day to evaluate; defaults to yesterday"),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    session_factory=Depends(get_session_factory),
):
    """Run the daily compliance sweep immediately."""
    summary = await check_daily_compliance(session_factory=session_factory, check_date=check_date)

    await log_admin_action(
        db,
        admin_id=current_user.id,
        action=AuditAction.COMPLIANCE_RUN,
        details={"check_date": summary["check_date"], "suspended": summary["suspended"]},
    )
    return summary


@router.get("/users/{user_id}/audit-log", response_model=List[AuditLogEntry])
async def get_user_audit_log(
    user_id: UUID,
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Admin actions taken against a user, newest first."""
    if not await get_user_by_id(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return await list_admin_actions(db, user_id, limit=limit)
