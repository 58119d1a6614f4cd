"""Work-time endpoints for the signed-in user."""

from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user, get_active_user, get_work_time_tracker
from app.models.earning import EarningType
from app.models.user import User
from app.schemas.work_time import WorkTimeResponse, ActivityResponse, EarningOut
from app.schemas.suspension import SuspensionStatusResponse
from app.services.ledger_service import list_user_earnings
from app.services.suspension_service import get_suspension_status
from app.services.work_time_tracker import WorkTimeTracker

router = APIRouter()


@router.get("/work-time", response_model=WorkTimeResponse)
async def get_work_time(
    current_user: User = Depends(get_current_user),
    tracker: WorkTimeTracker = Depends(get_work_time_tracker),
):
    """Hours worked today, hours remaining and whether the 8-hour target is met."""
    return tracker.get_user_work_hours(current_user.id)


@router.post("/update-activity", response_model=ActivityResponse)
async def update_activity(
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_active_user),
    tracker: WorkTimeTracker = Depends(get_work_time_tracker),
):
    """Activity heartbeat.

    The tracker update runs after the response is sent; it logs its own
    storage errors, so the client always gets success once authenticated.
    """
    background_tasks.add_task(tracker.update_activity, current_user.id)
    return ActivityResponse(success=True)


@router.get("/suspension-status", response_model=SuspensionStatusResponse)
async def get_my_suspension_status(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_suspension_status(db, current_user.id)


@router.get("/earnings", response_model=List[EarningOut])
async def get_my_earnings(
    type: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Ledger rows for the current user, oldest first. Filter with ?type=."""
    earning_type = None
    if type is not None:
        try:
            earning_type = EarningType(type)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown earning type: {type}")
    return await list_user_earnings(db, current_user.id, earning_type)
