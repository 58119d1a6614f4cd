"""Pydantic schemas for work-time tracking."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID
from pydantic import Field

from app.schemas.common import CamelModel


class WorkTimeResponse(CamelModel):
    """Today's work time for the current user."""
    hours_worked: float
    hours_remaining: float
    is_requirement_met: bool
    last_active_time: Optional[datetime] = None


class ActivityResponse(CamelModel):
    success: bool


class WorkStatistics(CamelModel):
    """Aggregate work-time snapshot for the admin dashboard."""
    total_active_users: int
    average_hours_worked: float
    users_met_requirement: int
    users_pending_suspension: int = Field(description="Tracked users still below the daily target")


class EarningOut(CamelModel):
    """One ledger row. Fee deductions have a negative amount."""
    id: UUID
    type: str
    amount: Decimal
    description: Optional[str] = None
    created_at: datetime
