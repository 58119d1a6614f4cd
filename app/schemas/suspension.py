"""Pydantic schemas for suspension status and reactivation."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import Field

from app.schemas.common import CamelModel


class SuspensionStatusResponse(CamelModel):
    is_suspended: bool
    suspended_at: Optional[datetime] = None
    reason: Optional[str] = None
    reactivation_fee: Optional[Decimal] = None
    reactivation_fee_paid: Optional[bool] = None
    consecutive_failed_days: int
    eligible_for_suspension: bool


class ReactivationRequest(CamelModel):
    """Reactivation for a user without a session; identifies the account by email and phone."""
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None


class ReactivationResponse(CamelModel):
    success: bool
    message: str


class AdminSuspendRequest(CamelModel):
    reason: str = Field(min_length=1, max_length=500)


class AtRiskUser(CamelModel):
    id: UUID
    email: str
    full_name: Optional[str]
    consecutive_failed_days: int
    daily_work_minutes: float


class AtRiskUserList(CamelModel):
    users: List[AtRiskUser]
    total: int


class ComplianceRunResponse(CamelModel):
    """Summary of one daily compliance sweep."""
    check_date: date
    checked: int
    met: int
    failed: int
    suspended: int
    skipped: int
    errors: int


class AuditLogEntry(CamelModel):
    id: UUID
    admin_id: UUID
    action: str
    target_user_id: Optional[UUID] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime
