"""Account reactivation endpoint.

Charges the reactivation fee from the user's in-app balance. Topping up the
balance through the payment gateway happens before this call and is handled
elsewhere.
"""

import logging
import re
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user_optional
from app.models.user import User
from app.schemas.suspension import ReactivationRequest, ReactivationResponse
from app.services.auth import get_user_by_email
from app.services.suspension_service import process_reactivation_fee

router = APIRouter()
logger = logging.getLogger(__name__)


def _digits(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def _matches_identity(user: User, payload: ReactivationRequest) -> bool:
    """Email alone is not enough to spend a balance; the phone must match too."""
    phone = _digits(payload.phone)
    if not phone or phone != _digits(user.phone_number):
        return False
    if payload.name and payload.name.strip().casefold() != (user.full_name or "").strip().casefold():
        return False
    return True


@router.post("/process", response_model=ReactivationResponse)
async def process_reactivation(
    payload: Optional[ReactivationRequest] = None,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """Reactivate a suspended account.

    Acts on the bearer-token user when present. Without a session (suspended
    users may be signed out) the account is identified by email and phone,
    plus the full name when given.
    """
    if current_user is not None:
        user_id = current_user.id
    elif payload and payload.email and payload.phone:
        user = await get_user_by_email(db, payload.email.strip())
        if not user or not _matches_identity(user, payload):
            logger.warning("Reactivation identity mismatch for %s", payload.email.strip())
            return ReactivationResponse(success=False, message="User not found")
        user_id = user.id
    else:
        raise HTTPException(status_code=400, detail="Email and phone are required")

    result = await process_reactivation_fee(db, user_id)

    if result["success"]:
        logger.info("Reactivation succeeded for user %s", user_id)
    else:
        logger.info("Reactivation rejected for user %s: %s", user_id, result["message"])

    return result
