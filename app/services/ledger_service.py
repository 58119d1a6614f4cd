"""Earnings ledger helpers.

The ledger is append-only. Fee deductions are recorded as negative rows.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.earning import Earning, EarningType

logger = logging.getLogger(__name__)


def build_earning(
    user_id: UUID,
    amount: Decimal,
    earning_type: EarningType,
    description: Optional[str] = None,
) -> Earning:
    """Build a ledger row; the caller adds it to its own transaction."""
    return Earning(
        user_id=user_id,
        type=earning_type.value,
        amount=amount,
        description=description,
    )


def build_reactivation_fee_charge(user_id: UUID, fee: Decimal) -> Earning:
    return build_earning(
        user_id,
        amount=-fee,
        earning_type=EarningType.REACTIVATION_FEE,
        description="Account reactivation fee",
    )


async def list_user_earnings(
    db: AsyncSession,
    user_id: UUID,
    earning_type: Optional[EarningType] = None,
) -> list[Earning]:
    """Earnings for a user, oldest first."""
    query = select(Earning).where(Earning.user_id == user_id)
    if earning_type is not None:
        query = query.where(Earning.type == earning_type.value)
    result = await db.execute(query.order_by(Earning.created_at))
    return list(result.scalars().all())
