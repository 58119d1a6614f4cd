"""Earnings ledger. Rows are append-only; corrections are new rows."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum

from app.core.database import Base


class EarningType(str, enum.Enum):
    TASK = "task"
    REFERRAL = "referral"
    SIGNUP_BONUS = "signup_bonus"
    REACTIVATION_FEE = "reactivation_fee"


class Earning(Base):
    __tablename__ = "earnings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False, index=True)
    amount = Column(Numeric(8, 2), nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="earnings")
