"""User model with KYC, work-time and suspension state."""

from sqlalchemy import Column, String, DateTime, Date, Boolean, Integer, Float, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from datetime import datetime
from app.core.config import settings
from app.core.database import Base


class KycStatus(str, enum.Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    role = Column(String, nullable=False, default="user")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # KYC
    kyc_status = Column(String, nullable=False, default=KycStatus.PENDING.value, index=True)
    verification_status = Column(String, nullable=False, default=VerificationStatus.PENDING.value, index=True)

    # Account state
    status = Column(String, nullable=False, default=AccountStatus.ACTIVE.value, index=True)
    balance = Column(Numeric(10, 2), nullable=False, default=0)

    # Work-time tracking
    daily_work_minutes = Column(Float, nullable=False, default=0.0)
    last_active_time = Column(DateTime, nullable=True)
    daily_work_reset_at = Column(DateTime, nullable=True)

    # Suspension
    consecutive_failed_days = Column(Integer, nullable=False, default=0)
    last_compliance_date = Column(Date, nullable=True)
    suspended_at = Column(DateTime, nullable=True)
    suspension_reason = Column(String, nullable=True)
    reactivation_fee_paid = Column(Boolean, nullable=False, default=False)
    reactivation_fee_amount = Column(Numeric(8, 2), nullable=False, default=settings.REACTIVATION_FEE)

    # Relationships
    earnings = relationship("Earning", back_populates="user")
    notifications = relationship("Notification", back_populates="user")
    admin_actions = relationship("AdminAuditLog", foreign_keys="AdminAuditLog.admin_id", back_populates="admin")
    audit_logs_as_target = relationship("AdminAuditLog", foreign_keys="AdminAuditLog.target_user_id", back_populates="target_user")

    @property
    def is_kyc_complete(self) -> bool:
        """KYC approved and identity verified: the user is subject to work-time monitoring."""
        return (
            self.kyc_status == KycStatus.APPROVED.value
            and self.verification_status == VerificationStatus.VERIFIED.value
        )

    @property
    def is_suspended(self) -> bool:
        return self.status == AccountStatus.SUSPENDED.value
