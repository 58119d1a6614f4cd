"""
Application configuration.
Values are read from environment variables / .env file. Work-time and
suspension thresholds live here so operations can tune them without a deploy.
"""
import os
import logging
from decimal import Decimal
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_ENV: str = "development"
    JWT_SECRET_KEY: str = os.environ.get("JWT_SECRET_KEY", "")
    DATABASE_URL: str

    # Work-time tracking
    DAILY_TARGET_HOURS: int = 8
    HEARTBEAT_GRACE_MINUTES: int = 5
    WORK_TIME_CHECK_HOUR: int = 23  # hour of day the work-time warning sweep fires

    # Suspension engine
    SUSPENSION_THRESHOLD_DAYS: int = 3
    AT_RISK_THRESHOLD_DAYS: int = 2
    REACTIVATION_FEE: Decimal = Decimal("49.00")
    COMPLIANCE_USER_TIMEOUT_SECONDS: float = 10.0

    # Scheduler
    SCHEDULER_ENABLED: bool = True

    class Config:
        env_file = ".env"

    @property
    def daily_target_minutes(self) -> int:
        return self.DAILY_TARGET_HOURS * 60


settings = Settings()

# Validate critical security settings
if not settings.JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY is not set. It must exist as a JWT_SECRET_KEY environment variable. "
        "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )

logger.debug(
    "Work-time settings: target=%dh grace=%dmin threshold=%d days fee=%s",
    settings.DAILY_TARGET_HOURS,
    settings.HEARTBEAT_GRACE_MINUTES,
    settings.SUSPENSION_THRESHOLD_DAYS,
    settings.REACTIVATION_FEE,
)
