"""FastAPI dependencies for authentication and authorization."""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db, async_session
from app.models.user import User, AccountStatus
from app.services.auth import user_id_from_token, get_user_by_id
from app.services.work_time_tracker import WorkTimeTracker, work_time_tracker

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _user_from_token(token: str, db: AsyncSession) -> Optional[User]:
    user_id = user_id_from_token(token)
    if user_id is None:
        return None
    return await get_user_by_id(db, user_id)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract and validate the current user from JWT token.

    Suspended users are returned too, so they can read their status and
    reactivate. Raises 401 if no token or invalid token.
    """
    if not credentials:
        raise _unauthorized("Not authenticated")

    user = await _user_from_token(credentials.credentials, db)
    if not user:
        raise _unauthorized("Could not validate credentials")

    if user.status == AccountStatus.BANNED.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but returns None instead of raising 401."""
    if not credentials:
        return None
    return await _user_from_token(credentials.credentials, db)


async def get_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Current user, rejecting suspended accounts with the reactivation details."""
    if current_user.is_suspended:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "Account suspended",
                "requiresReactivation": True,
                "suspensionReason": current_user.suspension_reason,
                "reactivationFee": str(current_user.reactivation_fee_amount),
            },
        )
    return current_user


def require_role(*roles: str):
    """Dependency factory that checks if user has one of the required roles.

    Usage:
        require_admin = require_role("admin", "superadmin")

        @router.get("/admin-only")
        async def admin_route(user: User = Depends(require_admin)):
            ...
    """
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin access required"
            )
        return current_user

    return role_checker


# Pre-configured role dependencies
require_admin = require_role("admin", "superadmin")


def get_work_time_tracker() -> WorkTimeTracker:
    return work_time_tracker


def get_session_factory():
    """Session factory for work that outlives the request session (sweeps)."""
    return async_session
