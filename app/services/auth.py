"""Bearer-token helpers.

Tokens are issued by the account service at sign-in; this API verifies them
and resolves the subject to a User row. There is no password handling here.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID
from jose import JWTError, jwt
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.core.config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(days=7)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    claims = dict(data)
    claims["exp"] = datetime.utcnow() + (expires_delta or ACCESS_TOKEN_TTL)
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Verified claims, or None for an expired, tampered or malformed token."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning("Rejected bearer token: %s", e)
        return None


def user_id_from_token(token: str) -> Optional[UUID]:
    claims = decode_access_token(token)
    subject = claims.get("sub") if claims else None
    if not subject:
        return None
    try:
        return UUID(str(subject))
    except ValueError:
        logger.warning("Bearer token subject is not a user id: %r", subject)
        return None


async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """Case-insensitive lookup; emails are stored as entered at sign-up."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalars().first()
