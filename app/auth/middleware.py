"""Authentication dependency for bearer-token verification."""

from typing import Optional
from uuid import UUID
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.crypto import decode_token
from app.db import get_db
from app.errors import AuthError
from app.models.user import User

# Missing credentials are reported as 401 by get_current_user, not 403
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer access token to an active user.

    Raises:
        AuthError: If the token is missing, invalid, expired or the user is gone
    """
    if not credentials:
        raise AuthError("Access token required")

    try:
        payload = decode_token(credentials.credentials)
        user_id = UUID(payload["sub"])
    except (JWTError, KeyError, ValueError):
        raise AuthError("Invalid or expired token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user or not user.is_active:
        raise AuthError("Invalid or expired token")

    return user
