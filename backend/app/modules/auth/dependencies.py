from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.database import get_db
from app.core.exceptions import AuthorizationError, InvalidTokenError, UserNotFoundError
from app.core.logging_config import logger, set_user_id
from app.core.security import verify_token
from app.models.user import User

# auto_error=False: a missing header must be a 401 with our error body
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Resolve the caller from the bearer token.

    401 when the header is absent or the token does not verify, 404 when the
    token refers to a user that no longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise InvalidTokenError("Access token is required")

    try:
        payload = verify_token(credentials.credentials)
    except InvalidTokenError as exc:
        logger.log_auth_event(event="token", success=False, reason=exc.message)
        raise

    user_id = str(payload["sub"])
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise UserNotFoundError(user_id)

    request.state.user_id = user_id
    set_user_id(user_id)
    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Caller must be an admin according to the stored record, not the token claims"""
    if not current_user.is_admin:
        raise AuthorizationError("Only administrators can access this resource")
    return current_user
