from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
import secrets

from app.core.database import get_db
from app.core.config import settings
from app.core.exceptions import AuthorizationError, ConflictError, InvalidCredentialsError
from app.core.security import verify_password, get_password_hash, issue_token
from app.core.logging_config import logger, set_user_id
from app.core.rate_limiter import register_rate_limit, login_rate_limit
from app.models.user import User
from app.schemas.auth import UserRegister, UserLogin, UserResponse, AuthResponse
from app.modules.auth.dependencies import get_current_user


router = APIRouter()


def _admin_key_matches(admin_key: str) -> bool:
    configured = settings.ADMIN_REGISTRATION_KEY
    return bool(configured) and secrets.compare_digest(admin_key.encode(), configured.encode())


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@register_rate_limit()
async def register(
    request: Request,
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register new user (rate limited). A valid admin_key makes the account an admin."""
    client_ip = request.client.host if request.client else "unknown"

    result = await db.execute(
        select(User).where(User.email == user_data.email)
    )
    if result.scalar_one_or_none():
        logger.log_auth_event(
            event="register",
            success=False,
            user_email=user_data.email,
            reason="Email already registered",
            client_ip=client_ip
        )
        raise ConflictError("Email already registered", code="EMAIL_EXISTS")

    is_admin = False
    if user_data.admin_key:
        if not _admin_key_matches(user_data.admin_key):
            logger.log_auth_event(
                event="register",
                success=False,
                user_email=user_data.email,
                reason="Invalid admin registration key",
                client_ip=client_ip
            )
            raise AuthorizationError("Invalid admin registration key")
        is_admin = True

    user = User(
        name=user_data.name,
        lastname=user_data.lastname,
        email=user_data.email,
        phone=user_data.phone,
        hashed_password=get_password_hash(user_data.password),
        is_admin=is_admin,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        await db.rollback()
        raise ConflictError("Email already registered", code="EMAIL_EXISTS")
    await db.refresh(user)

    set_user_id(str(user.id))
    logger.log_auth_event(
        event="register",
        success=True,
        user_email=user.email,
        client_ip=client_ip,
        is_admin=is_admin
    )

    return {"token": issue_token(user), "user": user}


@router.post("/login", response_model=AuthResponse)
@login_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login (rate limited). Unknown email and wrong password fail identically."""
    client_ip = request.client.host if request.client else "unknown"

    result = await db.execute(
        select(User).where(User.email == credentials.email)
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.log_auth_event(
            event="login",
            success=False,
            user_email=credentials.email,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise InvalidCredentialsError()

    set_user_id(str(user.id))
    logger.log_auth_event(event="login", success=True, user_email=user.email, client_ip=client_ip)

    return {"token": issue_token(user), "user": user}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info"""
    return current_user
