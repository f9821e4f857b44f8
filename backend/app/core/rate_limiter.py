"""
Rate Limiting for ProjectPartner API
====================================
slowapi limiter keyed by authenticated user when known, else client IP.

Every route shares the default limit (RATE_LIMIT_PER_MINUTE per key), applied
by SlowAPIMiddleware. The credential endpoints carry stricter limits:
- /auth/register: REGISTER_RATE_LIMIT (3/minute)
- /auth/login: LOGIN_RATE_LIMIT (5/minute)

Storage defaults to in-process memory; point RATE_LIMIT_STORAGE_URI at
redis:// when running more than one worker.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging_config import logger


def get_user_identifier(request: Request) -> str:
    """
    Rate limit key: authenticated user ID when the auth dependency already
    resolved one, otherwise the client IP.
    """
    user_id = getattr(request.state, 'user_id', None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """429 with Retry-After and the usual {msg} error body"""
    retry_after = exc.detail.split(":")[-1].strip() if exc.detail else "60"

    logger.warning(
        f"[RateLimit] Exceeded for {get_user_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "msg": "Too many requests. Please slow down.",
            "code": "RATE_LIMIT_EXCEEDED",
            "detail": str(exc.detail),
        },
        headers={"Retry-After": retry_after if retry_after.isdigit() else "60"},
    )


def register_rate_limit():
    return limiter.limit(settings.REGISTER_RATE_LIMIT)


def login_rate_limit():
    return limiter.limit(settings.LOGIN_RATE_LIMIT)
