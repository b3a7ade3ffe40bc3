# app/core/security.py
import secrets
from typing import Optional

from redis.asyncio import Redis

from app.core.config import settings

AUTH_CODE_PREFIX = "auth_code:"


async def issue_auth_code(redis_client: Redis, user_id: int) -> str:
    """Creates a single-use authorization code bound to a user, expiring after AUTH_CODE_EXPIRE_MINUTES."""
    code = secrets.token_urlsafe(32)
    await redis_client.set(
        f"{AUTH_CODE_PREFIX}{code}",
        str(user_id),
        ex=settings.AUTH_CODE_EXPIRE_MINUTES * 60,
    )
    return code


async def consume_auth_code(redis_client: Redis, code: str) -> Optional[int]:
    """Returns the user id bound to the code and invalidates it. Unknown or expired codes return None."""
    user_id = await redis_client.getdel(f"{AUTH_CODE_PREFIX}{code}")
    if user_id is None:
        return None
    return int(user_id)
