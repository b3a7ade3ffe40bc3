# app/core/cache.py
import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)

DASHBOARD_VIEW = "/dashboard"
TODAY_VIEW = "/today"


def view_cache_key(path: str, user_id: int) -> str:
    return f"view:{path}:{user_id}"


async def get_cached_view(redis_client: Redis, path: str, user_id: int) -> Optional[str]:
    try:
        return await redis_client.get(view_cache_key(path, user_id))
    except RedisError as e:
        logger.warning("View cache read failed for %s (user %s): %s", path, user_id, e)
        return None


async def set_cached_view(redis_client: Redis, path: str, user_id: int, payload: str) -> None:
    try:
        await redis_client.set(view_cache_key(path, user_id), payload, ex=settings.VIEW_CACHE_TTL_SECONDS)
    except RedisError as e:
        logger.warning("View cache write failed for %s (user %s): %s", path, user_id, e)


async def revalidate_path(redis_client: Redis, path: str, user_id: int) -> None:
    """Marks the cached rendering of `path` for this user as stale."""
    try:
        await redis_client.delete(view_cache_key(path, user_id))
        logger.debug("Revalidated %s for user %s", path, user_id)
    except RedisError as e:
        logger.warning("Failed to revalidate %s for user %s: %s", path, user_id, e)
