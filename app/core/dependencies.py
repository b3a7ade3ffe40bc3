# app/core/dependencies.py
import redis.asyncio as redis
from google import genai

from app.core.config import settings
from app.core.startup import llm_clients


async def get_redis_client():
    """Dependency to provide a Redis client for the view cache and auth codes."""
    redis_client = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    try:
        yield redis_client
    finally:
        await redis_client.aclose()


def get_llm_client() -> genai.Client | None:
    """Dependency to provide the Gemini client, or None when no API key is configured."""
    return llm_clients.get("gemini")
