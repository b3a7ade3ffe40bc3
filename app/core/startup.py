# app/core/startup.py
import logging

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter
from google import genai

from app.core.config import load_gemini_api_key, settings

logger = logging.getLogger(__name__)

redis_client_instance: redis.Redis | None = None
llm_clients = {}


async def startup_event(app: FastAPI):
    """
    Initialize resources on application startup.
    """
    global redis_client_instance

    try:
        api_key = load_gemini_api_key()
        if api_key:
            llm_clients["gemini"] = genai.Client(api_key=api_key)
            logger.info("Gemini client initialized with model %s.", settings.REFLECTION_MODEL)

        redis_client_instance = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
        await FastAPILimiter.init(redis_client_instance, prefix="limit:")
        logger.info("FastAPILimiter initialized successfully.")

    except Exception as e:
        logger.exception("Failed to startup: %s", e)
        raise


async def shutdown_event(app: FastAPI):
    """
    Release resources acquired in startup_event.
    """
    llm_clients.clear()
    if redis_client_instance is not None:
        await redis_client_instance.aclose()
