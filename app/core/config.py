# app/core/config.py
import logging
import os
from typing import List, Optional

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    AUTH_CODE_EXPIRE_MINUTES: int = 60
    REQUIRE_EMAIL_CONFIRMATION: bool = True
    COOKIE_SECURE: bool = True

    DATABASE_URL: str

    REDIS_HOST: str = "redis"
    REDIS_PORT: int = 6379
    REDIS_URL: str = f"redis://{REDIS_HOST}:{REDIS_PORT}"
    VIEW_CACHE_TTL_SECONDS: int = 300

    FRONTEND_URL: str = "http://localhost:5173"
    LOGIN_PATH: str = "/login"
    DASHBOARD_PATH: str = "/dashboard"
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    ALLOWED_HOSTS: List[str] = ["localhost", "127.0.0.1", "backend", "nginx"]

    JOURNAL_TIMEZONE: str = "UTC"

    GEMINI_API_KEY: Optional[str] = None
    REFLECTION_MODEL: str = "gemini-2.0-flash-lite"
    REFLECTION_MAX_OUTPUT_TOKENS: int = 400
    REFLECTION_MAX_WORDS: int = 250

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        extra = "allow"

    @property
    def LOGIN_URL(self) -> str:
        return f"{self.FRONTEND_URL}{self.LOGIN_PATH}"

    @property
    def DASHBOARD_URL(self) -> str:
        return f"{self.FRONTEND_URL}{self.DASHBOARD_PATH}"


settings = Settings()


def load_gemini_api_key() -> Optional[str]:
    """
    Returns the Gemini API key from the environment, falling back to the secrets file.
    Returns None when neither is available; reflection generation is then disabled.
    """
    if settings.GEMINI_API_KEY:
        return settings.GEMINI_API_KEY

    base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    secrets_path = os.path.join(base_dir, "secrets", "Google-ai-studio-gemini-key.txt")
    try:
        with open(secrets_path, "r") as file:
            return file.read().strip() or None
    except FileNotFoundError:
        logger.warning("No Gemini API key configured; weekly reflections are disabled.")
        return None
