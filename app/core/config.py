# app/core/config.py
import pathlib
import logging
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

logger = logging.getLogger("app.core.config")  # Logger for this module

BASE_DIR = pathlib.Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    PROJECT_NAME: str = "Event Submissions Admin"
    API_V1_STR: str = "/api/v1"
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'event_admin.db'}"

    # Upstream backend serving GET /api/websites/{eventCode}
    SUBMISSIONS_API_BASE_URL: str = "http://localhost:3000"
    SUBMISSIONS_API_TOKEN: Optional[str] = None # Sent as a Bearer token when set
    SUBMISSIONS_API_TIMEOUT_SECONDS: float = 20.0

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    ACCESS_TOKEN_COOKIE_NAME: str = "admin_access_token"
    JWT_SECRET_KEY: str = "change-this-secret-key-before-deploying"
    JWT_ALGORITHM: str = "HS256"

    # Where unauthenticated admins are sent
    SIGNIN_PATH: str = "/admin/login"
    TEMPLATES_DIR: pathlib.Path = BASE_DIR / "app" / "templates"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache()
def get_settings():
    settings_instance = Settings()
    logger.info(f"Submissions API base URL set to: {settings_instance.SUBMISSIONS_API_BASE_URL}")
    return settings_instance

settings = get_settings()
