"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "job_portal"

    # JWT session (carried in a cookie, not a bearer header)
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Session cookie
    cookie_name: str = "token"
    cookie_secure: bool = False
    cookie_samesite: str = "strict"

    # CORS - trusted frontend origins
    cors_allowed_origins: List[str] = ["http://localhost:5173"]

    # Client side (sync layer)
    api_base_url: str = "http://localhost:8000/api/v1"
    client_timeout_seconds: float = 10.0

    # App
    log_level: str = "INFO"
    debug: bool = True

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
