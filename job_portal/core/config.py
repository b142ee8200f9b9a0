"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # JWT Auth
    access_token_secret: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 10

    # Session cookie
    cookie_name: str = "token"
    # Honour X-Forwarded-Proto from a reverse proxy (Vercel, Render, nginx)
    trust_forwarded_proto: bool = True

    # CORS (comma-separated, same format as the front-end .env)
    cors_origins: str = "http://localhost:5173"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "job_portal"
    jobs_collection: str = "jobs"
    applications_collection: str = "job_applications"
    mongodb_timeout_ms: int = 5000

    # "mongo" or "memory"
    store_backend: str = "mongo"

    # App
    log_level: str = "INFO"
    debug: bool = False

    @property
    def allowed_origins(self) -> List[str]:
        """CORS origins as a list, blanks dropped."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_hours * 3600

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
