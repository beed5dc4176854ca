# venue_finance/core/config.py
# - Reads env vars, and ".env" when present, through pydantic-settings.

from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./venue_finance.db"

    SECRET_KEY: str = "CHANGE_THIS_TO_RANDOM_SECRET"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # used when a venue has hours configured but no timezone
    DEFAULT_TIMEZONE: str = "UTC"

    SALES_SUMMARY_MAX_DAYS: int = 90

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def sqlalchemy_database_url(self) -> str:
        # Render/Heroku style URLs use the legacy scheme
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url


settings = Settings()
