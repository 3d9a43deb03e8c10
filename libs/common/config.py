from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production", "test"] = "local"
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "America/Sao_Paulo"
    CURRENCY: str = "BRL"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Storage
    DATABASE_URL: str = "sqlite:///./clubdesk.db"
    STORAGE_NAMESPACE: str = "clubdesk"

    # Dues
    DUES_DUE_DAY: int = 5
    REMINDER_WINDOW_DAYS: int = 3

    # Scheduler intervals (hours)
    OVERDUE_SWEEP_HOURS: int = 24
    OBLIGATION_SWEEP_HOURS: int = 1
    REMINDER_REFRESH_HOURS: int = 6
    MAINTENANCE_CHECK_HOURS: int = 24
    AUTO_BACKUP_HOURS: int = 24
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_POLL_SECONDS: int = 60

    # Seeded when the user list is empty
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_EMAIL: str = "admin@clubdesk.app"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DUES_DUE_DAY")
    @classmethod
    def validate_due_day(cls, v: int) -> int:
        # Day 29-31 does not exist in every month
        if not 1 <= v <= 28:
            raise ValueError("DUES_DUE_DAY must be between 1 and 28")
        return v

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: str) -> str:
        if v.startswith("sqlite+aiosqlite://"):
            return v.replace("sqlite+aiosqlite://", "sqlite://", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
