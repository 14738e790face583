from __future__ import annotations

from datetime import date
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    BOT_TOKEN: str = ""
    DATABASE_URL: str = "sqlite+aiosqlite:///./reps_bot.db"

    # Challenges
    MAX_ACTIVE_CHALLENGES: int = 3
    # Streak day numbers are counted from this date on both sides of the diff
    STREAK_EPOCH: date = date(2024, 1, 1)

    # Others
    DEFAULT_TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
