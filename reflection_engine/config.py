"""Runtime configuration loaded from the environment.

Values are read from ``REFLECTION_*`` environment variables or an optional
``.env`` file in the working directory.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings with validation."""

    model_config = SettingsConfigDict(
        env_prefix="REFLECTION_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")  # "text" or "json"

    # Look-ahead window for the due-soon filter preset
    DUE_SOON_DAYS: int = Field(default=7, ge=0)

    # Wellness targets that map to a sub-score of 100
    STEPS_GOAL: int = Field(default=10000, gt=0)
    EXERCISE_MINUTES_GOAL: int = Field(default=30, gt=0)
    STAND_HOURS_GOAL: int = Field(default=12, gt=0)


settings = Settings()
