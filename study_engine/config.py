"""Engine settings loaded from environment variables or a ``.env`` file."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Tunables for retention alerts, task views and logging."""

    model_config = SettingsConfigDict(
        env_prefix="STUDY_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_strength: float = Field(
        default=1.0,
        gt=0,
        description="Decay strength used when a module has none (or a non-positive one)",
    )
    memory_leak_threshold: int = Field(
        default=90,
        ge=0,
        le=100,
        description="Modules retained below this score are listed as memory leaks",
    )
    memory_leak_limit: int = Field(default=3, ge=1, description="Maximum memory leaks surfaced at once")
    upcoming_days: int = Field(default=7, ge=0, description="Width of the 'upcoming' todo view in days")
    log_level: str = Field(default="WARNING", description="loguru level for the stderr sink")


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()
