"""
Configuration settings for Tidepool.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    database_path: Path = Field(
        default=Path.home() / ".tidepool" / "state.db",
        description="SQLite database file for items, sessions and learner state",
    )

    # ========================================
    # Study Sessions
    # ========================================
    session_card_limit: int = Field(
        default=20,
        ge=1,
        description="Maximum number of due cards in one session",
    )
    rng_seed: int | None = Field(
        default=None,
        description="Seed for loot rolls (unset for a fresh seed every run)",
    )
    default_companion: str | None = Field(
        default=None,
        description="Companion to activate when none is active and it is unlocked",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Minimum loguru level written to stderr",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value

    @field_validator("default_companion", mode="before")
    @classmethod
    def _blank_companion(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
