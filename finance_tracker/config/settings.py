"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
User preferences (budget cap, currencies) are NOT configuration. They
live in UserSettings and travel with the data file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from FINANCE_TRACKER_* environment variables
    and the .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Persistence
    storage_path: Path = Field(
        default=Path("data/finance-tracker.json"),
        description="JSON file holding records and settings"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level written to the activity log"
    )
    log_json: bool = Field(
        default=True,
        description="Render log lines as JSON (console renderer otherwise)"
    )

    # Display
    recent_days: int = Field(
        default=7,
        ge=1,
        le=365,
        description="Window for the dashboard's recent records"
    )
    search_case_insensitive: bool = Field(
        default=True,
        description="Whether search patterns ignore case"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return AppSettings()
