"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, key names and display thresholds are validated once at
startup instead of being scattered across modules.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Key-value backend to use"
    )
    path: str = Field(
        default="expense_tracker_data.json",
        description="Path of the JSON file used by the file backend"
    )
    max_bytes: Optional[int] = Field(
        default=None,
        ge=1,
        description="Optional capacity limit for stored values, in bytes"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a file write is attempted before giving up"
    )

    # Key names
    expenses_key: str = Field(
        default="expenseTracker:expenses",
        min_length=1,
        description="Key holding the JSON-encoded expense collection"
    )
    budget_key: str = Field(
        default="expenseTracker:budget",
        min_length=1,
        description="Key holding the monthly budget"
    )
    theme_key: str = Field(
        default="expenseTracker:theme",
        min_length=1,
        description="Key holding the theme preference"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for emitted log records"
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON (False gives console output)"
    )

    # Budget display
    budget_warning_percentage: float = Field(
        default=80.0,
        gt=0.0,
        le=100.0,
        description="Percentage of budget at which spending is flagged as near the limit"
    )

    # Default view
    default_sort_key: Optional[str] = Field(
        default="dateDesc",
        description="Sort key used when the caller does not pick one"
    )
    default_to_current_month: bool = Field(
        default=True,
        description="Preselect the current month in the default view"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an
    "<name>_error" entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
