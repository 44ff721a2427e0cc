"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here and resolved once
at startup. Components receive the values they need through their
constructors and never read the environment themselves, so tests can
point them at a throwaway database.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_FORMATS = ("json", "console")


class DatabaseSettings(BaseSettings):
    """Relational store connection configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSES_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="sqlite:///expenses.db",
        description="SQLAlchemy database URL"
    )
    connect_timeout: int = Field(
        default=10,
        ge=1,
        le=300,
        description="Seconds to wait when opening a connection"
    )
    echo: bool = Field(
        default=False,
        description="Echo every SQL statement to the log"
    )

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Reject blank URLs early instead of at connect time."""
        if not v.strip():
            raise ValueError("Database URL must not be empty")
        return v.strip()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="WARNING",
        description="Minimum level written to stderr"
    )
    log_format: str = Field(
        default="json",
        description="Log renderer: 'json' or 'console'"
    )
    date_format: str = Field(
        default="%m/%d/%Y",
        description="strftime format for the date column of reports"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.strip().lower()
        if fmt not in LOG_FORMATS:
            raise ValueError(f"Log format must be one of {', '.join(LOG_FORMATS)}")
        return fmt


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
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

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

