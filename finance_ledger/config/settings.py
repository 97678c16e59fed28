"""
Configuration Management for Finance Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable the core reads (data file location, budget warning
threshold, log level) is declared and validated in one place.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Main ledger settings.

    Loads configuration from LEDGER_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG level regardless of log_level"
    )

    # Persistence
    data_file: Path = Field(
        default=Path("users.txt"),
        description="Flat text file holding every user profile"
    )

    # Reporting thresholds
    budget_warning_ratio: Decimal = Field(
        default=Decimal("0.9"),
        ge=0,
        le=1,
        description="Spent/budget ratio at which a category is flagged as a warning"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured log output"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept the standard logging level names."""
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get ledger settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
