"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, display preferences and reporting thresholds are all
validated once at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="json",
        pattern="^(json|memory)$",
        description="Storage backend: 'json' files on disk or 'memory'"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per storage key"
    )

    # Record list names within the store
    transactions_key: str = Field(
        default="finance-transactions",
        min_length=1,
        description="Key of the transaction list"
    )
    budgets_key: str = Field(
        default="finance-budgets",
        min_length=1,
        description="Key of the budget list"
    )
    audit_key: str = Field(
        default="finance-audit",
        min_length=1,
        description="Key of the persisted audit trail"
    )
    audit_max_events: int = Field(
        default=500,
        ge=0,
        description="How many audit events to keep in the store (0 disables persistence)"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
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
    log_level: str = Field(
        default="INFO",
        description="Logging level for the structured logger"
    )

    # Display
    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=5,
        description="Symbol prefixed to formatted amounts"
    )
    recent_transactions_limit: int = Field(
        default=3,
        ge=1,
        le=50,
        description="How many transactions the dashboard lists as recent"
    )
    chart_months: int = Field(
        default=6,
        ge=1,
        le=36,
        description="How many months the monthly expenses chart covers"
    )

    # Budget progress thresholds (percent of budget used)
    budget_warning_percent: float = Field(
        default=50.0,
        ge=0.0,
        description="Above this share of the budget, progress turns to warning"
    )
    budget_danger_percent: float = Field(
        default=80.0,
        ge=0.0,
        description="Above this share of the budget, progress turns to danger"
    )

    # Validation thresholds
    max_reasonable_amount: float = Field(
        default=1000000.0,
        gt=0,
        description="Maximum reasonable transaction amount (for sanity checking)"
    )
    future_date_tolerance_days: int = Field(
        default=31,
        ge=0,
        description="How many days in the future a transaction date can be"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any casing of the standard level names."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode='after')
    def validate_thresholds(self) -> 'AppSettings':
        if self.budget_danger_percent < self.budget_warning_percent:
            raise ValueError("Budget danger threshold cannot be below the warning threshold")
        return self


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

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
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
