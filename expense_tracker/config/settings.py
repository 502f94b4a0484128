"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see which storage backend is active and which
per-entry limit applies, and ensures configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    expenses_sheet_name: str = Field(
        default="Expenses",
        description="Name of the sheet holding the ledger"
    )
    budget_sheet_name: str = Field(
        default="Budget",
        description="Name of the sheet holding the monthly budget"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from EXPENSE_TRACKER_* environment variables
    and the .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
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
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local structured logs"
    )

    # Storage
    storage_backend: str = Field(
        default="local",
        pattern="^(local|google_sheets|memory)$",
        description="Where the ledger and budget are persisted"
    )
    data_file: str = Field(
        default="~/.expense_tracker/storage.json",
        description="JSON document used by the local storage backend"
    )

    # Budget and entry rules
    entry_limit: float = Field(
        default=0.0,
        ge=0.0,
        allow_inf_nan=False,
        description="Per-entry spending ceiling (0 disables the check)"
    )
    currency_code: str = Field(
        default="PHP",
        min_length=3,
        max_length=3,
        description="ISO currency code used when formatting amounts"
    )
    category_grouping: str = Field(
        default="category",
        pattern="^(category|display_label)$",
        description="How the budget breakdown groups records"
    )

    # Audit
    audit_history_size: int = Field(
        default=500,
        ge=1,
        description="How many audit events the in-memory audit trail keeps"
    )

    @property
    def data_file_path(self) -> Path:
        """Get the local storage file as an expanded path."""
        return Path(self.data_file).expanduser()

    @property
    def has_entry_limit(self) -> bool:
        return self.entry_limit > 0


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

    # Sub-settings are loaded lazily so the app runs with partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

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
    Useful for startup checks and the settings page.
    """
    results = {}

    settings = get_settings()

    try:
        app_settings = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)
        return results

    # Google Sheets is only required when it is the active backend
    if app_settings.storage_backend == "google_sheets":
        try:
            _ = settings.google_sheets
            results["google_sheets"] = True
        except Exception as e:
            results["google_sheets"] = False
            results["google_sheets_error"] = str(e)

    return results
