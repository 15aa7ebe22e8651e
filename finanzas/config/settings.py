"""
Configuration Management for Finanzas

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, backup naming and logging behaviour are the only
knobs the application has, and all of them are validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANZAS_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per storage slot"
    )
    slot_key: str = Field(
        default="finance_app_data_v1",
        min_length=1,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Name of the slot that holds the transaction document"
    )
    write_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts made for a single slot write before giving up"
    )


class BackupSettings(BaseSettings):
    """Backup file configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANZAS_BACKUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    file_prefix: str = Field(
        default="finanzas_backup_",
        description="Prefix of exported backup file names"
    )
    indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="JSON indentation used for exported backups"
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

    debug_mode: bool = Field(
        default=False,
        description="Force DEBUG logging regardless of log_level"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for application logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines (console renderer otherwise)"
    )

    # Calendar
    timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone used for calendar classification (system local if unset)"
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

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Fail at startup rather than on the first calendar query."""
        if v is None or not v.strip():
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Timezone object, or None to use the system local zone."""
        return ZoneInfo(self.timezone) if self.timezone else None


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
    def backup(self) -> BackupSettings:
        return BackupSettings()

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

    for name in ("storage", "backup", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
