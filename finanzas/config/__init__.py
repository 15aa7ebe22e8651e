"""Configuration package."""

from finanzas.config.settings import (
    AppSettings,
    BackupSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BackupSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
