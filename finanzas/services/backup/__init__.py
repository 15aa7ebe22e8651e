"""Backup export / import."""

from finanzas.services.backup.backup_service import (
    BackupService,
    backup_filename,
    export_backup,
    parse_backup,
    restore_backup,
    write_backup,
)
from finanzas.services.storage import ImportFormatError

__all__ = [
    "BackupService",
    "ImportFormatError",
    "backup_filename",
    "export_backup",
    "parse_backup",
    "restore_backup",
    "write_backup",
]
