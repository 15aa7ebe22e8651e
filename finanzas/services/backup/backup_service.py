"""
Backup Export / Import

A backup is the stored document pretty-printed to a standalone file:

    {"transactions": [{"id": ..., "type": ..., ...}, ...]}

Restoring is all-or-nothing. The file is fully parsed and validated
before the store is touched, so a bad file leaves the current data as
it was.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional, Union

from finanzas.audit import AuditLogger
from finanzas.models.transaction import TransactionDocument
from finanzas.services.storage import ImportFormatError
from finanzas.store import TransactionStore, decode_json, parse_document


DEFAULT_PREFIX = "finanzas_backup_"
DEFAULT_INDENT = 2


def backup_filename(today: date, prefix: str = DEFAULT_PREFIX) -> str:
    """``finanzas_backup_2024-03-31.json`` style name for a backup taken on ``today``."""
    return f"{prefix}{today.isoformat()}.json"


def export_backup(store: TransactionStore, indent: int = DEFAULT_INDENT) -> str:
    """Serialize the whole store as a pretty-printed JSON document."""
    return json.dumps(
        store.to_document().to_storage_dict(),
        ensure_ascii=False,
        indent=indent,
    )


def parse_backup(text: Union[str, bytes]) -> TransactionDocument:
    """
    Parse and validate backup file contents.

    Raises:
        ImportFormatError: Invalid JSON or not a transaction document
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ImportFormatError(f"Backup file is not UTF-8 text: {e}") from e

    try:
        data = decode_json(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Backup file is not valid JSON: {e}") from e

    return parse_document(data)


class BackupService:
    """Exports the store to backup files and restores it from them."""

    def __init__(
        self,
        store: TransactionStore,
        prefix: str = DEFAULT_PREFIX,
        indent: int = DEFAULT_INDENT,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._prefix = prefix
        self._indent = indent
        self._audit_logger = audit_logger

    def filename(self, today: date) -> str:
        return backup_filename(today, self._prefix)

    def export(self, today: date) -> tuple[str, str]:
        """
        Build a backup for download.

        Returns:
            (filename, json_text)
        """
        filename = self.filename(today)
        text = export_backup(self._store, self._indent)

        if self._audit_logger:
            self._audit_logger.log_backup_exported(filename, len(self._store))

        return filename, text

    def write(self, directory: Union[str, Path], today: date) -> Path:
        """Write a backup file into ``directory`` and return its path."""
        filename, text = self.export(today)
        target = Path(directory) / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        return target

    def restore(self, text: Union[str, bytes]) -> int:
        """
        Replace the whole store with the backup contents.

        Returns the number of restored transactions.

        Raises:
            ImportFormatError: Nothing was changed
            PersistenceError: Replaced in memory but not persisted
        """
        try:
            document = parse_backup(text)
        except ImportFormatError as e:
            if self._audit_logger:
                self._audit_logger.log_backup_rejected(str(e))
            raise

        self._store.replace(document)

        if self._audit_logger:
            self._audit_logger.log_backup_imported(len(document.transactions))

        return len(document.transactions)


def write_backup(
    store: TransactionStore,
    directory: Union[str, Path],
    today: date,
    prefix: str = DEFAULT_PREFIX,
    indent: int = DEFAULT_INDENT,
) -> Path:
    """Write ``store`` as a backup file under ``directory``."""
    return BackupService(store, prefix=prefix, indent=indent).write(directory, today)


def restore_backup(store: TransactionStore, text: Union[str, bytes]) -> int:
    """Replace ``store`` with the contents of a backup file."""
    return BackupService(store).restore(text)
