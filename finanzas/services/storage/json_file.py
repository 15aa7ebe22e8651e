"""
JSON File Storage Implementation

DESIGN DECISION: Each slot is one file, ``<data_dir>/<key>.json``.
A single personal ledger is small, so the whole document is rewritten
on every save.

TRADEOFFS:
- No partial writes: we write a temp file and rename it over the old one
- No locking: the application is single-process, single-writer
- Transient OS errors (e.g. antivirus holding the file) are retried
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finanzas.services.storage.interface import (
    KeyValueStorageInterface,
    PersistenceError,
)


class JsonFileStorage(KeyValueStorageInterface):
    """
    Local-disk implementation of the key-value slot.

    Slots are created lazily: reading a missing slot returns None.
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        write_attempts: int = 3,
    ):
        self._data_dir = Path(data_dir)
        self._write_attempts = write_attempts

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File backing a slot."""
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        """Read a slot; a missing file is an empty slot."""
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, value: str) -> None:
        """Atomically replace a slot, retrying transient OS errors."""
        path = self.path_for(key)
        retrying = Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            retrying(self._write_atomic, path, value)
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Failed to delete {path}: {e}") from e

    def _write_atomic(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
