"""In-memory storage, used by tests and for throwaway sessions."""

from typing import Optional

from finanzas.services.storage.interface import KeyValueStorageInterface


class InMemoryStorage(KeyValueStorageInterface):
    """Key-value slots kept in a plain dict."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._slots: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def write(self, key: str, value: str) -> None:
        self._slots[key] = value
        self.write_count += 1

    def delete(self, key: str) -> bool:
        return self._slots.pop(key, None) is not None
