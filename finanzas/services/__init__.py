"""Services package."""

from finanzas.services.storage import (
    ImportFormatError,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    NotFoundError,
    PersistenceError,
    StorageError,
)

__all__ = [
    # Storage services
    "ImportFormatError",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorageInterface",
    "NotFoundError",
    "PersistenceError",
    "StorageError",
]
