"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
Local JSON files are the production backend; memory is for tests.
"""

from finanzas.services.storage.interface import (
    ImportFormatError,
    KeyValueStorageInterface,
    NotFoundError,
    PersistenceError,
    StorageError,
)
from finanzas.services.storage.json_file import JsonFileStorage
from finanzas.services.storage.memory import InMemoryStorage

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "ImportFormatError",
    "NotFoundError",
    "PersistenceError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
