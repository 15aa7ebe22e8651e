"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for the persistence
boundary. This allows us to:
1. Keep the store in plain JSON files on the local disk
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally tiny: a named slot holding text.
Serialization belongs to the transaction store, not to the backend.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for a key-value persistent store.

    Any storage implementation (JSON files, memory, ...)
    must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the text stored under a key.

        Args:
            key: Slot name

        Returns:
            The stored text, or None if the slot is empty

        Raises:
            PersistenceError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Replace the text stored under a key.

        Args:
            key: Slot name
            value: Text to store

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Empty a slot.

        Args:
            key: Slot name

        Returns:
            True if something was deleted
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceError(StorageError):
    """The underlying store could not be read or written."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class ImportFormatError(StorageError):
    """An incoming document does not have the expected shape."""
    pass
