"""
Abstract Storage Interface

DESIGN DECISION: Persistence is a plain key-value store of named record lists.
Each key holds a JSON-compatible list of dicts, read and written whole.
This allows us to:
1. Keep records on disk as readable JSON files
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally simple - no queries, no partial writes.
Filtering and aggregation happen in Python over the loaded list.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """
    Abstract interface for a synchronous key-value store.

    Any storage implementation (JSON files, memory, ...) must implement
    these methods.
    """

    @abstractmethod
    def get(self, key: str) -> list[dict]:
        """
        Read the record list stored under a key.

        Args:
            key: Name of the record list

        Returns:
            The stored records, or an empty list if the key was never written

        Raises:
            StorageUnavailableError: If the backend cannot be read
            CorruptDataError: If the stored content is not a list of records
        """
        pass

    @abstractmethod
    def set(self, key: str, records: list[dict]) -> None:
        """
        Replace the record list stored under a key.

        Args:
            key: Name of the record list
            records: JSON-compatible dicts to store

        Raises:
            StorageUnavailableError: If the write fails
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the backend can currently be read and written."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageUnavailableError(StorageError):
    """The storage backend cannot be read or written."""
    pass


class CorruptDataError(StorageError):
    """Stored content could not be decoded into records."""
    pass
