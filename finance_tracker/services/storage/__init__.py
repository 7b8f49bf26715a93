"""
Storage Services Package

Provides the key-value store interface, its implementations and the
typed repositories built on top of it.
"""

from finance_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
)
from finance_tracker.services.storage.json_file import JsonFileStore
from finance_tracker.services.storage.memory import InMemoryStore
from finance_tracker.services.storage.repositories import (
    BudgetRepository,
    TransactionRepository,
)

__all__ = [
    # Interfaces
    "KeyValueStore",
    # Exceptions
    "CorruptDataError",
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
    # Repositories
    "BudgetRepository",
    "TransactionRepository",
]
