"""Services package."""

from finance_tracker.services.storage import (
    BudgetRepository,
    CorruptDataError,
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
    TransactionRepository,
)

__all__ = [
    "BudgetRepository",
    "CorruptDataError",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
    "TransactionRepository",
]
