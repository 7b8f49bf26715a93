"""In-memory key-value store, used for tests and as a fallback."""

import copy
from typing import Optional

from finance_tracker.services.storage.interface import KeyValueStore


class InMemoryStore(KeyValueStore):
    """
    Dict-backed store.

    Records are deep-copied in and out so callers can never mutate
    the stored state by accident.
    """

    def __init__(self, initial: Optional[dict[str, list[dict]]] = None):
        self._data: dict[str, list[dict]] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> list[dict]:
        return copy.deepcopy(self._data.get(key, []))

    def set(self, key: str, records: list[dict]) -> None:
        self._data[key] = copy.deepcopy(list(records))

    def is_available(self) -> bool:
        return True

    def keys(self) -> list[str]:
        return list(self._data)
