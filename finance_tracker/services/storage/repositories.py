"""
Record Repositories

Typed CRUD over the key-value store. Each repository owns one record list
and rewrites it whole on every change, the same way the browser storage
this format comes from did.

The repositories validate everything they load: a stored record that no
longer fits the model is reported as CorruptDataError instead of being
silently dropped.
"""

from typing import Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, ValidationError

from finance_tracker.models.finance import (
    Budget,
    BudgetDraft,
    BudgetUpdate,
    Transaction,
    TransactionDraft,
    TransactionUpdate,
)
from finance_tracker.services.storage.interface import CorruptDataError, KeyValueStore


logger = structlog.get_logger(__name__)


class _RecordRepository:
    """Shared list handling for the concrete repositories."""

    model: type[BaseModel]
    entity_name: str

    def __init__(self, store: KeyValueStore, key: str):
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def _load(self) -> list:
        records = []
        for index, raw in enumerate(self._store.get(self._key)):
            try:
                records.append(self.model.model_validate(raw))
            except ValidationError as e:
                raise CorruptDataError(
                    f"Stored {self.entity_name} #{index} under {self._key!r} is invalid: {e}"
                )
        return records

    def _save(self, records: list) -> None:
        self._store.set(self._key, [record.to_record() for record in records])

    def _find_index(self, records: list, record_id: UUID) -> Optional[int]:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index
        return None

    def _get(self, record_id: UUID):
        records = self._load()
        index = self._find_index(records, record_id)
        return records[index] if index is not None else None

    def _append(self, record):
        records = self._load()
        records.append(record)
        self._save(records)
        logger.info(f"{self.entity_name}_stored", id=str(record.id), total=len(records))
        return record

    def _update(self, record_id: UUID, changes: BaseModel):
        records = self._load()
        index = self._find_index(records, record_id)
        if index is None:
            return None

        merged = records[index].model_dump()
        merged.update(changes.model_dump(exclude_unset=True, exclude_none=True))
        updated = self.model.model_validate(merged)

        records[index] = updated
        self._save(records)
        return updated

    def delete(self, record_id: UUID) -> bool:
        """
        Remove a record by ID.

        Returns:
            True if a record was removed, False if the ID was unknown
        """
        records = self._load()
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False
        self._save(remaining)
        return True

    def count(self) -> int:
        return len(self._store.get(self._key))


class TransactionRepository(_RecordRepository):
    """CRUD for transactions."""

    model = Transaction
    entity_name = "transaction"

    def list_all(self) -> list[Transaction]:
        """All transactions in stored (insertion) order."""
        return self._load()

    def save_all(self, transactions: list[Transaction]) -> None:
        """Replace the whole transaction list."""
        self._save(transactions)

    def get(self, transaction_id: UUID) -> Optional[Transaction]:
        return self._get(transaction_id)

    def add(self, draft: TransactionDraft) -> Transaction:
        """Assign identity and creation time, then append."""
        return self._append(Transaction(**draft.model_dump()))

    def update(
        self,
        transaction_id: UUID,
        changes: TransactionUpdate,
    ) -> Optional[Transaction]:
        """
        Merge changes into an existing transaction.

        Returns:
            The updated transaction, or None if the ID is unknown
        """
        return self._update(transaction_id, changes)


class BudgetRepository(_RecordRepository):
    """CRUD for budgets."""

    model = Budget
    entity_name = "budget"

    def list_all(self) -> list[Budget]:
        return self._load()

    def save_all(self, budgets: list[Budget]) -> None:
        self._save(budgets)

    def get(self, budget_id: UUID) -> Optional[Budget]:
        return self._get(budget_id)

    def add(self, draft: BudgetDraft) -> Budget:
        return self._append(Budget(**draft.model_dump()))

    def update(self, budget_id: UUID, changes: BudgetUpdate) -> Optional[Budget]:
        return self._update(budget_id, changes)
