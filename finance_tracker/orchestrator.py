"""
Main Orchestrator for Finance Tracker

This module ties together all the components and defines the flows for:
1. Transactions (validate → store → audit)
2. Budgets (validate against existing budgets → store → audit)
3. Reports (load records → aggregate for a reference date)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is stored without passing validation
- Every change is audited
- Reports only ever see what storage returns

The UI talks to these flows only; it never touches storage directly.
"""

from datetime import date
from typing import Any, Optional, Union
from uuid import UUID

import structlog
from pydantic import BaseModel

from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import Settings, get_settings
from finance_tracker.models.audit import AuditEvent
from finance_tracker.models.finance import (
    Budget,
    BudgetComparison,
    BudgetOverview,
    BudgetUpdate,
    CategoryExpense,
    MonthlyExpense,
    MonthlySummary,
    Transaction,
    TransactionFilter,
    TransactionUpdate,
    ValidationResult,
)
from finance_tracker.reports import aggregations
from finance_tracker.services.storage import (
    BudgetRepository,
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    NotFoundError,
    StorageError,
    TransactionRepository,
)
from finance_tracker.validation import BudgetValidator, TransactionValidator


logger = structlog.get_logger(__name__)


class ValidationFailedError(Exception):
    """A submitted draft did not pass validation."""

    def __init__(self, result: ValidationResult, message: str):
        super().__init__(message)
        self.result = result


def _as_uuid(value: Union[UUID, str]) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _guarded(audit_logger: Optional[AuditLogger], operation: str, call, *args):
    """Run a storage call; failures are audited and re-raised."""
    try:
        return call(*args)
    except StorageError as e:
        if audit_logger:
            audit_logger.log_storage_error(operation, str(e))
        raise


def _issue_dicts(result: ValidationResult) -> list[dict]:
    return [
        {"field": i.field, "type": i.issue_type, "message": i.message}
        for i in result.issues
    ]


class TransactionFlow:
    """
    Orchestrates transaction changes.

    Flow for add/update:
    1. Validate raw form values (two stages)
    2. Store through the repository
    3. Audit the change
    """

    def __init__(
        self,
        repository: TransactionRepository,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger

    def _reject(self, result: ValidationResult) -> ValidationFailedError:
        if self._audit_logger:
            self._audit_logger.log_validation_failed("transaction", _issue_dicts(result))
        return ValidationFailedError(result, self._validator.get_user_friendly_summary(result))

    def add_transaction(
        self,
        raw: dict[str, Any],
        today: Optional[date] = None,
    ) -> tuple[Transaction, ValidationResult]:
        """
        Validate and store a new transaction.

        Returns:
            (transaction, validation_result) - the result may carry warnings

        Raises:
            ValidationFailedError: If the form values are not acceptable
        """
        result, draft = self._validator.validate_draft(raw, today=today)
        if draft is None:
            raise self._reject(result)

        transaction = _guarded(self._audit_logger, "add_transaction", self._repository.add, draft)

        if self._audit_logger:
            self._audit_logger.log_transaction_added(
                transaction_id=transaction.id,
                description=transaction.description,
                amount=str(transaction.amount),
                transaction_type=transaction.type.value,
            )

        return transaction, result

    def update_transaction(
        self,
        transaction_id: Union[UUID, str],
        raw: dict[str, Any],
        today: Optional[date] = None,
    ) -> tuple[Transaction, ValidationResult]:
        """
        Apply edited form values to an existing transaction.

        The edited record is validated as a whole, the way the form
        submits it.

        Raises:
            NotFoundError: If no transaction has this ID
            ValidationFailedError: If the merged values are not acceptable
        """
        transaction_id = _as_uuid(transaction_id)
        existing = self._repository.get(transaction_id)
        if existing is None:
            raise NotFoundError(f"Transaction {transaction_id} not found")

        merged = {
            "amount": existing.amount,
            "date": existing.date,
            "description": existing.description,
            "category": existing.category,
            "type": existing.type,
        }
        merged.update(raw)

        result, draft = self._validator.validate_draft(merged, today=today)
        if draft is None:
            raise self._reject(result)

        changes = TransactionUpdate(**draft.model_dump())
        changed_fields = [
            name for name, value in draft.model_dump().items()
            if getattr(existing, name) != value
        ]

        updated = _guarded(
            self._audit_logger, "update_transaction", self._repository.update, transaction_id, changes
        )
        if updated is None:
            raise NotFoundError(f"Transaction {transaction_id} not found")

        if self._audit_logger:
            self._audit_logger.log_transaction_updated(transaction_id, changed_fields)

        return updated, result

    def delete_transaction(self, transaction_id: Union[UUID, str]) -> bool:
        """
        Delete a transaction. Unknown IDs are a no-op.

        Returns:
            True if a transaction was removed
        """
        transaction_id = _as_uuid(transaction_id)
        existed = _guarded(
            self._audit_logger, "delete_transaction", self._repository.delete, transaction_id
        )
        if self._audit_logger:
            self._audit_logger.log_transaction_deleted(transaction_id, existed)
        return existed

    def get_transaction(self, transaction_id: Union[UUID, str]) -> Optional[Transaction]:
        return self._repository.get(_as_uuid(transaction_id))

    def list_transactions(
        self,
        criteria: Optional[TransactionFilter] = None,
    ) -> list[Transaction]:
        """Filtered transactions, newest first."""
        return aggregations.filter_transactions(self._repository.list_all(), criteria)


class BudgetFlow:
    """
    Orchestrates budget changes and the budget overview.

    Budgets are validated against the already stored ones so duplicates
    are flagged before they are saved.
    """

    def __init__(
        self,
        repository: BudgetRepository,
        transactions: TransactionRepository,
        validator: Optional[BudgetValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        warning_percent: float = 50.0,
        danger_percent: float = 80.0,
    ):
        self._repository = repository
        self._transactions = transactions
        self._validator = validator or BudgetValidator()
        self._audit_logger = audit_logger
        self._warning_percent = warning_percent
        self._danger_percent = danger_percent

    def _reject(self, result: ValidationResult) -> ValidationFailedError:
        if self._audit_logger:
            self._audit_logger.log_validation_failed("budget", _issue_dicts(result))
        return ValidationFailedError(result, self._validator.get_user_friendly_summary(result))

    def add_budget(self, raw: dict[str, Any]) -> tuple[Budget, ValidationResult]:
        """
        Validate and store a new budget.

        Raises:
            ValidationFailedError: If the form values are not acceptable
        """
        result, draft = self._validator.validate_draft(raw, existing=self._repository.list_all())
        if draft is None:
            raise self._reject(result)

        budget = _guarded(self._audit_logger, "add_budget", self._repository.add, draft)

        if self._audit_logger:
            self._audit_logger.log_budget_added(
                budget_id=budget.id,
                category=budget.category,
                amount=str(budget.amount),
                month=budget.month,
                year=budget.year,
            )

        return budget, result

    def update_budget(
        self,
        budget_id: Union[UUID, str],
        raw: dict[str, Any],
    ) -> tuple[Budget, ValidationResult]:
        """
        Apply edited values to an existing budget.

        Raises:
            NotFoundError: If no budget has this ID
            ValidationFailedError: If the merged values are not acceptable
        """
        budget_id = _as_uuid(budget_id)
        existing = self._repository.get(budget_id)
        if existing is None:
            raise NotFoundError(f"Budget {budget_id} not found")

        merged = {
            "category": existing.category,
            "amount": existing.amount,
            "month": existing.month,
            "year": existing.year,
        }
        merged.update(raw)

        others = [b for b in self._repository.list_all() if b.id != budget_id]
        result, draft = self._validator.validate_draft(merged, existing=others)
        if draft is None:
            raise self._reject(result)

        changed_fields = [
            name for name, value in draft.model_dump().items()
            if getattr(existing, name) != value
        ]
        updated = _guarded(
            self._audit_logger, "update_budget", self._repository.update,
            budget_id, BudgetUpdate(**draft.model_dump()),
        )
        if updated is None:
            raise NotFoundError(f"Budget {budget_id} not found")

        if self._audit_logger:
            self._audit_logger.log_budget_updated(budget_id, changed_fields)

        return updated, result

    def delete_budget(self, budget_id: Union[UUID, str]) -> bool:
        budget_id = _as_uuid(budget_id)
        existed = _guarded(self._audit_logger, "delete_budget", self._repository.delete, budget_id)
        if self._audit_logger:
            self._audit_logger.log_budget_deleted(budget_id, existed)
        return existed

    def list_budgets(self) -> list[Budget]:
        return self._repository.list_all()

    def current_month_budgets(self, today: Optional[date] = None) -> list[Budget]:
        """Budgets set for the month of the reference date."""
        ref = today or date.today()
        return aggregations.budgets_for_month(self._repository.list_all(), ref.year, ref.month)

    def overview(self, today: Optional[date] = None) -> BudgetOverview:
        """Progress of every budget in the reference month, with totals."""
        return aggregations.budget_overview(
            self._repository.list_all(),
            self._transactions.list_all(),
            today=today,
            warning_percent=self._warning_percent,
            danger_percent=self._danger_percent,
        )


class DashboardReport(BaseModel):
    """Everything the dashboard and analytics pages display."""

    summary: MonthlySummary
    monthly_expenses: list[MonthlyExpense]
    category_expenses: list[CategoryExpense]
    budget_comparison: list[BudgetComparison]

    @property
    def has_expenses(self) -> bool:
        return bool(self.category_expenses)


class ReportFlow:
    """
    Builds reports from stored data.

    Records are loaded once per report; all numbers are computed by the
    pure functions in finance_tracker.reports.
    """

    def __init__(
        self,
        transactions: TransactionRepository,
        budgets: BudgetRepository,
        recent_limit: int = 3,
        chart_months: int = 6,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._transactions = transactions
        self._budgets = budgets
        self._audit_logger = audit_logger
        self._recent_limit = recent_limit
        self._chart_months = chart_months

    def summary(self, today: Optional[date] = None) -> MonthlySummary:
        return aggregations.monthly_summary(
            self._transactions.list_all(), today=today, recent_limit=self._recent_limit
        )

    def dashboard(self, today: Optional[date] = None) -> DashboardReport:
        transactions = self._transactions.list_all()
        budgets = self._budgets.list_all()

        return DashboardReport(
            summary=aggregations.monthly_summary(
                transactions, today=today, recent_limit=self._recent_limit
            ),
            monthly_expenses=aggregations.monthly_expenses(transactions, self._chart_months),
            category_expenses=aggregations.category_expenses(transactions),
            budget_comparison=aggregations.budget_comparison(budgets, transactions, today=today),
        )

    def recent_activity(self, limit: int = 20) -> list[AuditEvent]:
        """Most recent audited changes, newest first."""
        if self._audit_logger is None:
            return []
        return self._audit_logger.recent_events(limit)


def create_store(settings: Settings, audit_logger: Optional[AuditLogger] = None) -> KeyValueStore:
    """
    Build the configured key-value store.

    Falls back to in-memory storage (nothing survives a restart) when the
    configured backend cannot be used.
    """
    storage_settings = settings.storage

    if storage_settings.backend == "memory":
        return InMemoryStore()

    try:
        store = JsonFileStore(storage_settings.data_dir)
        if not store.is_available():
            raise StorageError(f"Data directory {storage_settings.data_dir} is not writable")
        return store
    except StorageError as e:
        logger.warning("storage_unavailable", backend=storage_settings.backend, error=str(e))
        if audit_logger:
            audit_logger.log_storage_fallback(storage_settings.backend, str(e))
        return InMemoryStore()


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
) -> tuple[TransactionFlow, BudgetFlow, ReportFlow]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use (defaults to the cached global settings)
        store: Store to use instead of the configured one (e.g., in tests)

    Returns:
        (transaction_flow, budget_flow, report_flow)
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings.log_level)

    if store is None:
        store = create_store(settings, AuditLogger())

    audit_logger = AuditLogger(
        store,
        key=storage_settings.audit_key,
        max_events=storage_settings.audit_max_events,
    )

    transactions = TransactionRepository(store, storage_settings.transactions_key)
    budgets = BudgetRepository(store, storage_settings.budgets_key)

    transaction_flow = TransactionFlow(
        repository=transactions,
        validator=TransactionValidator(app_settings),
        audit_logger=audit_logger,
    )
    budget_flow = BudgetFlow(
        repository=budgets,
        transactions=transactions,
        validator=BudgetValidator(app_settings),
        audit_logger=audit_logger,
        warning_percent=app_settings.budget_warning_percent,
        danger_percent=app_settings.budget_danger_percent,
    )
    report_flow = ReportFlow(
        transactions=transactions,
        budgets=budgets,
        recent_limit=app_settings.recent_transactions_limit,
        chart_months=app_settings.chart_months,
        audit_logger=audit_logger,
    )

    return transaction_flow, budget_flow, report_flow
