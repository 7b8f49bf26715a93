"""
Audit Logger

DESIGN DECISION: Every change to stored data is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. User can see the history of their edits

The audit logger:
- Always logs locally through structlog
- Optionally appends events to a capped list in the key-value store
- Gracefully handles failures (never crashes the app if logging fails)
"""

import logging
from typing import Optional
from uuid import UUID

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder
from finance_tracker.services.storage import KeyValueStore


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through the standard library at the given level.

    structlog renders each event to a JSON line; the stdlib handler only
    needs to print the message.
    """
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger().setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The key-value store (for the history shown to the user)
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        key: str = "finance-audit",
        max_events: int = 500,
    ):
        """
        Initialize audit logger.

        Args:
            store: Storage backend for persistence.
                   If None, only logs locally.
            key: Record list name for persisted events
            max_events: Oldest events beyond this count are dropped
        """
        self._store = store if max_events > 0 else None
        self._key = key
        self._max_events = max_events
        self._logger = structlog.get_logger("finance_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._store is None:
            return True

        try:
            events = self._store.get(self._key)
            events.append(event.to_record())
            self._store.set(self._key, events[-self._max_events:])
            return True
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent persisted events, newest first."""
        if self._store is None:
            return []
        try:
            records = self._store.get(self._key)
        except Exception as e:
            self._logger.error("audit_read_failed", error=str(e))
            return []
        events = [AuditEvent.model_validate(record) for record in records[-limit:]]
        return list(reversed(events))

    def log_transaction_added(
        self,
        transaction_id: UUID,
        description: str,
        amount: str,
        transaction_type: str,
    ) -> None:
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            description=description,
            amount=amount,
            transaction_type=transaction_type,
        ))

    def log_transaction_updated(self, transaction_id: UUID, changed_fields: list[str]) -> None:
        self.log(AuditEventBuilder.transaction_updated(transaction_id, changed_fields))

    def log_transaction_deleted(self, transaction_id: UUID, existed: bool) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id, existed))

    def log_budget_added(
        self,
        budget_id: UUID,
        category: str,
        amount: str,
        month: str,
        year: int,
    ) -> None:
        self.log(AuditEventBuilder.budget_added(
            budget_id=budget_id,
            category=category,
            amount=amount,
            month=month,
            year=year,
        ))

    def log_budget_updated(self, budget_id: UUID, changed_fields: list[str]) -> None:
        self.log(AuditEventBuilder.budget_updated(budget_id, changed_fields))

    def log_budget_deleted(self, budget_id: UUID, existed: bool) -> None:
        self.log(AuditEventBuilder.budget_deleted(budget_id, existed))

    def log_validation_failed(self, subject: str, issues: list[dict]) -> None:
        """Log a rejected form submission."""
        self.log(AuditEventBuilder.validation_failed(subject, issues))

    def log_storage_fallback(self, backend: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_fallback(backend, error_message))

    def log_storage_error(self, operation: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_error(operation, error_message))

