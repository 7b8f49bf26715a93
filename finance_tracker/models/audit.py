"""
Audit Models for Finance Tracker

Every change to stored data is logged for audit purposes.
This provides:
1. Traceability of all edits and deletions
2. Debugging information when things go wrong
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. Old events are only
dropped when the persisted trail exceeds its configured size.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Budgets
    BUDGET_ADDED = "budget_added"
    BUDGET_UPDATED = "budget_updated"
    BUDGET_DELETED = "budget_deleted"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Storage
    STORAGE_FALLBACK = "storage_fallback"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every change creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity ('transaction', 'budget', 'storage')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_record(self) -> dict:
        """Convert to the dict persisted in the key-value store."""
        return self.model_dump(mode="json")


_SUMMARY_LENGTH = 80


def _shorten(text: str, limit: int = _SUMMARY_LENGTH) -> str:
    """Keep audit descriptions short; user text can be up to 500 characters."""
    return text if len(text) <= limit else text[:limit - 3] + "..."


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, description, amount, "expense")
        event = AuditEventBuilder.budget_deleted(budget_id)
    """

    @staticmethod
    def transaction_added(
        transaction_id: UUID,
        description: str,
        amount: str,
        transaction_type: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {_shorten(description)} ({transaction_type} {amount})",
            details={
                "amount": amount,
                "type": transaction_type,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(
        transaction_id: UUID,
        changed_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction updated: {', '.join(changed_fields) or 'no changes'}",
            details={
                "changed_fields": changed_fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: UUID, existed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted" if existed else "Delete requested for unknown transaction",
            details={
                "existed": existed,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_added(
        budget_id: UUID,
        category: str,
        amount: str,
        month: str,
        year: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_ADDED,
            entity_type="budget",
            entity_id=budget_id,
            description=f"Budget added: {category} {amount} for {month} {year}",
            details={
                "category": category,
                "amount": amount,
                "month": month,
                "year": year,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_updated(budget_id: UUID, changed_fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            entity_type="budget",
            entity_id=budget_id,
            description=f"Budget updated: {', '.join(changed_fields) or 'no changes'}",
            details={
                "changed_fields": changed_fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_deleted(budget_id: UUID, existed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_DELETED,
            entity_type="budget",
            entity_id=budget_id,
            description="Budget deleted" if existed else "Delete requested for unknown budget",
            details={
                "existed": existed,
            },
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(subject: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=subject,
            description=f"{subject.capitalize()} validation failed with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def storage_fallback(backend: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_FALLBACK,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            description=f"Storage backend '{backend}' unavailable, using in-memory storage",
            error_message=error_message,
            details={
                "backend": backend,
            },
        )

    @staticmethod
    def storage_error(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )
