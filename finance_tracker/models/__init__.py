"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.finance import (
    MONTHS,
    Budget,
    BudgetComparison,
    BudgetDraft,
    BudgetOverview,
    BudgetProgress,
    BudgetStatus,
    BudgetUpdate,
    Category,
    CategoryExpense,
    MonthlyExpense,
    MonthlySummary,
    TopCategory,
    Transaction,
    TransactionDraft,
    TransactionFilter,
    TransactionType,
    TransactionUpdate,
    ValidationIssue,
    ValidationResult,
    month_name,
    month_number,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "MONTHS",
    "Budget",
    "BudgetComparison",
    "BudgetDraft",
    "BudgetOverview",
    "BudgetProgress",
    "BudgetStatus",
    "BudgetUpdate",
    "Category",
    "CategoryExpense",
    "MonthlyExpense",
    "MonthlySummary",
    "TopCategory",
    "Transaction",
    "TransactionDraft",
    "TransactionFilter",
    "TransactionType",
    "TransactionUpdate",
    "ValidationIssue",
    "ValidationResult",
    "month_name",
    "month_number",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
