"""Validation package."""

from finance_tracker.validation.validator import BudgetValidator, TransactionValidator

__all__ = ["BudgetValidator", "TransactionValidator"]
