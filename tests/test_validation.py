"""
Tests for the two-stage validation pipeline.
"""

import pytest
from datetime import date
from decimal import Decimal

from finance_tracker.config import AppSettings
from finance_tracker.models.finance import Budget, TransactionType
from finance_tracker.validation import BudgetValidator, TransactionValidator
from finance_tracker.validation.validator import _TwoStageValidator


TODAY = date(2024, 3, 15)


@pytest.fixture
def transaction_validator():
    return TransactionValidator(AppSettings())


@pytest.fixture
def budget_validator():
    return BudgetValidator(AppSettings())


def valid_transaction(**overrides) -> dict:
    raw = {
        "amount": "25.50",
        "date": "2024-03-10",
        "description": "Lunch",
        "category": "Food & Dining",
        "type": "expense",
    }
    raw.update(overrides)
    return raw


def valid_budget(**overrides) -> dict:
    raw = {
        "category": "Food & Dining",
        "amount": "300",
        "month": "March",
        "year": 2024,
    }
    raw.update(overrides)
    return raw


class TestTransactionSchemaValidation:
    """Stage 1: required fields and parsing."""

    def test_valid_transaction(self, transaction_validator):
        result, draft = transaction_validator.validate_draft(valid_transaction(), today=TODAY)

        assert result.is_valid
        assert result.schema_valid
        assert result.semantic_valid
        assert result.issues == []
        assert draft.amount == Decimal("25.50")
        assert draft.date == date(2024, 3, 10)
        assert draft.type == TransactionType.EXPENSE

    def test_empty_form_reports_every_field(self, transaction_validator):
        result, draft = transaction_validator.validate_draft({}, today=TODAY)

        assert draft is None
        assert not result.is_valid
        assert not result.schema_valid
        assert not result.semantic_valid
        assert result.errors_by_field() == {
            "amount": "Amount must be greater than 0",
            "date": "Date is required",
            "description": "Description is required",
            "category": "Category is required",
        }

    @pytest.mark.parametrize("amount", ["0", "-5", "abc", "", None, "NaN"])
    def test_amount_must_be_positive_number(self, transaction_validator, amount):
        result, draft = transaction_validator.validate_draft(
            valid_transaction(amount=amount), today=TODAY
        )
        assert draft is None
        assert result.errors_by_field()["amount"] == "Amount must be greater than 0"

    def test_amount_limited_to_cents(self, transaction_validator):
        result, draft = transaction_validator.validate_draft(
            valid_transaction(amount="1.234"), today=TODAY
        )
        assert draft is None
        assert not result.schema_valid
        assert "amount" in result.errors_by_field()

    def test_invalid_date(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(date="2024-13-45"), today=TODAY
        )
        assert result.errors_by_field()["date"] == "Date must be a valid date (YYYY-MM-DD)"

    def test_accepts_date_objects(self, transaction_validator):
        result, draft = transaction_validator.validate_draft(
            valid_transaction(date=date(2024, 3, 1)), today=TODAY
        )
        assert result.is_valid
        assert draft.date == date(2024, 3, 1)

    def test_blank_description(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(description="   "), today=TODAY
        )
        assert result.errors_by_field() == {"description": "Description is required"}

    def test_invalid_type(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(type="transfer"), today=TODAY
        )
        assert result.errors_by_field()["type"] == "Type must be 'income' or 'expense'"

    def test_type_defaults_to_expense(self, transaction_validator):
        raw = valid_transaction()
        del raw["type"]
        _, draft = transaction_validator.validate_draft(raw, today=TODAY)
        assert draft.type == TransactionType.EXPENSE

    def test_accepts_enum_type(self, transaction_validator):
        _, draft = transaction_validator.validate_draft(
            valid_transaction(type=TransactionType.INCOME, category="Income"), today=TODAY
        )
        assert draft.type == TransactionType.INCOME


class TestTransactionSemanticValidation:
    """Stage 2: warnings that do not block saving."""

    def test_unknown_category_warns(self, transaction_validator):
        result, draft = transaction_validator.validate_draft(
            valid_transaction(category="Pets"), today=TODAY
        )
        assert result.is_valid
        assert draft is not None
        assert len(result.warnings) == 1
        assert "not one of the predefined categories" in result.warnings[0]

    def test_far_future_date_warns(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(date="2024-06-01"), today=TODAY
        )
        assert result.is_valid
        assert any("far in the future" in w for w in result.warnings)

    def test_near_future_date_is_fine(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(date="2024-04-01"), today=TODAY
        )
        assert result.warnings == []

    def test_huge_amount_warns(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(amount="2000000"), today=TODAY
        )
        assert result.is_valid
        assert any("unusually high" in w for w in result.warnings)

    def test_expense_under_income_warns(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(category="Income"), today=TODAY
        )
        assert result.is_valid
        assert any("Income category" in w for w in result.warnings)

    def test_income_under_spending_category_is_not_flagged(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(type="income", category="Other"), today=TODAY
        )
        assert result.warnings == []

    def test_thresholds_come_from_settings(self):
        validator = TransactionValidator(AppSettings(max_reasonable_amount=100))
        result, _ = validator.validate_draft(valid_transaction(amount="150"), today=TODAY)
        assert any("unusually high" in w for w in result.warnings)


class TestBudgetValidation:
    """Tests for budget form validation."""

    def test_valid_budget(self, budget_validator):
        result, draft = budget_validator.validate_draft(valid_budget())
        assert result.is_valid
        assert draft.month == "March"
        assert draft.amount == Decimal("300")

    def test_month_number_accepted(self, budget_validator):
        _, draft = budget_validator.validate_draft(valid_budget(month=3))
        assert draft.month == "March"

    def test_empty_form(self, budget_validator):
        result, draft = budget_validator.validate_draft({})
        assert draft is None
        assert result.errors_by_field() == {
            "category": "Category is required",
            "amount": "Budget amount must be greater than 0",
            "month": "Month is required",
            "year": "Year is required",
        }

    def test_unknown_month(self, budget_validator):
        result, _ = budget_validator.validate_draft(valid_budget(month="Smarch"))
        assert result.errors_by_field() == {"month": "Unknown month: Smarch"}

    def test_income_budget_is_rejected(self, budget_validator):
        result, draft = budget_validator.validate_draft(valid_budget(category="Income"))
        assert draft is None
        assert result.schema_valid
        assert not result.semantic_valid
        assert result.errors_by_field()["category"] == "Budgets can only be set for spending categories"

    def test_unknown_category_warns(self, budget_validator):
        result, _ = budget_validator.validate_draft(valid_budget(category="Pets"))
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_duplicate_budget_warns(self, budget_validator):
        existing = [
            Budget(category="Food & Dining", amount=Decimal("100"), month="March", year=2024),
        ]
        result, draft = budget_validator.validate_draft(valid_budget(), existing=existing)
        assert result.is_valid
        assert draft is not None
        assert any(i.issue_type == "potential_duplicate" for i in result.issues)

    def test_same_category_other_year_is_not_duplicate(self, budget_validator):
        existing = [
            Budget(category="Food & Dining", amount=Decimal("100"), month="March", year=2023),
        ]
        result, _ = budget_validator.validate_draft(valid_budget(), existing=existing)
        assert result.warnings == []


class TestValidatorBase:
    """Tests for the shared two-stage pipeline."""

    def test_base_pipeline_is_abstract(self):
        with pytest.raises(TypeError):
            _TwoStageValidator(AppSettings())


class TestUserFriendlySummary:
    """Tests for the text shown to the user."""

    def test_all_passed(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(valid_transaction(), today=TODAY)
        assert transaction_validator.get_user_friendly_summary(result) == "✅ All checks passed."

    def test_errors_listed(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(description=""), today=TODAY
        )
        summary = transaction_validator.get_user_friendly_summary(result)
        assert "Please fix the following" in summary
        assert "Description is required" in summary

    def test_warnings_listed_for_accepted_entry(self, transaction_validator):
        result, _ = transaction_validator.validate_draft(
            valid_transaction(category="Pets"), today=TODAY
        )
        summary = transaction_validator.get_user_friendly_summary(result)
        assert "Please verify the following" in summary
        assert "accepted" in summary
