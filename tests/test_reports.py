"""
Tests for aggregations and display formatting.

All reports take an explicit reference date so results never depend on
when the suite runs.
"""

import pytest
from datetime import date
from decimal import Decimal

from finance_tracker.categories import DEFAULT_CATEGORY_COLOR
from finance_tracker.models.finance import (
    Budget,
    BudgetStatus,
    Transaction,
    TransactionFilter,
    TransactionType,
)
from finance_tracker.reports import (
    budget_comparison,
    budget_overview,
    budget_progress,
    budget_status,
    budgets_for_month,
    category_expenses,
    category_totals,
    filter_by_month,
    filter_transactions,
    format_currency,
    format_month_year,
    format_percentage,
    format_signed_amount,
    monthly_expenses,
    monthly_summary,
    recent_transactions,
    round_whole,
    spent_in_category,
    sum_amounts,
    top_category,
)


TODAY = date(2024, 3, 20)


def make_transaction(
    amount: str,
    on: date,
    category: str = "Food & Dining",
    transaction_type: TransactionType = TransactionType.EXPENSE,
    description: str = "Test",
) -> Transaction:
    return Transaction(
        amount=Decimal(amount),
        date=on,
        description=description,
        category=category,
        type=transaction_type,
    )


def make_budget(category: str, amount: str, month: str = "March", year: int = 2024) -> Budget:
    return Budget(category=category, amount=Decimal(amount), month=month, year=year)


@pytest.fixture
def march_transactions():
    """A small month of activity plus one entry from February."""
    return [
        make_transaction("3000", date(2024, 3, 1), "Income", TransactionType.INCOME, "Salary"),
        make_transaction("50.25", date(2024, 3, 5), "Food & Dining", description="Groceries"),
        make_transaction("120", date(2024, 3, 10), "Transportation", description="Train pass"),
        make_transaction("999", date(2024, 2, 28), "Food & Dining", description="Party"),
    ]


class TestBasicScans:
    """Tests for filtering and summing helpers."""

    def test_filter_by_month_uses_calendar_dates(self):
        """Test month boundaries follow the stored calendar date."""
        transactions = [
            make_transaction("10", date(2024, 2, 29)),
            make_transaction("20", date(2024, 3, 1)),
            make_transaction("30", date(2024, 3, 31)),
            make_transaction("40", date(2024, 4, 1)),
        ]
        in_march = filter_by_month(transactions, 2024, 3)
        assert [t.amount for t in in_march] == [Decimal("20"), Decimal("30")]

    def test_filter_by_month_checks_year(self):
        transactions = [make_transaction("10", date(2023, 3, 15))]
        assert filter_by_month(transactions, 2024, 3) == []

    def test_sum_amounts_by_type(self, march_transactions):
        assert sum_amounts(march_transactions, TransactionType.INCOME) == Decimal("3000")
        assert sum_amounts(march_transactions, TransactionType.EXPENSE) == Decimal("1169.25")
        assert sum_amounts([]) == Decimal("0")

    def test_category_totals_ignore_income(self, march_transactions):
        totals = category_totals(march_transactions)
        assert totals == {
            "Food & Dining": Decimal("1049.25"),
            "Transportation": Decimal("120"),
        }
        assert list(totals) == ["Food & Dining", "Transportation"]


class TestTopCategory:
    """Tests for top category selection."""

    def test_highest_total_wins(self):
        transactions = [
            make_transaction("30", TODAY, "Shopping"),
            make_transaction("20", TODAY, "Travel"),
            make_transaction("25", TODAY, "Travel"),
        ]
        top = top_category(transactions)
        assert top.category == "Travel"
        assert top.amount == Decimal("45")
        assert top.color == "#ec4899"

    def test_tie_keeps_first_seen(self):
        """Test that on a tie the category seen first wins."""
        transactions = [
            make_transaction("100", TODAY, "Shopping"),
            make_transaction("100", TODAY, "Healthcare"),
        ]
        assert top_category(transactions).category == "Shopping"

    def test_no_expenses(self):
        transactions = [
            make_transaction("100", TODAY, "Income", TransactionType.INCOME),
        ]
        assert top_category(transactions) is None


class TestRecentTransactions:
    """Tests for the recent transaction list."""

    def test_newest_first_with_limit(self, march_transactions):
        recent = recent_transactions(march_transactions, limit=3)
        assert [t.date for t in recent] == [
            date(2024, 3, 10),
            date(2024, 3, 5),
            date(2024, 3, 1),
        ]

    def test_same_day_keeps_stored_order(self):
        first = make_transaction("1", TODAY, description="first")
        second = make_transaction("2", TODAY, description="second")
        older = make_transaction("3", date(2024, 1, 1), description="older")
        recent = recent_transactions([older, first, second])
        assert [t.description for t in recent] == ["first", "second", "older"]

    def test_input_is_not_mutated(self, march_transactions):
        original = list(march_transactions)
        recent_transactions(march_transactions)
        assert march_transactions == original


class TestMonthlySummary:
    """Tests for the dashboard summary."""

    def test_summary_for_reference_month(self, march_transactions):
        summary = monthly_summary(march_transactions, today=TODAY)
        assert summary.month == "March"
        assert summary.year == 2024
        assert summary.total_income == Decimal("3000")
        assert summary.total_expenses == Decimal("170.25")
        assert summary.net_balance == Decimal("2829.75")
        assert summary.is_surplus
        assert summary.top_category.category == "Transportation"
        assert len(summary.recent_transactions) == 3

    def test_recent_drawn_from_all_history(self, march_transactions):
        """Test recent transactions are not limited to the reference month."""
        summary = monthly_summary(march_transactions, today=date(2024, 4, 5))
        assert summary.total_income == Decimal("0")
        assert summary.total_expenses == Decimal("0")
        assert summary.top_category is None
        assert summary.recent_transactions[0].description == "Train pass"

    def test_empty_history(self):
        summary = monthly_summary([], today=TODAY)
        assert summary.total_income == Decimal("0")
        assert summary.net_balance == Decimal("0")
        assert summary.top_category is None
        assert summary.recent_transactions == []

    def test_deficit(self):
        transactions = [make_transaction("80", TODAY)]
        summary = monthly_summary(transactions, today=TODAY)
        assert summary.net_balance == Decimal("-80")
        assert not summary.is_surplus


class TestChartSeries:
    """Tests for the monthly and category chart data."""

    def test_monthly_expenses_keeps_last_months(self):
        transactions = [
            make_transaction("10", date(2023, 9, 1)),
            make_transaction("10.5", date(2023, 10, 1)),
            make_transaction("10.49", date(2023, 11, 1)),
            make_transaction("5", date(2024, 1, 15)),
            make_transaction("5", date(2024, 1, 20)),
            make_transaction("500", date(2024, 1, 20), "Income", TransactionType.INCOME),
            make_transaction("1", date(2024, 2, 1)),
            make_transaction("2", date(2024, 3, 1)),
            make_transaction("3", date(2024, 4, 1)),
        ]
        series = monthly_expenses(transactions, months=6)

        assert [m.month_key for m in series] == [
            "2023-10", "2023-11", "2024-01", "2024-02", "2024-03", "2024-04",
        ]
        assert [m.month for m in series] == ["Oct", "Nov", "Jan", "Feb", "Mar", "Apr"]
        assert series[0].amount == Decimal("11")
        assert series[1].amount == Decimal("10")
        assert series[2].amount == Decimal("10")

    def test_monthly_expenses_empty(self):
        assert monthly_expenses([]) == []

    def test_category_expenses_largest_first(self):
        transactions = [
            make_transaction("20", TODAY, "Shopping"),
            make_transaction("75.5", TODAY, "Pets"),
            make_transaction("40", TODAY, "Shopping"),
        ]
        rows = category_expenses(transactions)
        assert [(r.category, r.amount) for r in rows] == [
            ("Pets", Decimal("76")),
            ("Shopping", Decimal("60")),
        ]
        assert rows[0].color == DEFAULT_CATEGORY_COLOR
        assert rows[1].color == "#f59e0b"

    def test_round_whole_half_up(self):
        assert round_whole(Decimal("2.5")) == Decimal("3")
        assert round_whole(Decimal("2.49")) == Decimal("2")


class TestBudgets:
    """Tests for budget progress and comparison."""

    def test_budgets_for_month(self):
        budgets = [
            make_budget("Shopping", "100", "March", 2024),
            make_budget("Shopping", "100", "March", 2023),
            make_budget("Travel", "100", "April", 2024),
        ]
        selected = budgets_for_month(budgets, 2024, 3)
        assert len(selected) == 1
        assert selected[0].year == 2024

    def test_spent_in_category(self, march_transactions):
        assert spent_in_category(march_transactions, "Food & Dining", 2024, 3) == Decimal("50.25")
        assert spent_in_category(march_transactions, "Food & Dining", 2024, 2) == Decimal("999")
        assert spent_in_category(march_transactions, "Income", 2024, 3) == Decimal("0")

    @pytest.mark.parametrize("percentage,expected", [
        (0.0, BudgetStatus.GOOD),
        (50.0, BudgetStatus.GOOD),
        (50.01, BudgetStatus.WARNING),
        (80.0, BudgetStatus.WARNING),
        (80.1, BudgetStatus.DANGER),
        (250.0, BudgetStatus.DANGER),
    ])
    def test_budget_status_thresholds(self, percentage, expected):
        assert budget_status(percentage) == expected

    def test_budget_status_custom_thresholds(self):
        assert budget_status(60.0, warning_percent=70, danger_percent=90) == BudgetStatus.GOOD

    def test_budget_progress_within_budget(self):
        transactions = [
            make_transaction("100", date(2024, 3, 2)),
            make_transaction("50", date(2024, 3, 9)),
            make_transaction("500", date(2024, 2, 9)),
            make_transaction("70", date(2024, 3, 9), "Shopping"),
        ]
        progress = budget_progress(make_budget("Food & Dining", "200"), transactions)
        assert progress.spent == Decimal("150")
        assert progress.remaining == Decimal("50")
        assert progress.percentage == 75.0
        assert progress.status == BudgetStatus.WARNING
        assert not progress.is_over_budget
        assert progress.color == "#ef4444"

    def test_budget_progress_over_budget(self):
        transactions = [make_transaction("250", date(2024, 3, 2))]
        progress = budget_progress(make_budget("Food & Dining", "200"), transactions)
        assert progress.is_over_budget
        assert progress.remaining == Decimal("-50")
        assert progress.percentage == 125.0
        assert progress.bar_percentage == 100.0
        assert progress.status == BudgetStatus.DANGER

    def test_budget_comparison_reference_month_only(self):
        budgets = [
            make_budget("Food & Dining", "200", "March"),
            make_budget("Shopping", "100", "February"),
        ]
        transactions = [make_transaction("150.5", date(2024, 3, 2))]

        rows = budget_comparison(budgets, transactions, today=TODAY)

        assert len(rows) == 1
        assert rows[0].category == "Food & Dining"
        assert rows[0].budget == Decimal("200")
        assert rows[0].actual == Decimal("151")

    def test_overview_totals(self):
        budgets = [
            make_budget("Food & Dining", "200"),
            make_budget("Shopping", "100"),
            make_budget("Travel", "900", "January"),
        ]
        transactions = [
            make_transaction("40", date(2024, 3, 2)),
            make_transaction("130", date(2024, 3, 3), "Shopping"),
        ]
        overview = budget_overview(budgets, transactions, today=TODAY)

        assert overview.month == "March"
        assert overview.has_budgets
        assert overview.total_budget == Decimal("300")
        assert overview.total_spent == Decimal("170")
        assert overview.remaining == Decimal("130")
        assert [item.status for item in overview.items] == [BudgetStatus.GOOD, BudgetStatus.DANGER]

    def test_overview_duplicate_budgets_both_count_spending(self):
        budgets = [
            make_budget("Food & Dining", "200"),
            make_budget("Food & Dining", "100"),
        ]
        transactions = [make_transaction("60", date(2024, 3, 2))]
        overview = budget_overview(budgets, transactions, today=TODAY)
        assert overview.total_spent == Decimal("120")

    def test_overview_without_budgets(self):
        overview = budget_overview([], [], today=TODAY)
        assert not overview.has_budgets
        assert overview.total_budget == Decimal("0")
        assert overview.remaining == Decimal("0")


class TestFilterTransactions:
    """Tests for transaction list search and filters."""

    def test_search_is_case_insensitive(self, march_transactions):
        results = filter_transactions(march_transactions, TransactionFilter(search="TRAIN"))
        assert [t.description for t in results] == ["Train pass"]

    def test_search_matches_category(self, march_transactions):
        results = filter_transactions(march_transactions, TransactionFilter(search="dining"))
        assert [t.description for t in results] == ["Groceries", "Party"]

    def test_category_and_type_filters(self, march_transactions):
        by_category = filter_transactions(
            march_transactions, TransactionFilter(category="Food & Dining")
        )
        assert len(by_category) == 2

        by_type = filter_transactions(
            march_transactions, TransactionFilter(type=TransactionType.INCOME)
        )
        assert [t.description for t in by_type] == ["Salary"]

    def test_no_criteria_returns_all_newest_first(self, march_transactions):
        results = filter_transactions(march_transactions)
        assert [t.description for t in results] == [
            "Train pass", "Groceries", "Salary", "Party",
        ]


class TestFormatting:
    """Tests for display formatting."""

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(Decimal("-12")) == "-$12.00"
        assert format_currency(0) == "$0.00"
        assert format_currency(Decimal("99.995"), "€") == "€100.00"

    def test_format_signed_amount(self):
        assert format_signed_amount(Decimal("1234.5"), TransactionType.INCOME) == "+$1234.50"
        assert format_signed_amount(Decimal("12"), TransactionType.EXPENSE) == "-$12.00"

    def test_format_percentage(self):
        assert format_percentage(45) == "45.0%"
        assert format_percentage(133.333) == "133.3%"

    def test_format_month_year(self):
        assert format_month_year(3, 2024) == "March 2024"
        assert format_month_year("march", 2024) == "March 2024"
