"""
Aggregation and Reporting

DESIGN DECISION: Every report is a pure function over lists of records.
Callers load the lists once and pass them in, so the same numbers can be
recomputed for any reference date and tested without storage.

"Current month" always means the month of a reference date, which defaults
to today. Transaction dates are plain calendar dates; no timezone
conversion ever moves a transaction into a neighbouring month.

GUARANTEES:
- Inputs are never mutated (sorting returns new lists)
- Ties keep stored order
- Empty inputs give zero totals and empty series, never errors
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from finance_tracker.categories import get_category_color
from finance_tracker.models.finance import (
    Budget,
    BudgetComparison,
    BudgetOverview,
    BudgetProgress,
    BudgetStatus,
    CategoryExpense,
    MonthlyExpense,
    MonthlySummary,
    TopCategory,
    Transaction,
    TransactionFilter,
    TransactionType,
    month_name,
)


ZERO = Decimal("0")


def _reference(today: Optional[date]) -> date:
    return today or date.today()


def round_whole(amount: Decimal) -> Decimal:
    """Round to whole currency units, halves away from zero."""
    return amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


# =============================================================================
# BASIC SCANS
# =============================================================================

def filter_by_month(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> list[Transaction]:
    """Transactions dated within the given calendar month."""
    return [t for t in transactions if t.date.year == year and t.date.month == month]


def filter_by_type(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
) -> list[Transaction]:
    return [t for t in transactions if t.type == transaction_type]


def sum_amounts(
    transactions: Iterable[Transaction],
    transaction_type: Optional[TransactionType] = None,
) -> Decimal:
    """Sum of amounts, optionally restricted to one transaction type."""
    return sum(
        (t.amount for t in transactions if transaction_type is None or t.type == transaction_type),
        ZERO,
    )


def category_totals(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType = TransactionType.EXPENSE,
) -> dict[str, Decimal]:
    """
    Sum amounts per category.

    Categories appear in the order they are first seen.
    """
    totals: dict[str, Decimal] = {}
    for t in transactions:
        if t.type != transaction_type:
            continue
        totals[t.category] = totals.get(t.category, ZERO) + t.amount
    return totals


def top_category(transactions: Iterable[Transaction]) -> Optional[TopCategory]:
    """
    The expense category with the highest total.

    On a tie the category seen first wins. None when there are no expenses.
    """
    totals = category_totals(transactions)
    if not totals:
        return None

    # max() returns the first maximal key in insertion order
    name = max(totals, key=totals.__getitem__)
    return TopCategory(
        category=name,
        amount=totals[name],
        color=get_category_color(name),
    )


def recent_transactions(
    transactions: Iterable[Transaction],
    limit: int = 3,
) -> list[Transaction]:
    """Newest transactions by date; same-day entries keep stored order."""
    ordered = sorted(transactions, key=lambda t: t.date, reverse=True)
    return ordered[:limit]


# =============================================================================
# DASHBOARD SUMMARY
# =============================================================================

def monthly_summary(
    transactions: list[Transaction],
    today: Optional[date] = None,
    recent_limit: int = 3,
) -> MonthlySummary:
    """
    Income, expenses and net balance for the reference month.

    The top category is computed over the month's expenses; the recent
    list is drawn from the whole history.
    """
    ref = _reference(today)
    in_month = filter_by_month(transactions, ref.year, ref.month)

    income = sum_amounts(in_month, TransactionType.INCOME)
    expenses = sum_amounts(in_month, TransactionType.EXPENSE)

    return MonthlySummary(
        month=month_name(ref.month),
        year=ref.year,
        total_income=income,
        total_expenses=expenses,
        net_balance=income - expenses,
        top_category=top_category(in_month),
        recent_transactions=recent_transactions(transactions, recent_limit),
    )


# =============================================================================
# CHART SERIES
# =============================================================================

def monthly_expenses(
    transactions: Iterable[Transaction],
    months: int = 6,
) -> list[MonthlyExpense]:
    """
    Expense totals per calendar month, oldest first.

    Only months that have expenses appear; the last ``months`` of them are kept.
    """
    totals: dict[str, Decimal] = {}
    for t in transactions:
        if t.type != TransactionType.EXPENSE:
            continue
        totals[t.month_key] = totals.get(t.month_key, ZERO) + t.amount

    keys = sorted(totals)[-months:] if months > 0 else []

    series = []
    for key in keys:
        month = int(key.split("-")[1])
        series.append(MonthlyExpense(
            month_key=key,
            month=month_name(month)[:3],
            amount=round_whole(totals[key]),
        ))
    return series


def category_expenses(transactions: Iterable[Transaction]) -> list[CategoryExpense]:
    """All-time expense totals per category, largest first."""
    rows = [
        CategoryExpense(
            category=category,
            amount=round_whole(amount),
            color=get_category_color(category),
        )
        for category, amount in category_totals(transactions).items()
    ]
    return sorted(rows, key=lambda row: row.amount, reverse=True)


# =============================================================================
# BUDGETS
# =============================================================================

def budgets_for_month(
    budgets: Iterable[Budget],
    year: int,
    month: int,
) -> list[Budget]:
    """Budgets set for the given month (1-12) and year."""
    name = month_name(month)
    return [b for b in budgets if b.month == name and b.year == year]


def spent_in_category(
    transactions: Iterable[Transaction],
    category: str,
    year: int,
    month: int,
) -> Decimal:
    """Expenses in one category during one calendar month."""
    return sum(
        (
            t.amount
            for t in transactions
            if t.type == TransactionType.EXPENSE
            and t.category == category
            and t.date.year == year
            and t.date.month == month
        ),
        ZERO,
    )


def budget_status(
    percentage: float,
    warning_percent: float = 50.0,
    danger_percent: float = 80.0,
) -> BudgetStatus:
    if percentage <= warning_percent:
        return BudgetStatus.GOOD
    if percentage <= danger_percent:
        return BudgetStatus.WARNING
    return BudgetStatus.DANGER


def budget_progress(
    budget: Budget,
    transactions: list[Transaction],
    warning_percent: float = 50.0,
    danger_percent: float = 80.0,
) -> BudgetProgress:
    """How much of one budget its month's spending has used."""
    spent = spent_in_category(transactions, budget.category, budget.year, budget.month_number)
    percentage = float(spent / budget.amount * 100)

    return BudgetProgress(
        budget=budget,
        spent=spent,
        remaining=budget.amount - spent,
        percentage=percentage,
        is_over_budget=spent > budget.amount,
        status=budget_status(percentage, warning_percent, danger_percent),
        color=get_category_color(budget.category),
    )


def budget_comparison(
    budgets: Iterable[Budget],
    transactions: list[Transaction],
    today: Optional[date] = None,
) -> list[BudgetComparison]:
    """Budget vs actual spending for each budget of the reference month."""
    ref = _reference(today)
    rows = []
    for budget in budgets_for_month(budgets, ref.year, ref.month):
        spent = spent_in_category(transactions, budget.category, ref.year, ref.month)
        rows.append(BudgetComparison(
            category=budget.category,
            budget=budget.amount,
            actual=round_whole(spent),
            color=get_category_color(budget.category),
        ))
    return rows


def budget_overview(
    budgets: Iterable[Budget],
    transactions: list[Transaction],
    today: Optional[date] = None,
    warning_percent: float = 50.0,
    danger_percent: float = 80.0,
) -> BudgetOverview:
    """
    Totals across the reference month's budgets.

    Total spent is summed per budget: two budgets for the same category
    both count that category's spending.
    """
    ref = _reference(today)
    items = [
        budget_progress(budget, transactions, warning_percent, danger_percent)
        for budget in budgets_for_month(budgets, ref.year, ref.month)
    ]

    total_budget = sum((item.budget.amount for item in items), ZERO)
    total_spent = sum((item.spent for item in items), ZERO)

    return BudgetOverview(
        month=month_name(ref.month),
        year=ref.year,
        total_budget=total_budget,
        total_spent=total_spent,
        remaining=total_budget - total_spent,
        items=items,
    )


# =============================================================================
# TRANSACTION LIST
# =============================================================================

def filter_transactions(
    transactions: Iterable[Transaction],
    criteria: Optional[TransactionFilter] = None,
) -> list[Transaction]:
    """
    Search and filter the transaction list, newest first.

    The search term matches description or category, ignoring case.
    """
    criteria = criteria or TransactionFilter()
    term = criteria.search.lower()

    matches = [
        t for t in transactions
        if (term in t.description.lower() or term in t.category.lower())
        and (criteria.category is None or t.category == criteria.category)
        and (criteria.type is None or t.type == criteria.type)
    ]
    return sorted(matches, key=lambda t: t.date, reverse=True)
