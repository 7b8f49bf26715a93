"""Reporting package: aggregations over stored records and display formatting."""

from finance_tracker.reports.aggregations import (
    budget_comparison,
    budget_overview,
    budget_progress,
    budget_status,
    budgets_for_month,
    category_expenses,
    category_totals,
    filter_by_month,
    filter_by_type,
    filter_transactions,
    monthly_expenses,
    monthly_summary,
    recent_transactions,
    round_whole,
    spent_in_category,
    sum_amounts,
    top_category,
)
from finance_tracker.reports.formatting import (
    format_currency,
    format_month_year,
    format_percentage,
    format_signed_amount,
)

__all__ = [
    "budget_comparison",
    "budget_overview",
    "budget_progress",
    "budget_status",
    "budgets_for_month",
    "category_expenses",
    "category_totals",
    "filter_by_month",
    "filter_by_type",
    "filter_transactions",
    "format_currency",
    "format_month_year",
    "format_percentage",
    "format_signed_amount",
    "monthly_expenses",
    "monthly_summary",
    "recent_transactions",
    "round_whole",
    "spent_in_category",
    "sum_amounts",
    "top_category",
]
