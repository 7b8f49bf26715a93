"""Display formatting for amounts and periods."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from finance_tracker.models.finance import TransactionType, month_name


Number = Union[Decimal, int, float]


def _cents(amount: Number) -> Decimal:
    return Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_currency(amount: Number, symbol: str = "$") -> str:
    """
    Format with thousands separators, e.g. ``$1,234.56`` or ``-$12.00``.
    """
    value = _cents(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_signed_amount(
    amount: Number,
    transaction_type: TransactionType,
    symbol: str = "$",
) -> str:
    """Prefix with + for income and - for expenses, e.g. ``+$50.00``."""
    sign = "+" if transaction_type == TransactionType.INCOME else "-"
    return f"{sign}{symbol}{abs(_cents(amount)):.2f}"


def format_percentage(percentage: float) -> str:
    return f"{percentage:.1f}%"


def format_month_year(month: Union[int, str], year: int) -> str:
    """``March 2024`` from a month number or name."""
    name = month_name(month) if isinstance(month, int) else month.strip().title()
    return f"{name} {year}"
