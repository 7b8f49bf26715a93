"""
Category Catalog

The predefined categories offered for transactions and budgets.

DESIGN DECISION: Transactions store the category by NAME, not id.
A category name outside this catalog is still accepted (the validator
warns about it) and is drawn with the default color.
"""

from typing import Optional

from finance_tracker.models.finance import MONTHS, Category, month_name, month_number


DEFAULT_CATEGORY_COLOR = "#6b7280"

INCOME_CATEGORY = "Income"

PREDEFINED_CATEGORIES: list[Category] = [
    Category(id="1", name="Food & Dining", color="#ef4444", icon="UtensilsCrossed"),
    Category(id="2", name="Transportation", color="#3b82f6", icon="Car"),
    Category(id="3", name="Shopping", color="#f59e0b", icon="ShoppingBag"),
    Category(id="4", name="Entertainment", color="#8b5cf6", icon="Music"),
    Category(id="5", name="Bills & Utilities", color="#06b6d4", icon="Receipt"),
    Category(id="6", name="Healthcare", color="#10b981", icon="Heart"),
    Category(id="7", name="Education", color="#f97316", icon="GraduationCap"),
    Category(id="8", name="Travel", color="#ec4899", icon="Plane"),
    Category(id="9", name=INCOME_CATEGORY, color="#22c55e", icon="DollarSign"),
    Category(id="10", name="Other", color=DEFAULT_CATEGORY_COLOR, icon="MoreHorizontal"),
]

_BY_NAME = {category.name: category for category in PREDEFINED_CATEGORIES}


def find_category(name: str) -> Optional[Category]:
    """Look up a predefined category by exact name."""
    return _BY_NAME.get(name)


def get_category_color(name: str) -> str:
    """Color of a category, or the default gray for unknown names."""
    category = find_category(name)
    return category.color if category else DEFAULT_CATEGORY_COLOR


def category_names() -> list[str]:
    return [category.name for category in PREDEFINED_CATEGORIES]


def budget_categories() -> list[Category]:
    """Categories a spending budget can be set for (everything but Income)."""
    return [c for c in PREDEFINED_CATEGORIES if c.name != INCOME_CATEGORY]


__all__ = [
    "DEFAULT_CATEGORY_COLOR",
    "INCOME_CATEGORY",
    "MONTHS",
    "PREDEFINED_CATEGORIES",
    "budget_categories",
    "category_names",
    "find_category",
    "get_category_color",
    "month_name",
    "month_number",
]
