"""
Core Data Models for Finance Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging
4. Support the audit trail

DESIGN DECISION: Stored records use the camelCase browser storage field
names (``createdAt``). IDs are UUIDs, so lists keyed by timestamp strings
are rejected as corrupt rather than loaded.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def month_name(number: int) -> str:
    """English name of a month number (1-12)."""
    if not 1 <= number <= 12:
        raise ValueError(f"Month number must be between 1 and 12, got {number}")
    return MONTHS[number - 1]


def month_number(name: str) -> int:
    """Month number (1-12) of an English month name, any casing."""
    try:
        return MONTHS.index(name.strip().title()) + 1
    except ValueError:
        raise ValueError(f"Unknown month: {name}") from None


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class BudgetStatus(str, Enum):
    """
    How much of a budget has been used.

    Thresholds are configurable (see AppSettings).
    """
    GOOD = "good"        # At or below the warning threshold
    WARNING = "warning"  # Between warning and danger thresholds
    DANGER = "danger"    # Above the danger threshold


def _normalize_month(value: object) -> object:
    """Accept a month number (1-12) or any casing of the English name."""
    if isinstance(value, int) and not isinstance(value, bool):
        if not 1 <= value <= 12:
            raise ValueError(f"Month number must be between 1 and 12, got {value}")
        return MONTHS[value - 1]
    if isinstance(value, str):
        name = value.strip().title()
        if name not in MONTHS:
            raise ValueError(f"Unknown month: {value}")
        return name
    return value


# =============================================================================
# CATEGORY
# =============================================================================

class Category(BaseModel):
    """A named, colored classification tag."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., pattern="^#[0-9a-fA-F]{6}$")
    icon: str = Field(default="MoreHorizontal")


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionDraft(BaseModel):
    """
    The user-supplied part of a transaction.

    Identity and creation time are assigned by the repository.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Amount, always positive; direction comes from type"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Free-text description"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Category name"
    )
    type: TransactionType = Field(
        default=TransactionType.EXPENSE,
        description="Income or expense"
    )


class Transaction(TransactionDraft):
    """A stored income or expense record."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    created_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow,
        alias="createdAt",
        description="When the transaction was recorded"
    )

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def month_key(self) -> str:
        """Year-month key used for grouping, e.g. '2024-03'."""
        return f"{self.date.year}-{self.date.month:02d}"

    @field_serializer('amount', when_used='json')
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)

    def to_record(self) -> dict:
        """Convert to the dict persisted in the key-value store."""
        return self.model_dump(mode="json", by_alias=True)


class TransactionUpdate(BaseModel):
    """Partial update of a transaction; unset fields are left alone."""

    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    date: Optional[dt.date] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    type: Optional[TransactionType] = None


# =============================================================================
# BUDGETS
# =============================================================================

class BudgetDraft(BaseModel):
    """
    A monthly spending ceiling for one category.

    Month is stored by name ("January"), not number.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    category: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Category the ceiling applies to"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Spending ceiling"
    )
    month: str = Field(
        ...,
        description="English month name"
    )
    year: int = Field(
        ...,
        ge=1900,
        le=9999
    )

    @field_validator('month', mode='before')
    @classmethod
    def normalize_month(cls, v: object) -> object:
        return _normalize_month(v)

    @property
    def month_number(self) -> int:
        return month_number(self.month)


class Budget(BudgetDraft):
    """A stored budget."""

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique budget ID"
    )

    @field_serializer('amount', when_used='json')
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)

    def to_record(self) -> dict:
        """Convert to the dict persisted in the key-value store."""
        return self.model_dump(mode="json", by_alias=True)


class BudgetUpdate(BaseModel):
    """Partial update of a budget."""

    model_config = ConfigDict(str_strip_whitespace=True)

    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    month: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900, le=9999)

    @field_validator('month', mode='before')
    @classmethod
    def normalize_month(cls, v: object) -> object:
        if v is None:
            return v
        return _normalize_month(v)


# =============================================================================
# REPORT MODELS
# =============================================================================

class MonthlyExpense(BaseModel):
    """One bar of the monthly expenses chart."""

    month_key: str = Field(..., description="Year-month, e.g. '2024-03'")
    month: str = Field(..., description="Short month label, e.g. 'Mar'")
    amount: Decimal = Field(..., description="Total rounded to whole units")


class CategoryExpense(BaseModel):
    """One slice of the expenses-by-category chart."""

    category: str
    amount: Decimal
    color: str


class BudgetComparison(BaseModel):
    """Budget vs actual spending for one budget in the reference month."""

    category: str
    budget: Decimal
    actual: Decimal
    color: str


class BudgetProgress(BaseModel):
    """How far one budget has been used."""

    budget: Budget
    spent: Decimal
    remaining: Decimal = Field(..., description="Negative when over budget")
    percentage: float = Field(..., ge=0.0, description="Share of the budget spent")
    is_over_budget: bool
    status: BudgetStatus
    color: str

    @property
    def bar_percentage(self) -> float:
        """Percentage capped at 100 for progress bars."""
        return min(self.percentage, 100.0)


class BudgetOverview(BaseModel):
    """Totals across all budgets of one month."""

    month: str
    year: int
    total_budget: Decimal
    total_spent: Decimal
    remaining: Decimal
    items: list[BudgetProgress] = Field(default_factory=list)

    @property
    def has_budgets(self) -> bool:
        return bool(self.items)


class TopCategory(BaseModel):
    """The expense category with the highest total."""

    category: str
    amount: Decimal
    color: str


class MonthlySummary(BaseModel):
    """
    Headline numbers for the reference month.

    Recent transactions are drawn from the whole history, not just the month.
    """

    month: str
    year: int
    total_income: Decimal
    total_expenses: Decimal
    net_balance: Decimal
    top_category: Optional[TopCategory] = None
    recent_transactions: list[Transaction] = Field(default_factory=list)

    @property
    def is_surplus(self) -> bool:
        return self.net_balance >= 0


class TransactionFilter(BaseModel):
    """
    Criteria for the transaction list.

    None for category or type means "all".
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    search: str = ""
    category: Optional[str] = None
    type: Optional[TransactionType] = None

    @property
    def is_active(self) -> bool:
        return bool(self.search) or self.category is not None or self.type is not None


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (types, required fields)
    Stage 2: Semantic validation (logic checks)
    """

    subject: str = Field(
        ...,
        description="What was validated ('transaction' or 'budget')"
    )
    validated_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow
    )

    schema_valid: bool
    semantic_valid: bool
    is_valid: bool

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    # Warnings don't block but should be shown
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def errors_by_field(self) -> dict[str, str]:
        """First error message per field, for showing next to form inputs."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error" and issue.field not in errors:
                errors[issue.field] = issue.message
        return errors
