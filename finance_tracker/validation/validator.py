"""
Two-Stage Validation Pipeline

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Number and date parsing
- Positive amounts
- This catches incomplete or malformed form input

STAGE 2 - SEMANTIC VALIDATION:
- Unknown categories
- Dates far in the future
- Absurd amounts
- Duplicate budgets
- This catches entries that parse but are probably mistakes

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to correct.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ValidationError

from finance_tracker.categories import INCOME_CATEGORY, find_category
from finance_tracker.config import AppSettings, get_settings
from finance_tracker.models.finance import (
    MONTHS,
    Budget,
    BudgetDraft,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_amount(value: Any) -> Optional[Decimal]:
    """Parse a form amount; None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _issues_from_pydantic(error: ValidationError) -> list[ValidationIssue]:
    issues = []
    for detail in error.errors():
        field = str(detail["loc"][0]) if detail["loc"] else "record"
        issues.append(ValidationIssue(
            field=field,
            issue_type="invalid_value",
            message=detail["msg"],
            severity="error",
        ))
    return issues


class _TwoStageValidator(ABC):
    """Common pipeline: schema checks, then semantic checks on the parsed draft."""

    subject: str
    draft_model: type[BaseModel]

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    @abstractmethod
    def _validate_schema(self, raw: dict) -> list[ValidationIssue]:
        """Stage 1: presence and parsing of the raw form values."""

    @abstractmethod
    def _validate_semantic(self, draft: BaseModel, **context: Any) -> list[ValidationIssue]:
        """Stage 2: plausibility checks on a parsed draft."""

    def _normalize(self, raw: dict) -> dict:
        return dict(raw)

    def _run(self, raw: dict, **context: Any) -> tuple[ValidationResult, Optional[BaseModel]]:
        all_issues = self._validate_schema(raw)
        schema_valid = not any(issue.severity == "error" for issue in all_issues)

        draft = None
        if schema_valid:
            try:
                draft = self.draft_model.model_validate(self._normalize(raw))
            except ValidationError as e:
                all_issues.extend(_issues_from_pydantic(e))
                schema_valid = False

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid and draft is not None:
            semantic_issues = self._validate_semantic(draft, **context)
            all_issues.extend(semantic_issues)
            semantic_valid = not any(issue.severity == "error" for issue in semantic_issues)

        warnings = [issue.message for issue in all_issues if issue.severity == "warning"]
        is_valid = schema_valid and semantic_valid

        result = ValidationResult(
            subject=self.subject,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=is_valid,
            issues=all_issues,
            warnings=warnings,
        )
        return result, draft if is_valid else None

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed."

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        if result.is_valid:
            lines.append("")
            lines.append("The entry was accepted, but please double-check it.")

        return "\n".join(lines)


class TransactionValidator(_TwoStageValidator):
    """
    Validates transaction form input.

    Stage 1 mirrors the transaction form's required-field rules.
    Stage 2 only produces warnings: a transaction that parses is storable.
    """

    subject = "transaction"
    draft_model = TransactionDraft

    def validate_draft(
        self,
        raw: dict,
        today: Optional[date] = None,
    ) -> tuple[ValidationResult, Optional[TransactionDraft]]:
        """
        Validate raw form values.

        Returns:
            (result, draft) - draft is None unless the result is valid
        """
        return self._run(raw, today=today)

    def _normalize(self, raw: dict) -> dict:
        data = dict(raw)
        data["amount"] = _parse_amount(raw.get("amount"))
        data["date"] = _parse_date(raw.get("date"))
        if _is_blank(data.get("type")):
            data.pop("type", None)
        return data

    def _validate_schema(self, raw: dict) -> list[ValidationIssue]:
        issues = []

        amount = _parse_amount(raw.get("amount"))
        if amount is None or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing" if _is_blank(raw.get("amount")) else "invalid_value",
                message="Amount must be greater than 0",
                severity="error",
            ))

        if _is_blank(raw.get("date")):
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))
        elif _parse_date(raw.get("date")) is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Date must be a valid date (YYYY-MM-DD)",
                severity="error",
            ))

        if _is_blank(raw.get("description")):
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
            ))

        if _is_blank(raw.get("category")):
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            ))

        raw_type = raw.get("type")
        if not _is_blank(raw_type):
            valid_types = {t.value for t in TransactionType}
            value = raw_type.value if isinstance(raw_type, TransactionType) else str(raw_type)
            if value not in valid_types:
                issues.append(ValidationIssue(
                    field="type",
                    issue_type="invalid_value",
                    message="Type must be 'income' or 'expense'",
                    severity="error",
                ))

        return issues

    def _validate_semantic(self, draft: TransactionDraft, **context: Any) -> list[ValidationIssue]:
        issues = []
        today = context.get("today") or date.today()

        if find_category(draft.category) is None:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"'{draft.category}' is not one of the predefined categories",
                severity="warning",
                suggested_fix="It will be shown in the default gray",
            ))

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if draft.date > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Transaction date ({draft.date}) is far in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        max_amount = Decimal(str(self._settings.max_reasonable_amount))
        if draft.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({draft.amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        if draft.type == TransactionType.EXPENSE and draft.category == INCOME_CATEGORY:
            issues.append(ValidationIssue(
                field="category",
                issue_type="inconsistent",
                message="An expense is filed under the Income category",
                severity="warning",
                suggested_fix="Pick a spending category or change the type to income",
            ))

        return issues


class BudgetValidator(_TwoStageValidator):
    """
    Validates budget form input.

    Duplicate detection needs the existing budgets, passed by the caller.
    """

    subject = "budget"
    draft_model = BudgetDraft

    def validate_draft(
        self,
        raw: dict,
        existing: Iterable[Budget] = (),
    ) -> tuple[ValidationResult, Optional[BudgetDraft]]:
        """
        Validate raw form values.

        Returns:
            (result, draft) - draft is None unless the result is valid
        """
        return self._run(raw, existing=list(existing))

    def _normalize(self, raw: dict) -> dict:
        data = dict(raw)
        data["amount"] = _parse_amount(raw.get("amount"))
        return data

    def _validate_schema(self, raw: dict) -> list[ValidationIssue]:
        issues = []

        if _is_blank(raw.get("category")):
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            ))

        amount = _parse_amount(raw.get("amount"))
        if amount is None or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing" if _is_blank(raw.get("amount")) else "invalid_value",
                message="Budget amount must be greater than 0",
                severity="error",
            ))

        month = raw.get("month")
        if _is_blank(month):
            issues.append(ValidationIssue(
                field="month",
                issue_type="missing",
                message="Month is required",
                severity="error",
            ))
        elif isinstance(month, str) and month.strip().title() not in MONTHS:
            issues.append(ValidationIssue(
                field="month",
                issue_type="invalid_value",
                message=f"Unknown month: {month}",
                severity="error",
            ))

        if raw.get("year") is None:
            issues.append(ValidationIssue(
                field="year",
                issue_type="missing",
                message="Year is required",
                severity="error",
            ))

        return issues

    def _validate_semantic(self, draft: BudgetDraft, **context: Any) -> list[ValidationIssue]:
        issues = []

        if draft.category == INCOME_CATEGORY:
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message="Budgets can only be set for spending categories",
                severity="error",
                suggested_fix="Choose any category other than Income",
            ))
        elif find_category(draft.category) is None:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"'{draft.category}' is not one of the predefined categories",
                severity="warning",
            ))

        for budget in context.get("existing", []):
            if (
                budget.category == draft.category
                and budget.month == draft.month
                and budget.year == draft.year
            ):
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="potential_duplicate",
                    message=(
                        f"A {draft.category} budget for {draft.month} {draft.year} "
                        "already exists"
                    ),
                    severity="warning",
                    suggested_fix="Both budgets will count this category's spending",
                ))
                break

        return issues
