"""
Expense Input Validation

DESIGN DECISION: Create and update share ONE rule set:
- amount must be a finite number greater than zero
- category, date and description must be non-empty after trimming

The validator NEVER silently fixes issues beyond trimming whitespace
and reading numeric text. Everything else is reported back.
"""

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, NamedTuple, Optional

from expense_tracker.exceptions import ValidationError
from expense_tracker.models.expense import ValidationIssue, ValidationResult


class ExpenseInput(NamedTuple):
    """Normalized form values ready to build an Expense."""
    amount: float
    category: str
    date: str
    description: str


def coerce_amount(value: Any) -> Optional[float]:
    """
    Read an amount from user input.

    Numbers and numeric text are accepted. Returns None for booleans,
    non-numeric text and non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    elif isinstance(value, Decimal):
        try:
            amount = float(value)
        except (InvalidOperation, ValueError):
            return None
    elif isinstance(value, str):
        try:
            amount = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(amount):
        return None
    return amount


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value).strip()


class ExpenseValidator:
    """Validates create/update submissions for the expense store."""

    REQUIRED_TEXT_FIELDS = ("category", "date", "description")

    def validate(
        self,
        amount: Any,
        category: Any,
        date: Any,
        description: Any,
    ) -> tuple[ValidationResult, Optional[ExpenseInput]]:
        """
        Check one submission.

        Returns: (result, normalized_input). normalized_input is None
        whenever the result has errors.
        """
        issues = []

        parsed_amount = coerce_amount(amount)
        if parsed_amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Please enter a valid amount greater than 0.",
            ))
        elif parsed_amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Please enter a valid amount greater than 0.",
            ))

        values = {
            "category": _text(category),
            "date": _text(date),
            "description": _text(description),
        }
        for field in self.REQUIRED_TEXT_FIELDS:
            if not values[field]:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message=f"{field.capitalize()} is required.",
                ))

        result = ValidationResult(issues=issues)
        if result.has_errors:
            return result, None

        return result, ExpenseInput(
            amount=parsed_amount,
            category=values["category"],
            date=values["date"],
            description=values["description"],
        )

    def require_valid(
        self,
        amount: Any,
        category: Any,
        date: Any,
        description: Any,
    ) -> ExpenseInput:
        """Like validate(), but raise ValidationError on any error."""
        result, normalized = self.validate(amount, category, date, description)
        if normalized is None:
            messages = "; ".join(
                f"{issue.field}: {issue.message}" for issue in result.issues
            )
            raise ValidationError(f"Invalid expense: {messages}", result.issues)
        return normalized
