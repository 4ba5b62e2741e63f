"""Validation package."""

from expense_tracker.validation.validator import (
    ExpenseInput,
    ExpenseValidator,
    coerce_amount,
)

__all__ = ["ExpenseInput", "ExpenseValidator", "coerce_amount"]
