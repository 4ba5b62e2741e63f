"""Domain-specific exceptions for the expense engine."""

from typing import Optional

from expense_tracker.models.expense import ValidationIssue


class ExpenseTrackerError(Exception):
    """Base exception for the expense engine."""
    pass


class ValidationError(ExpenseTrackerError, ValueError):
    """
    Submitted expense data is malformed or out of range.

    The store is left unmodified whenever this is raised.
    """

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = list(issues or [])

    @property
    def fields(self) -> list[str]:
        """Names of the fields that failed."""
        return [issue.field for issue in self.issues]


class NotFoundError(ExpenseTrackerError, LookupError):
    """No expense with the requested id exists."""

    def __init__(self, expense_id: str):
        super().__init__(f"Expense not found: {expense_id}")
        self.expense_id = expense_id


class PersistenceError(ExpenseTrackerError):
    """Base exception for key-value storage operations."""
    pass


class StorageQuotaExceededError(PersistenceError):
    """A write would exceed the configured storage capacity."""
    pass
