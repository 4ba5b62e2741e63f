"""
Budget Tracker

Owns the single monthly budget value. The budget is not tied to any
month: it is always compared against spending in today's calendar
month, whatever filter the user has selected.
"""

from datetime import date
from typing import Any, Optional, Sequence

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.expense import Expense, current_month_key
from expense_tracker.models.reports import BudgetProgress, BudgetStatus
from expense_tracker.services.storage import PersistenceGateway
from expense_tracker.validation import coerce_amount


DEFAULT_WARNING_PERCENTAGE = 80.0


def budget_status(
    budget: float,
    percentage: float,
    warning_percentage: float = DEFAULT_WARNING_PERCENTAGE,
) -> BudgetStatus:
    """Classify budget progress."""
    if budget <= 0:
        return BudgetStatus.NO_BUDGET
    if percentage >= 100:
        return BudgetStatus.OVER_BUDGET
    if percentage >= warning_percentage:
        return BudgetStatus.NEAR_LIMIT
    return BudgetStatus.ON_TRACK


class BudgetTracker:
    """Monthly budget value plus spent/remaining/percentage figures."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        audit_logger: Optional[AuditLogger] = None,
        warning_percentage: float = DEFAULT_WARNING_PERCENTAGE,
    ):
        self._gateway = gateway
        self._audit = audit_logger or AuditLogger()
        self._warning_percentage = warning_percentage
        self._budget = gateway.load_budget()

    @property
    def budget(self) -> float:
        return self._budget

    def reload(self) -> float:
        """Re-read the budget from storage."""
        self._budget = self._gateway.load_budget()
        return self._budget

    def set_budget(self, value: Any) -> float:
        """
        Store a new budget and persist it immediately.

        Non-numeric, non-finite or negative input becomes 0.
        Returns the value actually stored.
        """
        amount = coerce_amount(value)
        if amount is None or amount < 0:
            amount = 0.0

        self._budget = amount
        self._audit.log(AuditEventBuilder.budget_set(amount))
        self._gateway.save_budget(amount)
        return amount

    def progress(
        self,
        records: Sequence[Expense],
        today: Optional[date] = None,
    ) -> BudgetProgress:
        """Spending in today's month against the budget."""
        this_month = current_month_key(today)
        spent = 0.0
        for expense in records:
            if expense.month_key == this_month:
                spent += expense.amount

        budget = self._budget
        remaining = max(0.0, budget - spent)
        percentage = (spent / budget) * 100 if budget > 0 else 0.0

        return BudgetProgress(
            budget=budget,
            spent=spent,
            remaining=remaining,
            percentage=percentage,
            status=budget_status(budget, percentage, self._warning_percentage),
        )
