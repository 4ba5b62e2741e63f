"""Budget tracking package."""

from expense_tracker.budget.tracker import BudgetTracker, budget_status

__all__ = ["BudgetTracker", "budget_status"]
