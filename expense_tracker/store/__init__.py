"""Expense record store package."""

from expense_tracker.store.expense_store import ExpenseStore

__all__ = ["ExpenseStore"]
