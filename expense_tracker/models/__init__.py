"""
Data Models Package

This package contains all Pydantic models used by the expense engine.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    Expense,
    QuerySpec,
    SortKey,
    Theme,
    ValidationIssue,
    ValidationResult,
    current_month_key,
    month_key,
    new_expense_id,
    parse_expense_date,
)
from expense_tracker.models.reports import (
    BudgetProgress,
    BudgetStatus,
    CategoryBreakdown,
    DashboardView,
    Summary,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "Expense",
    "QuerySpec",
    "SortKey",
    "Theme",
    "ValidationIssue",
    "ValidationResult",
    "current_month_key",
    "month_key",
    "new_expense_id",
    "parse_expense_date",
    # Report models
    "BudgetProgress",
    "BudgetStatus",
    "CategoryBreakdown",
    "DashboardView",
    "Summary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
