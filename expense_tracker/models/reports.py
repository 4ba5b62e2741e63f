"""
Derived Report Models

Plain data handed to rendering collaborators (tables, cards, charts).
None of these are persisted; they are recomputed on every refresh.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from expense_tracker.models.expense import Expense, QuerySpec, Theme


class Summary(BaseModel):
    """
    Aggregate figures over a set of expenses.

    top_category is None when no category has a positive total.
    """

    month_key: str = Field(
        ...,
        description="Month the month_total refers to (today's month)"
    )
    month_total: float = 0.0
    all_time_total: float = 0.0
    category_totals: dict[str, float] = Field(
        default_factory=dict,
        description="Totals per category, in first-seen order"
    )
    top_category: Optional[str] = None
    top_category_amount: float = 0.0
    transaction_count: int = Field(default=0, ge=0)

    @property
    def has_top_category(self) -> bool:
        return self.top_category is not None


class CategoryBreakdown(BaseModel):
    """Chart-ready category totals as parallel label/value lists."""

    labels: list[str] = Field(default_factory=list)
    values: list[float] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.labels


class BudgetStatus(str, Enum):
    """Coarse budget health used to pick colours and messages."""
    NO_BUDGET = "no_budget"
    ON_TRACK = "on_track"
    NEAR_LIMIT = "near_limit"
    OVER_BUDGET = "over_budget"


class BudgetProgress(BaseModel):
    """
    Budget progress for the current calendar month.

    remaining is never negative; percentage is 0 whenever no budget is set.
    """

    budget: float = Field(default=0.0, ge=0)
    spent: float = 0.0
    remaining: float = Field(default=0.0, ge=0)
    percentage: float = Field(default=0.0, ge=0)
    status: BudgetStatus = BudgetStatus.NO_BUDGET

    @property
    def bar_percentage(self) -> float:
        """Percentage clamped to 100 for progress bars."""
        return min(100.0, self.percentage)


class DashboardView(BaseModel):
    """Everything one UI refresh needs, computed in a single call."""

    spec: QuerySpec
    expenses: list[Expense] = Field(
        default_factory=list,
        description="Filtered and sorted view (snapshot)"
    )
    summary: Summary
    category_breakdown: CategoryBreakdown
    budget: BudgetProgress
    theme: Theme = Theme.LIGHT
