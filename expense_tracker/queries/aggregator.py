"""
Aggregator

Computes summary figures over whatever set of expenses it is given.
The dashboard passes the full store for the summary cards and the
filtered view for the category chart; the two inputs differ on purpose.

Sums are accumulated in a single left-to-right pass so results are
reproducible for a given input order.
"""

from datetime import date
from typing import Optional, Sequence

from expense_tracker.models.expense import Expense, current_month_key
from expense_tracker.models.reports import CategoryBreakdown, Summary


def category_totals(records: Sequence[Expense]) -> dict[str, float]:
    """Total per category, keyed in first-seen order."""
    totals: dict[str, float] = {}
    for expense in records:
        totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
    return totals


def top_category(totals: dict[str, float]) -> tuple[Optional[str], float]:
    """
    Category with the strictly greatest positive total.

    Ties keep the first category seen. Returns (None, 0.0) when no
    total is positive.
    """
    best_name = None
    best_amount = 0.0
    for name, total in totals.items():
        if total > best_amount:
            best_name = name
            best_amount = total
    return best_name, best_amount


class Aggregator:
    """Summary and chart figures for a set of expenses."""

    def summarize(
        self,
        records: Sequence[Expense],
        today: Optional[date] = None,
    ) -> Summary:
        """
        Month total, all-time total, per-category totals, top category
        and transaction count. "This month" is today's calendar month.
        """
        this_month = current_month_key(today)

        month_total = 0.0
        all_time_total = 0.0
        totals: dict[str, float] = {}

        for expense in records:
            all_time_total += expense.amount
            if expense.month_key == this_month:
                month_total += expense.amount
            totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount

        top_name, top_amount = top_category(totals)

        return Summary(
            month_key=this_month,
            month_total=month_total,
            all_time_total=all_time_total,
            category_totals=totals,
            top_category=top_name,
            top_category_amount=top_amount,
            transaction_count=len(records),
        )

    def category_breakdown(self, records: Sequence[Expense]) -> CategoryBreakdown:
        """Chart-ready labels and values."""
        totals = category_totals(records)
        return CategoryBreakdown(
            labels=list(totals.keys()),
            values=list(totals.values()),
        )
