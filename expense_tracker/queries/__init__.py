"""Query and aggregation package."""

from expense_tracker.queries.aggregator import Aggregator, category_totals, top_category
from expense_tracker.queries.engine import QueryEngine, process_expenses

__all__ = [
    "Aggregator",
    "QueryEngine",
    "category_totals",
    "process_expenses",
    "top_category",
]
