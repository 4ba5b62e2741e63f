"""
Query Engine

DESIGN DECISION: Views are DERIVED, never stored.
Every refresh runs the full pipeline over the current collection:

    search -> month -> category -> sort

Each stage narrows or reorders a copy; the input sequence is never
mutated and no stage raises on odd input. A malformed month key simply
matches nothing.
"""

from typing import Optional, Sequence, Union

from expense_tracker.models.expense import Expense, QuerySpec, SortKey


class QueryEngine:
    """
    Applies a QuerySpec to a sequence of expenses.

    Stateless; one instance can serve every refresh.
    """

    def process(
        self,
        records: Sequence[Expense],
        spec: Optional[Union[QuerySpec, dict]] = None,
    ) -> list[Expense]:
        """Run the full pipeline and return a new list."""
        if spec is None:
            spec = QuerySpec()
        elif isinstance(spec, dict):
            spec = QuerySpec.model_validate(spec)

        view = list(records)
        view = self._filter_search(view, spec.search_text)
        view = self._filter_month(view, spec.month_key)
        view = self._filter_category(view, spec.category)
        return self._sort(view, spec.sort_key)

    def _filter_search(self, view: list[Expense], search_text: str) -> list[Expense]:
        """Case-insensitive substring match on description or category."""
        needle = search_text.strip().casefold()
        if not needle:
            return view
        return [
            expense for expense in view
            if needle in expense.description.casefold()
            or needle in expense.category.casefold()
        ]

    def _filter_month(self, view: list[Expense], month_key: Optional[str]) -> list[Expense]:
        if not month_key:
            return view
        return [expense for expense in view if expense.month_key == month_key]

    def _filter_category(self, view: list[Expense], category: Optional[str]) -> list[Expense]:
        """Exact, case-sensitive category match."""
        if not category:
            return view
        return [expense for expense in view if expense.category == category]

    def _sort(self, view: list[Expense], sort_key: Optional[str]) -> list[Expense]:
        """
        Stable sort by the requested key.

        Unknown keys keep the filtered order. For date sorts, records whose
        date cannot be parsed go last, in their original relative order.
        """
        try:
            key = SortKey(sort_key)
        except ValueError:
            return view

        if key in (SortKey.AMOUNT_ASC, SortKey.AMOUNT_DESC):
            return sorted(
                view,
                key=lambda expense: expense.amount,
                reverse=key == SortKey.AMOUNT_DESC,
            )

        dated = []
        undated = []
        for expense in view:
            parsed = expense.parsed_date
            if parsed is None:
                undated.append(expense)
            else:
                dated.append((parsed, expense))

        dated.sort(key=lambda pair: pair[0], reverse=key == SortKey.DATE_DESC)
        return [expense for _, expense in dated] + undated


def process_expenses(
    records: Sequence[Expense],
    spec: Optional[Union[QuerySpec, dict]] = None,
) -> list[Expense]:
    """Convenience wrapper around QueryEngine().process()."""
    return QueryEngine().process(records, spec)
