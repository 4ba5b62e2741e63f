"""
CSV Export

The output is a pure function of the collection and its order, so the
same input always produces the same bytes. The description column is
always quoted; the other columns are written as-is.
"""

from decimal import ROUND_HALF_UP, Context, Decimal
from pathlib import Path
from typing import Sequence, Union

from expense_tracker.models.expense import Expense


CSV_HEADERS = ("ID", "Date", "Category", "Description", "Amount")

_CENTS = Decimal("0.01")
# wide enough for any finite float
_CONTEXT = Context(prec=400)


def _format_amount(amount: float) -> str:
    # exact binary value, ties away from zero
    return str(Decimal(amount).quantize(_CENTS, rounding=ROUND_HALF_UP, context=_CONTEXT))


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def expense_to_csv_row(expense: Expense) -> str:
    return ",".join([
        expense.id,
        expense.date,
        expense.category,
        _quote(expense.description),
        _format_amount(expense.amount),
    ])


def export_csv(records: Sequence[Expense]) -> str:
    """Header row plus one row per expense, joined with newlines."""
    lines = [",".join(CSV_HEADERS)]
    lines.extend(expense_to_csv_row(expense) for expense in records)
    return "\n".join(lines)


def write_csv(records: Sequence[Expense], path: Union[str, Path]) -> Path:
    """Write export_csv() output to a UTF-8 file and return its path."""
    path = Path(path)
    path.write_text(export_csv(records), encoding="utf-8")
    return path
