"""
Expense Record Store

The single owner of expense records. All mutations go through here and
each one is followed by exactly one write of the full collection.

GUARANTEES:
- ids are unique across the collection at all times
- every record has amount > 0
- a rejected mutation leaves the collection untouched
- a failed write never rolls back the in-memory change
"""

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional, Union

import pydantic

from expense_tracker.audit import AuditLogger
from expense_tracker.exceptions import NotFoundError, ValidationError
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.expense import Expense, ValidationIssue, new_expense_id
from expense_tracker.services.storage import PersistenceGateway
from expense_tracker.validation import ExpenseValidator


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExpenseStore:
    """
    In-memory expense collection with write-through persistence.

    Insertion order is kept but carries no meaning; views derive
    their own ordering.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = new_expense_id,
    ):
        self._gateway = gateway
        self._validator = validator or ExpenseValidator()
        self._audit = audit_logger or AuditLogger()
        self._clock = clock
        self._id_factory = id_factory
        self._expenses: list[Expense] = []

    def __len__(self) -> int:
        return len(self._expenses)

    def __contains__(self, expense_id: object) -> bool:
        return any(expense.id == expense_id for expense in self._expenses)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def load(self) -> int:
        """Replace the in-memory collection with what storage holds. No write."""
        self._expenses = self._gateway.load_expenses()
        self._audit.log(AuditEventBuilder.expenses_loaded(len(self._expenses)))
        return len(self._expenses)

    def flush(self) -> bool:
        """Write the current collection again (e.g., on shutdown)."""
        return self._persist()

    def _persist(self) -> bool:
        return self._gateway.save_expenses(self._expenses)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def load_all(self) -> list[Expense]:
        """Snapshot of the collection in insertion order."""
        return list(self._expenses)

    def get(self, expense_id: str) -> Optional[Expense]:
        """The expense with this id, or None."""
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense
        return None

    def _index_of(self, expense_id: str) -> int:
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return index
        return -1

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _require_valid(self, operation: str, expense_id: Optional[str], *values: Any):
        try:
            return self._validator.require_valid(*values)
        except ValidationError as e:
            self._audit.log_validation_failure(
                operation,
                [issue.model_dump() for issue in e.issues],
                expense_id=expense_id,
            )
            raise

    def _fresh_id(self) -> str:
        existing = {expense.id for expense in self._expenses}
        expense_id = self._id_factory()
        while expense_id in existing:
            expense_id = self._id_factory()
        return expense_id

    def create(self, amount: Any, category: Any, date: Any, description: Any) -> Expense:
        """
        Add a new expense.

        Raises:
            ValidationError: amount is not a finite number > 0, or a text
                field is empty after trimming
        """
        values = self._require_valid("create", None, amount, category, date, description)

        expense = Expense(
            id=self._fresh_id(),
            amount=values.amount,
            category=values.category,
            date=values.date,
            description=values.description,
            created_at=self._clock(),
        )
        self._expenses.append(expense)
        self._audit.log(AuditEventBuilder.expense_created(expense.id, expense.amount, expense.category))
        self._persist()
        return expense

    def update(
        self,
        expense_id: str,
        amount: Any,
        category: Any,
        date: Any,
        description: Any,
    ) -> Expense:
        """
        Replace every field of an expense except id and created_at.

        The record keeps its position in the collection.

        Raises:
            NotFoundError: no expense has this id
            ValidationError: same rules as create()
        """
        index = self._index_of(expense_id)
        if index == -1:
            raise NotFoundError(expense_id)

        values = self._require_valid("update", expense_id, amount, category, date, description)

        current = self._expenses[index]
        updated = Expense(
            id=current.id,
            amount=values.amount,
            category=values.category,
            date=values.date,
            description=values.description,
            created_at=current.created_at,
        )
        self._expenses[index] = updated
        self._audit.log(AuditEventBuilder.expense_updated(updated.id, updated.amount, updated.category))
        self._persist()
        return updated

    def delete(self, expense_id: str) -> None:
        """Remove an expense. Unknown ids are ignored; storage is written either way."""
        remaining = [expense for expense in self._expenses if expense.id != expense_id]
        existed = len(remaining) != len(self._expenses)
        self._expenses = remaining
        self._audit.log(AuditEventBuilder.expense_deleted(expense_id, existed))
        self._persist()

    def clear_all(self) -> None:
        """Remove every expense."""
        removed = len(self._expenses)
        self._expenses = []
        self._audit.log(AuditEventBuilder.expenses_cleared(removed))
        self._persist()

    def replace_all(self, expenses: Iterable[Union[Expense, dict]]) -> None:
        """
        Swap in a whole new collection (imports, restores).

        Raises:
            ValidationError: an entry is not a valid expense, or ids repeat.
                The current collection is kept in that case.
        """
        replacement = []
        seen_ids = set()
        for position, item in enumerate(expenses):
            try:
                expense = item if isinstance(item, Expense) else Expense.model_validate(item)
            except pydantic.ValidationError as e:
                issue = ValidationIssue(
                    field=f"expenses[{position}]",
                    issue_type="invalid_value",
                    message=str(e),
                )
                raise ValidationError(f"Invalid expense at position {position}", [issue])
            if expense.id in seen_ids:
                issue = ValidationIssue(
                    field=f"expenses[{position}].id",
                    issue_type="duplicate",
                    message=f"Duplicate expense id: {expense.id}",
                )
                raise ValidationError(f"Duplicate expense id: {expense.id}", [issue])
            seen_ids.add(expense.id)
            replacement.append(expense)

        self._expenses = replacement
        self._audit.log(AuditEventBuilder.expenses_replaced(len(replacement)))
        self._persist()
