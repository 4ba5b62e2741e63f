"""Tests for the expense record store and its validation rules."""

import json

import pytest

from expense_tracker.exceptions import NotFoundError, ValidationError
from expense_tracker.models.audit import AuditEventType
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage import InMemoryKeyValueStore, PersistenceGateway
from expense_tracker.store import ExpenseStore
from expense_tracker.validation import ExpenseValidator, coerce_amount

from conftest import make_expense


EXPENSES_KEY = "expenseTracker:expenses"


def stored_ids(backend: InMemoryKeyValueStore) -> list[str]:
    return [item["id"] for item in json.loads(backend.get_item(EXPENSES_KEY))]


class CountingGateway(PersistenceGateway):
    """Gateway that counts full-collection writes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.expense_writes = 0

    def save_expenses(self, expenses):
        self.expense_writes += 1
        return super().save_expenses(expenses)


class TestCoerceAmount:
    """Tests for amount parsing."""

    @pytest.mark.parametrize("value,expected", [
        (12.5, 12.5),
        (3, 3.0),
        ("42", 42.0),
        (" 7.25 ", 7.25),
        ("-1", -1.0),
    ])
    def test_numeric_input(self, value, expected):
        assert coerce_amount(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", True, float("nan"), "inf", [1]])
    def test_non_numeric_input(self, value):
        assert coerce_amount(value) is None


class TestExpenseValidator:
    """Tests for the shared create/update rule set."""

    def test_valid_submission_is_normalized(self):
        result, values = ExpenseValidator().validate("25", " Food ", "2024-01-05", " Lunch ")
        assert result.is_valid
        assert values.amount == 25.0
        assert values.category == "Food"
        assert values.description == "Lunch"

    def test_reports_every_failing_field(self):
        result, values = ExpenseValidator().validate(0, "", " ", None)
        assert values is None
        fields = {issue.field for issue in result.issues}
        assert fields == {"amount", "category", "date", "description"}

    def test_require_valid_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            ExpenseValidator().require_valid("abc", "Food", "2024-01-05", "Lunch")
        assert exc_info.value.fields == ["amount"]


class TestCreate:
    """Tests for ExpenseStore.create."""

    def test_create_adds_one_record(self, store, backend):
        """Test that create then load_all holds exactly the new record."""
        before = store.load_all()
        expense = store.create(100, "Food", "2024-03-01", "Groceries")

        after = store.load_all()
        assert len(after) == len(before) + 1
        assert after[-1] == expense
        assert expense.amount == 100
        assert expense.category == "Food"
        assert expense.date == "2024-03-01"
        assert expense.description == "Groceries"
        assert stored_ids(backend) == [expense.id]

    def test_create_generates_unique_ids(self, store):
        ids = {store.create(i + 1, "Food", "2024-03-01", "Item").id for i in range(25)}
        assert len(ids) == 25

    def test_create_skips_colliding_ids(self, gateway):
        ids = iter(["dup", "dup", "fresh"])
        store = ExpenseStore(gateway, id_factory=lambda: next(ids))
        first = store.create(1, "Food", "2024-03-01", "A")
        second = store.create(2, "Food", "2024-03-01", "B")
        assert first.id == "dup"
        assert second.id == "fresh"

    @pytest.mark.parametrize("amount", [0, -10, "abc", None, float("nan"), float("inf")])
    def test_create_rejects_bad_amount(self, store, amount):
        """Test that invalid amounts leave the store unchanged."""
        store.create(5, "Food", "2024-03-01", "Existing")
        before = store.load_all()

        with pytest.raises(ValidationError):
            store.create(amount, "Food", "2024-03-01", "Bad")

        assert store.load_all() == before

    @pytest.mark.parametrize("field", ["category", "date", "description"])
    def test_create_rejects_empty_text(self, store, field):
        values = {"category": "Food", "date": "2024-03-01", "description": "Lunch"}
        values[field] = "   "
        with pytest.raises(ValidationError):
            store.create(10, **values)
        assert len(store) == 0

    def test_rejected_create_is_audited(self, store, audit_logger):
        with pytest.raises(ValidationError):
            store.create(-1, "Food", "2024-03-01", "Bad")
        assert audit_logger.history[-1].event_type == AuditEventType.VALIDATION_FAILED


class TestUpdate:
    """Tests for ExpenseStore.update."""

    def test_update_replaces_fields_in_place(self, store):
        first = store.create(10, "Food", "2024-03-01", "Lunch")
        second = store.create(20, "Travel", "2024-03-02", "Bus")

        updated = store.update(first.id, 15, "Dining", "2024-03-05", "Dinner")

        assert updated.id == first.id
        assert updated.created_at == first.created_at
        assert updated.amount == 15
        assert updated.category == "Dining"
        assert [e.id for e in store.load_all()] == [first.id, second.id]
        assert store.get(first.id) == updated

    def test_update_unknown_id(self, store):
        with pytest.raises(NotFoundError):
            store.update("missing", 10, "Food", "2024-03-01", "Lunch")

    def test_update_rejects_bad_amount(self, store):
        expense = store.create(10, "Food", "2024-03-01", "Lunch")
        before = store.load_all()
        with pytest.raises(ValidationError):
            store.update(expense.id, 0, "Food", "2024-03-01", "Lunch")
        assert store.load_all() == before

    def test_update_rejects_empty_description(self, store):
        """Test that update applies the same text rules as create."""
        expense = store.create(10, "Food", "2024-03-01", "Lunch")
        with pytest.raises(ValidationError):
            store.update(expense.id, 10, "Food", "2024-03-01", "  ")
        assert store.get(expense.id) == expense

    def test_old_snapshot_is_not_changed(self, store):
        expense = store.create(10, "Food", "2024-03-01", "Lunch")
        snapshot = store.load_all()
        store.update(expense.id, 99, "Food", "2024-03-01", "Lunch")
        assert snapshot[0].amount == 10


class TestDeleteAndClear:
    """Tests for delete, clear_all and replace_all."""

    def test_delete_removes_record(self, store, backend):
        keep = store.create(10, "Food", "2024-03-01", "Keep")
        drop = store.create(20, "Food", "2024-03-01", "Drop")
        store.delete(drop.id)
        assert store.load_all() == [keep]
        assert stored_ids(backend) == [keep.id]

    def test_delete_unknown_id_is_noop(self, store):
        store.create(10, "Food", "2024-03-01", "Keep")
        before = store.load_all()
        store.delete("missing")
        assert store.load_all() == before

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_clear_all_empties(self, store, backend, count):
        for i in range(count):
            store.create(i + 1, "Food", "2024-03-01", "Item")
        store.clear_all()
        assert store.load_all() == []
        assert json.loads(backend.get_item(EXPENSES_KEY)) == []

    def test_replace_all(self, store):
        store.create(10, "Food", "2024-03-01", "Old")
        replacement = [make_expense("a", 1), make_expense("b", 2)]
        store.replace_all(replacement)
        assert [e.id for e in store.load_all()] == ["a", "b"]

    def test_replace_all_accepts_dicts(self, store):
        store.replace_all([{
            "id": "a", "amount": 3, "category": "Food",
            "date": "2024-03-01", "description": "Tea",
        }])
        assert store.get("a").amount == 3

    def test_replace_all_rejects_duplicates(self, store):
        existing = store.create(10, "Food", "2024-03-01", "Old")
        with pytest.raises(ValidationError):
            store.replace_all([make_expense("a", 1), make_expense("a", 2)])
        assert store.load_all() == [existing]

    def test_replace_all_rejects_invalid_entry(self, store):
        with pytest.raises(ValidationError):
            store.replace_all([{"id": "a", "amount": -1, "category": "Food",
                                "date": "2024-03-01", "description": "Tea"}])
        assert len(store) == 0


class TestPersistenceWrites:
    """Tests for write-through behaviour."""

    def test_each_mutation_writes_once(self, backend):
        gateway = CountingGateway(backend)
        store = ExpenseStore(gateway)

        expense = store.create(10, "Food", "2024-03-01", "Lunch")
        store.update(expense.id, 11, "Food", "2024-03-01", "Lunch")
        store.delete("missing")
        store.delete(expense.id)
        store.clear_all()
        store.replace_all([make_expense("a", 1)])

        assert gateway.expense_writes == 6

    def test_rejected_mutation_does_not_write(self, backend):
        gateway = CountingGateway(backend)
        store = ExpenseStore(gateway)
        with pytest.raises(ValidationError):
            store.create(0, "Food", "2024-03-01", "Lunch")
        with pytest.raises(NotFoundError):
            store.update("missing", 1, "Food", "2024-03-01", "Lunch")
        assert gateway.expense_writes == 0

    def test_failed_write_keeps_memory_state(self, audit_logger):
        """Test that a full backend does not roll back or raise."""
        backend = InMemoryKeyValueStore(max_bytes=10)
        store = ExpenseStore(PersistenceGateway(backend, audit_logger=audit_logger),
                             audit_logger=audit_logger)

        expense = store.create(10, "Food", "2024-03-01", "Lunch")

        assert store.load_all() == [expense]
        assert backend.get_item(EXPENSES_KEY) is None
        assert audit_logger.history[-1].event_type == AuditEventType.PERSISTENCE_FAILED

    def test_load_reads_existing_collection(self, backend, gateway):
        first = ExpenseStore(gateway)
        expense = first.create(10, "Food", "2024-03-01", "Lunch")

        second = ExpenseStore(PersistenceGateway(backend))
        assert second.load() == 1
        assert second.load_all() == [expense]
        assert isinstance(second.load_all()[0], Expense)

    def test_flush_rewrites_collection(self, backend, gateway):
        store = ExpenseStore(gateway)
        store.create(10, "Food", "2024-03-01", "Lunch")
        backend.remove_item(EXPENSES_KEY)
        assert store.flush() is True
        assert len(stored_ids(backend)) == 1
