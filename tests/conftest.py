"""Shared fixtures for the expense engine tests."""

from datetime import date

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.budget import BudgetTracker
from expense_tracker.config import get_settings
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage import InMemoryKeyValueStore, PersistenceGateway
from expense_tracker.store import ExpenseStore


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep tests away from any real .env file or data file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("EXPENSE_TRACKER_STORAGE_BACKEND", "memory")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def today() -> date:
    return date(2024, 3, 15)


@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def gateway(backend, audit_logger) -> PersistenceGateway:
    return PersistenceGateway(backend, audit_logger=audit_logger)


@pytest.fixture
def store(gateway, audit_logger) -> ExpenseStore:
    return ExpenseStore(gateway, audit_logger=audit_logger)


@pytest.fixture
def budget_tracker(gateway, audit_logger) -> BudgetTracker:
    return BudgetTracker(gateway, audit_logger=audit_logger)


def make_expense(
    expense_id: str,
    amount: float,
    category: str = "Food",
    date: str = "2024-03-10",
    description: str = "Lunch",
) -> Expense:
    return Expense(
        id=expense_id,
        amount=amount,
        category=category,
        date=date,
        description=description,
    )
