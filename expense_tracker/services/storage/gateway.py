"""
Persistence Gateway

Translates between the expense engine and the string key-value backend.

CRITICAL: Nothing in here propagates a storage failure. Reads fall back to
safe defaults (empty collection, zero budget, light theme) and writes
report failure through their return value. Every failure is logged.
"""

import json
import math
from typing import Iterable, Optional

import pydantic
import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.config import StorageSettings
from expense_tracker.exceptions import PersistenceError
from expense_tracker.models.expense import Expense, Theme
from expense_tracker.services.storage.interface import KeyValueStoreInterface
from expense_tracker.services.storage.json_file import JsonFileKeyValueStore
from expense_tracker.services.storage.memory import InMemoryKeyValueStore


logger = structlog.get_logger(__name__)


def create_key_value_store(settings: StorageSettings) -> KeyValueStoreInterface:
    """Build the backend selected in configuration."""
    if settings.backend == "memory":
        return InMemoryKeyValueStore(max_bytes=settings.max_bytes)
    return JsonFileKeyValueStore(
        settings.path,
        max_bytes=settings.max_bytes,
        write_attempts=settings.write_attempts,
    )


def format_budget(amount: float) -> str:
    """Stringify a budget the way it is stored ("500", "12.5")."""
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


class PersistenceGateway:
    """
    Saves and loads the expense collection and the two scalar preferences.

    Keys and backend are injected; see StorageSettings for defaults.
    """

    def __init__(
        self,
        backend: KeyValueStoreInterface,
        settings: Optional[StorageSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._settings = settings or StorageSettings()
        self._audit = audit_logger or AuditLogger()

    @property
    def backend(self) -> KeyValueStoreInterface:
        return self._backend

    # -------------------------------------------------------------------------
    # Raw access
    # -------------------------------------------------------------------------

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._backend.get_item(key)
        except PersistenceError as e:
            self._audit.log_persistence_failure(key, "read", e)
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            self._backend.set_item(key, value)
            return True
        except PersistenceError as e:
            self._audit.log_persistence_failure(key, "write", e)
            return False

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def load_expenses(self) -> list[Expense]:
        """
        Load the stored collection.

        Absent or unparseable data gives an empty list. Entries that fail
        validation, or repeat an id already loaded, are skipped.
        """
        key = self._settings.expenses_key
        raw = self._read(key)
        if not raw:
            return []

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.warning("stored_expenses_unparseable", key=key, error=str(e))
            return []
        if not isinstance(parsed, list):
            logger.warning("stored_expenses_not_a_list", key=key)
            return []

        expenses = []
        seen_ids = set()
        skipped = 0
        for item in parsed:
            try:
                expense = Expense.model_validate(item)
            except pydantic.ValidationError as e:
                skipped += 1
                logger.warning("stored_expense_skipped", key=key, error=str(e))
                continue
            if expense.id in seen_ids:
                skipped += 1
                logger.warning("stored_expense_duplicate_id", key=key, expense_id=expense.id)
                continue
            seen_ids.add(expense.id)
            expenses.append(expense)

        if skipped:
            logger.warning("stored_expenses_partially_loaded", loaded=len(expenses), skipped=skipped)
        return expenses

    def save_expenses(self, expenses: Iterable[Expense]) -> bool:
        """Write the full collection. Returns False if the write failed."""
        payload = json.dumps([expense.to_storage_dict() for expense in expenses])
        return self._write(self._settings.expenses_key, payload)

    # -------------------------------------------------------------------------
    # Budget
    # -------------------------------------------------------------------------

    def load_budget(self) -> float:
        """Stored budget, or 0 when absent, unparseable or negative."""
        raw = self._read(self._settings.budget_key)
        if not raw:
            return 0.0
        try:
            value = float(raw.strip())
        except ValueError:
            logger.warning("stored_budget_unparseable", value=raw)
            return 0.0
        if not math.isfinite(value) or value < 0:
            return 0.0
        return value

    def save_budget(self, amount: float) -> bool:
        return self._write(self._settings.budget_key, format_budget(amount))

    # -------------------------------------------------------------------------
    # Theme
    # -------------------------------------------------------------------------

    def load_theme(self) -> Theme:
        """Dark only for the literal "dark" token, light otherwise."""
        raw = self._read(self._settings.theme_key)
        return Theme.DARK if raw == Theme.DARK.value else Theme.LIGHT

    def save_theme(self, theme: Theme) -> bool:
        return self._write(self._settings.theme_key, Theme(theme).value)
