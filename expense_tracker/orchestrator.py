"""
Main Orchestrator for Expense Tracker

Ties the components together and defines the flows a UI drives:
1. Startup (configure logging -> build backend -> load expenses, budget, theme)
2. Mutation (form submit / delete / clear -> store -> storage)
3. Refresh (query spec -> view -> summary, chart data, budget progress)

DESIGN DECISION: There is no module-level state. One ExpenseTrackerApp
owns one store, one gateway and one budget tracker for its lifetime.
Rendering code receives plain models and never holds on to store
internals across a mutation.
"""

from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.budget import BudgetTracker
from expense_tracker.config import Settings, get_settings
from expense_tracker.export import export_csv, write_csv
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.expense import (
    Expense,
    QuerySpec,
    Theme,
    current_month_key,
)
from expense_tracker.models.reports import DashboardView
from expense_tracker.queries import Aggregator, QueryEngine
from expense_tracker.services.storage import (
    KeyValueStoreInterface,
    PersistenceGateway,
    create_key_value_store,
)
from expense_tracker.store import ExpenseStore


logger = structlog.get_logger(__name__)


class ExpenseTrackerApp:
    """
    Application facade over the expense engine.

    Usage:
        app = ExpenseTrackerApp()
        app.submit_expense(None, 250, "Food", "2024-01-05", "Lunch")
        view = app.refresh(app.default_spec())
        app.close()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend: Optional[KeyValueStoreInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        configure_logs: bool = False,
    ):
        self._settings = settings or get_settings()
        app_settings = self._settings.app
        storage_settings = self._settings.storage

        if configure_logs:
            configure_logging(app_settings.log_level, app_settings.json_logs)

        self._app_settings = app_settings
        self._audit = audit_logger or AuditLogger()
        self._gateway = PersistenceGateway(
            backend or create_key_value_store(storage_settings),
            settings=storage_settings,
            audit_logger=self._audit,
        )
        self._store = ExpenseStore(self._gateway, audit_logger=self._audit)
        self._budget = BudgetTracker(
            self._gateway,
            audit_logger=self._audit,
            warning_percentage=app_settings.budget_warning_percentage,
        )
        self._engine = QueryEngine()
        self._aggregator = Aggregator()

        self._store.load()
        self._theme = self._gateway.load_theme()
        self._closed = False
        logger.info(
            "expense_tracker_started",
            expenses=len(self._store),
            budget=self._budget.budget,
            theme=self._theme.value,
        )

    # -------------------------------------------------------------------------
    # Component access
    # -------------------------------------------------------------------------

    @property
    def store(self) -> ExpenseStore:
        return self._store

    @property
    def budget(self) -> BudgetTracker:
        return self._budget

    @property
    def gateway(self) -> PersistenceGateway:
        return self._gateway

    @property
    def audit(self) -> AuditLogger:
        return self._audit

    @property
    def theme(self) -> Theme:
        return self._theme

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def submit_expense(
        self,
        expense_id: Optional[str],
        amount: Any,
        category: Any,
        date: Any,
        description: Any,
    ) -> Expense:
        """
        Handle a form submission: update when an id is given, create otherwise.

        Raises:
            ValidationError: invalid input (nothing is changed)
            NotFoundError: the id being edited no longer exists
        """
        if expense_id:
            return self._store.update(expense_id, amount, category, date, description)
        return self._store.create(amount, category, date, description)

    def delete_expense(self, expense_id: str) -> None:
        self._store.delete(expense_id)

    def clear_all(self) -> None:
        self._store.clear_all()

    def set_budget(self, value: Any) -> float:
        return self._budget.set_budget(value)

    def set_theme(self, theme: Union[Theme, str]) -> Theme:
        """Store a theme; unknown tokens fall back to light."""
        try:
            new_theme = Theme(theme)
        except ValueError:
            new_theme = Theme.LIGHT
        self._theme = new_theme
        self._audit.log(AuditEventBuilder.theme_changed(new_theme.value))
        self._gateway.save_theme(new_theme)
        return new_theme

    def toggle_theme(self) -> Theme:
        """Flip between light and dark and persist the choice."""
        return self.set_theme(Theme.LIGHT if self._theme == Theme.DARK else Theme.DARK)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def default_spec(self, today: Optional[date] = None) -> QuerySpec:
        """Initial filter selection: current month, configured sort."""
        month = current_month_key(today) if self._app_settings.default_to_current_month else None
        return QuerySpec(month_key=month, sort_key=self._app_settings.default_sort_key)

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order, for filter dropdowns."""
        return list(dict.fromkeys(expense.category for expense in self._store.load_all()))

    def refresh(
        self,
        spec: Optional[Union[QuerySpec, dict]] = None,
        today: Optional[date] = None,
    ) -> DashboardView:
        """
        Recompute everything a UI refresh shows.

        Summary and budget use the whole store; the table and the
        category chart use the filtered view.
        """
        if spec is None:
            spec = QuerySpec()
        elif isinstance(spec, dict):
            spec = QuerySpec.model_validate(spec)

        records = self._store.load_all()
        view = self._engine.process(records, spec)

        return DashboardView(
            spec=spec,
            expenses=view,
            summary=self._aggregator.summarize(records, today=today),
            category_breakdown=self._aggregator.category_breakdown(view),
            budget=self._budget.progress(records, today=today),
            theme=self._theme,
        )

    def export_csv(self) -> str:
        """CSV of the whole store in store order (filters are ignored)."""
        return export_csv(self._store.load_all())

    def write_csv(self, path: Union[str, Path]) -> Path:
        return write_csv(self._store.load_all(), path)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> bool:
        """Flush the collection to storage. Safe to call twice."""
        if self._closed:
            return True
        self._closed = True
        flushed = self._store.flush()
        logger.info("expense_tracker_closed", flushed=flushed, expenses=len(self._store))
        return flushed

    def __enter__(self) -> "ExpenseTrackerApp":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
