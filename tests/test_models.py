"""
Tests for Expense Tracker models

Test strategy:
1. Unit tests for individual components (models, validator, engine)
2. Flow tests through the application facade
3. No real files except under tmp_path
"""

import pytest
import pydantic
from datetime import date, datetime, timezone

from expense_tracker.models.expense import (
    Expense,
    QuerySpec,
    SortKey,
    Theme,
    ValidationIssue,
    ValidationResult,
    current_month_key,
    month_key,
    parse_expense_date,
)
from expense_tracker.models.reports import BudgetProgress, BudgetStatus, Summary
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestExpenseModel:
    """Tests for the Expense model."""

    def test_expense_creation(self):
        """Test Expense model creation with generated id and timestamp."""
        expense = Expense(amount=12.5, category="Food", date="2024-01-05", description="Lunch")
        assert expense.id
        assert expense.amount == 12.5
        assert expense.created_at.tzinfo is not None

    def test_expense_strips_whitespace(self):
        """Test that text fields are trimmed."""
        expense = Expense(amount=1, category="  Food ", date=" 2024-01-05 ", description=" Tea ")
        assert expense.category == "Food"
        assert expense.date == "2024-01-05"
        assert expense.description == "Tea"

    @pytest.mark.parametrize("amount", [0, -5, float("inf"), float("nan")])
    def test_expense_rejects_bad_amount(self, amount):
        """Test that non-positive and non-finite amounts are rejected."""
        with pytest.raises(ValueError):
            Expense(amount=amount, category="Food", date="2024-01-05", description="Lunch")

    def test_expense_rejects_blank_text(self):
        with pytest.raises(ValueError):
            Expense(amount=5, category="   ", date="2024-01-05", description="Lunch")

    def test_expense_accepts_date_object(self):
        expense = Expense(amount=5, category="Food", date=date(2024, 1, 5), description="Lunch")
        assert expense.date == "2024-01-05"
        assert expense.month_key == "2024-01"

    def test_expense_is_frozen(self):
        """Test that records cannot be modified in place."""
        expense = Expense(amount=5, category="Food", date="2024-01-05", description="Lunch")
        with pytest.raises(pydantic.ValidationError):
            expense.amount = 10

    def test_storage_dict_uses_persisted_names(self):
        expense = Expense(
            id="x1",
            amount=5,
            category="Food",
            date="2024-01-05",
            description="Lunch",
            created_at=datetime(2024, 1, 5, 10, 0, tzinfo=timezone.utc),
        )
        data = expense.to_storage_dict()
        assert data["id"] == "x1"
        assert "createdAt" in data
        assert "created_at" not in data
        assert Expense.model_validate(data) == expense

    def test_loads_browser_style_timestamp(self):
        """Test that JavaScript ISO timestamps are accepted."""
        expense = Expense.model_validate({
            "id": "abc",
            "amount": 10,
            "category": "Food",
            "date": "2024-01-05",
            "description": "Lunch",
            "createdAt": "2024-01-05T10:00:00.000Z",
        })
        assert expense.created_at.year == 2024


class TestDateHelpers:
    """Tests for month-key derivation."""

    def test_month_key_from_text(self):
        assert month_key("2024-01-05") == "2024-01"
        assert month_key("2024-12-31T23:00:00") == "2024-12"

    def test_month_key_unparseable(self):
        assert month_key("not a date") == ""
        assert month_key("") == ""
        assert month_key(None) == ""

    def test_current_month_key_uses_given_day(self):
        assert current_month_key(date(2024, 3, 15)) == "2024-03"

    def test_parse_returns_naive_datetime(self):
        parsed = parse_expense_date("2024-01-05T10:00:00+00:00")
        assert parsed is not None
        assert parsed.tzinfo is None

    def test_parse_trailing_z_as_utc(self):
        parsed = parse_expense_date("2024-01-05T10:00:00.000Z")
        assert parsed == parse_expense_date("2024-01-05T10:00:00+00:00")
        assert parsed is not None

    def test_parse_plain_date(self):
        assert parse_expense_date(date(2024, 1, 5)) == datetime(2024, 1, 5)


class TestQuerySpec:
    """Tests for QuerySpec normalization."""

    def test_defaults_are_empty(self):
        spec = QuerySpec()
        assert spec.search_text == ""
        assert spec.month_key is None
        assert spec.category is None
        assert spec.sort_key is None

    def test_blank_selections_become_none(self):
        spec = QuerySpec(search_text=None, month_key="", category="", sort_key="")
        assert spec.search_text == ""
        assert spec.month_key is None
        assert spec.category is None
        assert spec.sort_key is None

    def test_accepts_sort_key_enum(self):
        assert QuerySpec(sort_key=SortKey.AMOUNT_DESC).sort_key == "amountDesc"


class TestReportModels:
    """Tests for derived report models."""

    def test_summary_without_top_category(self):
        summary = Summary(month_key="2024-03")
        assert summary.has_top_category is False
        assert summary.top_category_amount == 0

    def test_budget_bar_percentage_is_clamped(self):
        progress = BudgetProgress(
            budget=500, spent=600, remaining=0, percentage=120,
            status=BudgetStatus.OVER_BUDGET,
        )
        assert progress.bar_percentage == 100

    def test_theme_values(self):
        assert Theme("dark") == Theme.DARK
        assert Theme.LIGHT.value == "light"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        result = ValidationResult(issues=[
            ValidationIssue(field="amount", issue_type="missing", message="Amount required"),
        ])
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        result = ValidationResult(issues=[
            ValidationIssue(field="date", issue_type="odd", message="Odd date", severity="warning"),
        ])
        assert result.has_errors is False
        assert result.error_count == 0


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            description="Expense created",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.expense_created("x1", 12.5, "Food")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_created"
        assert log_dict["entity_id"] == "x1"
        assert log_dict["details"]["category"] == "Food"

    def test_persistence_failed_is_error(self):
        event = AuditEventBuilder.persistence_failed("k", "write", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
