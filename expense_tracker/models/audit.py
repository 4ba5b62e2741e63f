"""
Audit Models for Expense Tracker

Every mutation of the expense store and every persistence failure is
recorded as a structured event. Events go to the local log only; they
are never written to the key-value store.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Store mutations
    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSES_CLEARED = "expenses_cleared"
    EXPENSES_REPLACED = "expenses_replaced"
    EXPENSES_LOADED = "expenses_loaded"
    VALIDATION_FAILED = "validation_failed"

    # Preferences
    BUDGET_SET = "budget_set"
    THEME_CHANGED = "theme_changed"

    # Storage
    PERSISTENCE_FAILED = "persistence_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    entity_id: Optional[str] = Field(
        default=None,
        description="Expense id (or storage key) the event relates to"
    )
    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_created(expense_id, amount, category)
        event = AuditEventBuilder.persistence_failed(key, error)
    """

    @staticmethod
    def expense_created(expense_id: str, amount: float, category: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            entity_id=expense_id,
            description=f"Expense created in {category}",
            details={"amount": amount, "category": category},
        )

    @staticmethod
    def expense_updated(expense_id: str, amount: float, category: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_id=expense_id,
            description=f"Expense updated in {category}",
            details={"amount": amount, "category": category},
        )

    @staticmethod
    def expense_deleted(expense_id: str, existed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_id=expense_id,
            description="Expense deleted" if existed else "Delete of unknown expense ignored",
            details={"existed": existed},
        )

    @staticmethod
    def expenses_cleared(removed: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_CLEARED,
            description=f"All expenses cleared ({removed} removed)",
            details={"removed": removed},
        )

    @staticmethod
    def expenses_replaced(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_REPLACED,
            description=f"Expense collection replaced ({count} records)",
            details={"count": count},
        )

    @staticmethod
    def expenses_loaded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_LOADED,
            description=f"Loaded {count} expenses from storage",
            details={"count": count},
        )

    @staticmethod
    def validation_failed(operation: str, issues: list[dict], expense_id: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_id=expense_id,
            description=f"Rejected {operation}: {len(issues)} issue(s)",
            details={"operation": operation, "issues": issues},
        )

    @staticmethod
    def budget_set(budget: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            description="Monthly budget set",
            details={"budget": budget},
        )

    @staticmethod
    def theme_changed(theme: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.THEME_CHANGED,
            description=f"Theme switched to {theme}",
            details={"theme": theme},
        )

    @staticmethod
    def persistence_failed(key: str, operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_id=key,
            description=f"Failed to {operation} {key}",
            details={"operation": operation},
            error_message=error_message,
        )
