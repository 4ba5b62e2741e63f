"""
Core Data Models for Expense Tracker

These models define the schemas for all data flowing through the engine.
They are designed to:
1. Enforce the record invariants at runtime (positive amount, non-empty text)
2. Provide clear validation error messages
3. Be serializable for the key-value store
4. Stay immutable once handed out, so views cannot alter the store

DESIGN DECISION: The expense date is kept as the ISO text the user entered.
Stored data written by older clients may carry values that do not parse;
those records still load and simply sort and bucket as "no date".
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# DATE HELPERS
# =============================================================================

def new_expense_id() -> str:
    """Generate a fresh opaque expense id."""
    return uuid4().hex


def parse_expense_date(value: Union[str, date, datetime, None]) -> Optional[datetime]:
    """
    Parse an expense date into a naive local datetime.

    Accepts plain dates (YYYY-MM-DD) and ISO date-times. Timezone-aware
    values are converted to local time. Returns None when the value
    cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def month_key(value: Union[str, date, datetime, None]) -> str:
    """
    Derive the YYYY-MM month key of a date.

    Returns an empty string for unparseable input, which never equals
    a real month key.
    """
    parsed = parse_expense_date(value)
    if parsed is None:
        return ""
    return f"{parsed.year:04d}-{parsed.month:02d}"


def current_month_key(today: Optional[date] = None) -> str:
    """Month key of today's local date (or of the given date)."""
    return month_key(today or date.today())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SortKey(str, Enum):
    """
    Recognised sort orders for the expense view.

    Any other value leaves the filtered order untouched.
    """
    DATE_DESC = "dateDesc"
    DATE_ASC = "dateAsc"
    AMOUNT_DESC = "amountDesc"
    AMOUNT_ASC = "amountAsc"


class Theme(str, Enum):
    """Theme preference tokens."""
    LIGHT = "light"
    DARK = "dark"


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single expense transaction.

    CRITICAL: Records are frozen. The store replaces a record on update
    instead of mutating it, so any view computed earlier keeps the old
    values until it is refreshed.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(
        default_factory=new_expense_id,
        min_length=1,
        description="Unique expense ID (opaque)"
    )
    amount: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount in currency units"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Free-form category name"
    )
    date: str = Field(
        ...,
        min_length=1,
        description="Date of the expense (YYYY-MM-DD)"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="createdAt",
        description="When the record was created"
    )

    @field_validator('date', mode='before')
    @classmethod
    def coerce_date(cls, v):
        """Accept date objects and store them as ISO text."""
        if isinstance(v, (date, datetime)):
            return v.isoformat()
        return v

    @property
    def month_key(self) -> str:
        """YYYY-MM bucket of this expense ("" when the date is unparseable)."""
        return month_key(self.date)

    @property
    def parsed_date(self) -> Optional[datetime]:
        """The date as a naive local datetime, or None if unparseable."""
        return parse_expense_date(self.date)

    def to_storage_dict(self) -> dict:
        """Serialize using the persisted field names."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# QUERY MODELS
# =============================================================================

class QuerySpec(BaseModel):
    """
    Filter and sort selection for one view refresh.

    All filters are optional; an empty spec returns the input as-is.
    """

    search_text: str = Field(
        default="",
        description="Case-insensitive substring of description or category"
    )
    month_key: Optional[str] = Field(
        default=None,
        description="Keep only expenses in this YYYY-MM month"
    )
    category: Optional[str] = Field(
        default=None,
        description="Keep only this exact category"
    )
    sort_key: Optional[str] = Field(
        default=None,
        description="One of the SortKey values; anything else keeps input order"
    )

    @field_validator('month_key', 'category', 'sort_key', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty selections as "no filter"."""
        if isinstance(v, Enum):
            return v.value
        if v is None or (isinstance(v, str) and v == ""):
            return None
        return v

    @field_validator('search_text', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating one create/update submission."""

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
