"""
Core Data Models for Finance Ledger

These models define the schemas for ledger entries and for the parsed
values that cross the boundary between the UI collaborator and the core.

DESIGN DECISION: The date of an entry is kept as the text the user typed.
It is parsed on demand (see finance_ledger.parsing.dates) so that one
malformed date never blocks saving, loading or reporting the entry.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class TransactionKind(str, Enum):
    """
    Direction of a ledger entry.

    The value is the single character used in the persisted file.
    """
    INCOME = "I"
    EXPENSE = "E"

    @property
    def label(self) -> str:
        return "Income" if self is TransactionKind.INCOME else "Expense"


# =============================================================================
# DATES
# =============================================================================

class LedgerDate(BaseModel):
    """
    Calendar components parsed from YYYY-MM-DD text.

    Components are numbers only: month 13 or day 40 are representable.
    """
    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    day: int

    @property
    def month_key(self) -> str:
        """Zero-padded YYYY-MM bucket key."""
        return f"{self.year}-{self.month:02d}"

    @property
    def year_key(self) -> str:
        return str(self.year)


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    One dated income or expense record.

    The id is assigned by the owning TransactionStore and never changes.
    The amount is stored as given; kind carries the direction.
    """

    id: int = Field(
        ...,
        ge=1,
        description="Unique id within the owning store"
    )
    date: str = Field(
        ...,
        description="Entry date as YYYY-MM-DD text"
    )
    category: str = Field(
        ...,
        description="Free-text category label"
    )
    description: str = Field(
        default="",
        description="Free-text description"
    )
    amount: Decimal = Field(
        ...,
        description="Amount magnitude"
    )
    kind: TransactionKind = Field(
        ...,
        description="Income or expense"
    )

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionKind.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind is TransactionKind.EXPENSE


class TransactionFields(BaseModel):
    """
    A partial set of parsed transaction fields.

    Used for validated boundary input and for updates, where an
    unset field means "leave unchanged".
    """

    date: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    kind: Optional[TransactionKind] = None

    def changes(self) -> dict:
        """Only the fields that were actually supplied."""
        return self.model_dump(exclude_none=True)

    @property
    def is_empty(self) -> bool:
        return not self.changes()


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in boundary input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'reserved_character')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating text supplied by the UI collaborator.

    fields holds every value that parsed, whether or not the result is valid.
    """

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    fields: TransactionFields = Field(
        default_factory=TransactionFields,
        description="Parsed values"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        """Non-blocking warnings to show the user."""
        return [issue.message for issue in self.issues if issue.severity == "warning"]

    def summary(self) -> str:
        return "; ".join(issue.message for issue in self.issues if issue.severity == "error")
