"""
Operation Outcomes

DESIGN DECISION: Fallible ledger operations never raise to their caller.
They return an Outcome that says whether the operation succeeded and,
if not, which kind of failure happened and why.

Callers that prefer exceptions can call unwrap().
"""

from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class ErrorKind(str, Enum):
    """Finite set of failure kinds an Outcome can carry."""
    PARSE_ERROR = "parse_error"                  # date or numeric text malformed
    NOT_FOUND = "not_found"                      # lookup by id/username failed
    IO_ERROR = "io_error"                        # persisted file unreadable/unwritable
    SCHEMA_SKIP = "schema_skip"                  # malformed persisted record
    DUPLICATE = "duplicate"                      # username already registered
    INVALID_CREDENTIALS = "invalid_credentials"  # login rejected
    INVALID_INPUT = "invalid_input"              # boundary validation failed


class LedgerError(Exception):
    """Raised by Outcome.unwrap() when the outcome is a failure."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class Outcome(BaseModel, Generic[T]):
    """
    Result of a fallible operation.

    Exactly one of value (on success) or error_kind (on failure) is meaningful.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    value: Optional[T] = None
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = Field(
        default=None,
        description="Human-readable description of the failure"
    )

    @classmethod
    def ok(cls, value=None) -> "Outcome":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "Outcome":
        return cls(success=False, error_kind=kind, error_message=message)

    def unwrap(self):
        """Return the value, raising LedgerError if this is a failure."""
        if not self.success:
            raise LedgerError(self.error_kind, self.error_message or self.error_kind.value)
        return self.value

    def value_or(self, default):
        return self.value if self.success else default
