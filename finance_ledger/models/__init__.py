"""
Data Models Package

This package contains all Pydantic models used in the Finance Ledger core.
"""

from finance_ledger.models.ledger import (
    LedgerDate,
    Transaction,
    TransactionFields,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
)
from finance_ledger.models.outcome import (
    ErrorKind,
    LedgerError,
    Outcome,
)
from finance_ledger.models.reports import (
    BudgetLine,
    BudgetReport,
    BudgetStatus,
    LedgerSummary,
    PeriodTotals,
    TimeSeriesReport,
)
from finance_ledger.models.audit import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Ledger models
    "LedgerDate",
    "Transaction",
    "TransactionFields",
    "TransactionKind",
    "ValidationIssue",
    "ValidationResult",
    # Outcomes
    "ErrorKind",
    "LedgerError",
    "Outcome",
    # Report models
    "BudgetLine",
    "BudgetReport",
    "BudgetStatus",
    "LedgerSummary",
    "PeriodTotals",
    "TimeSeriesReport",
    # Audit models
    "EventSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]
