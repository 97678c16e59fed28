"""
Report Models

Computed, read-only views over a profile's ledger. These are what the
presentation layer renders; the core never formats them for display.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class BudgetStatus(str, Enum):
    """How a category's spending compares with its ceiling."""
    OK = "ok"
    WARNING = "warning"      # at or above the warning ratio
    EXCEEDED = "exceeded"    # strictly above the ceiling


class LedgerSummary(BaseModel):
    """Income, expense and net over a set of transactions."""

    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    @computed_field
    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


class BudgetLine(BaseModel):
    """One budget category compared with what was spent."""

    category: str
    budget: Decimal
    spent: Decimal
    status: BudgetStatus

    @property
    def remaining(self) -> Decimal:
        return self.budget - self.spent


class BudgetReport(BaseModel):
    """
    Budget-vs-spend for every category that has a ceiling.

    Lines are ordered by category. Categories that only appear in
    transactions are not reported.
    """

    lines: list[BudgetLine] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no budget has been set at all."""
        return not self.lines

    @property
    def any_exceeded(self) -> bool:
        return any(line.status is BudgetStatus.EXCEEDED for line in self.lines)

    @property
    def warnings(self) -> list[BudgetLine]:
        return [line for line in self.lines if line.status is BudgetStatus.WARNING]


class PeriodTotals(BaseModel):
    """Income and expense accumulated for one calendar period."""

    period_key: str = Field(
        ...,
        description="YYYY-MM for months, YYYY for years"
    )
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @computed_field
    @property
    def net(self) -> Decimal:
        return self.income - self.expense


class TimeSeriesReport(BaseModel):
    """Monthly and yearly rollups, each sorted ascending by period key."""

    monthly: list[PeriodTotals] = Field(default_factory=list)
    yearly: list[PeriodTotals] = Field(default_factory=list)
