"""
Aggregation Engine

DESIGN DECISION: Report computation is DETERMINISTIC and PURE.
Every function takes a snapshot of transactions (and budgets) and
returns a new report model; nothing here mutates ledger state or
touches storage.

GUARANTEES:
- Only real entries are counted; nothing is estimated
- An entry whose date does not parse is left out of the time series
  only, never out of category totals or the summary
- Output order is deterministic for a given input
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from finance_ledger.ledger.budgets import BudgetMap
from finance_ledger.models.ledger import Transaction
from finance_ledger.models.reports import (
    BudgetLine,
    BudgetReport,
    BudgetStatus,
    LedgerSummary,
    PeriodTotals,
    TimeSeriesReport,
)
from finance_ledger.parsing.dates import parse_date


ZERO = Decimal("0")
DEFAULT_WARNING_RATIO = Decimal("0.9")


def expenses_by_category(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """
    Sum expense amounts per category.

    Categories without any expense are absent rather than zero.
    """
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if transaction.is_expense:
            totals[transaction.category] = totals.get(transaction.category, ZERO) + transaction.amount
    return totals


def summarize(transactions: Iterable[Transaction]) -> LedgerSummary:
    """Total income, total expense and net in a single pass."""
    total_income = ZERO
    total_expense = ZERO
    for transaction in transactions:
        if transaction.is_income:
            total_income += transaction.amount
        elif transaction.is_expense:
            total_expense += transaction.amount
    return LedgerSummary(total_income=total_income, total_expense=total_expense)


def classify_spending(
    budget: Decimal,
    spent: Decimal,
    warning_ratio: Decimal = DEFAULT_WARNING_RATIO,
) -> BudgetStatus:
    if spent > budget:
        return BudgetStatus.EXCEEDED
    if budget > 0 and spent / budget >= warning_ratio:
        return BudgetStatus.WARNING
    return BudgetStatus.OK


def budget_report(
    budgets: BudgetMap,
    transactions: Iterable[Transaction],
    warning_ratio: Decimal = DEFAULT_WARNING_RATIO,
) -> BudgetReport:
    """
    Compare each budgeted category with what was spent in it.

    Only categories present in the budget map are reported, ordered by
    category name. A category with no expenses has spent = 0.
    """
    spending = expenses_by_category(transactions)

    lines = []
    for category, ceiling in budgets.items():
        spent = spending.get(category, ZERO)
        lines.append(BudgetLine(
            category=category,
            budget=ceiling,
            spent=spent,
            status=classify_spending(ceiling, spent, warning_ratio),
        ))
    return BudgetReport(lines=lines)


def time_series(transactions: Iterable[Transaction]) -> TimeSeriesReport:
    """
    Roll transactions up into monthly (YYYY-MM) and yearly (YYYY) buckets.

    Buckets are emitted in ascending key order; zero-padded keys sort
    chronologically. Entries with an unparseable date contribute to no
    bucket.
    """
    monthly: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    yearly: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])

    for transaction in transactions:
        parsed = parse_date(transaction.date)
        if not parsed.success:
            continue

        slot = 0 if transaction.is_income else 1
        monthly[parsed.value.month_key][slot] += transaction.amount
        yearly[parsed.value.year_key][slot] += transaction.amount

    return TimeSeriesReport(
        monthly=_emit_buckets(monthly),
        yearly=_emit_buckets(yearly),
    )


def _emit_buckets(buckets: dict[str, list[Decimal]]) -> list[PeriodTotals]:
    return [
        PeriodTotals(period_key=key, income=income, expense=expense)
        for key, (income, expense) in sorted(buckets.items())
    ]
