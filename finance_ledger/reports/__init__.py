"""Report aggregation package."""

from finance_ledger.reports.aggregation import (
    budget_report,
    expenses_by_category,
    summarize,
    time_series,
)

__all__ = ["budget_report", "expenses_by_category", "summarize", "time_series"]
