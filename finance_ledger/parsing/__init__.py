"""Text parsing package."""

from finance_ledger.parsing.amounts import parse_amount, parse_kind
from finance_ledger.parsing.dates import parse_date

__all__ = ["parse_amount", "parse_date", "parse_kind"]
