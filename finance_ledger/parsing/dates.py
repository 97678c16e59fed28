"""
Date Parsing

Entry dates are stored as the text the user typed and parsed on demand.
Only the shape <int>-<int>-<int> is checked: the numbers are not
validated as a real calendar date, so "2024-13-40" parses.
"""

import re

from finance_ledger.models.ledger import LedgerDate
from finance_ledger.models.outcome import ErrorKind, Outcome


# Whitespace and a sign are allowed before each number; anything after
# the day is ignored.
_DATE_PATTERN = re.compile(r"\s*([+-]?\d+)\s*-\s*([+-]?\d+)\s*-\s*([+-]?\d+)")


def parse_date(text: str) -> Outcome[LedgerDate]:
    """Parse YYYY-MM-DD text into its year, month and day components."""
    match = _DATE_PATTERN.match(text or "")
    if match is None:
        return Outcome.fail(
            ErrorKind.PARSE_ERROR,
            f"Invalid date {text!r}: expected YYYY-MM-DD",
        )

    year, month, day = (int(group) for group in match.groups())
    return Outcome.ok(LedgerDate(year=year, month=month, day=day))
