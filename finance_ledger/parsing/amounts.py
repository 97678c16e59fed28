"""
Boundary Parsers

The UI collaborator hands the core trimmed text. These turn the numeric
and kind fields into typed values, reporting malformed text as a
PARSE_ERROR outcome instead of raising.
"""

import re
from decimal import Decimal

from finance_ledger.models.ledger import TransactionKind
from finance_ledger.models.outcome import ErrorKind, Outcome


# Plain decimal notation only: no exponents, digit separators, NaN or Infinity
_AMOUNT_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_amount(text: str) -> Outcome[Decimal]:
    """Parse a decimal amount such as "12.50"."""
    candidate = (text or "").strip()
    if _AMOUNT_PATTERN.fullmatch(candidate) is None:
        return Outcome.fail(ErrorKind.PARSE_ERROR, f"Invalid amount {text!r}: not a number")
    return Outcome.ok(Decimal(candidate))


def parse_kind(text: str) -> Outcome[TransactionKind]:
    """
    Parse a transaction kind from its first character.

    "I", "income", "e", "Expense" are all accepted.
    """
    candidate = (text or "").strip()
    if not candidate:
        return Outcome.fail(ErrorKind.PARSE_ERROR, "Missing type: use I for income or E for expense")

    try:
        return Outcome.ok(TransactionKind(candidate[0].upper()))
    except ValueError:
        return Outcome.fail(
            ErrorKind.PARSE_ERROR,
            f"Invalid type {text!r}: use I for income or E for expense",
        )
