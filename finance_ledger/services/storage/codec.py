"""
Ledger File Codec

Serializes the whole profile registry to the flat, line-oriented text
format and reads it back. One block per profile:

    USER|<username>|<password>
    NEXT_ID|<integer>
    BUDGETS|<cat1>:<amount1>,<cat2>:<amount2>,
    TRANS|<id>|<date>|<category>|<description>|<amount>|<I or E>
    ENDUSER

DESIGN DECISION: Loading is permissive. A malformed record is recorded
as a SchemaSkip and loading carries on with the next line, so one bad
line never loses the rest of a profile or the other profiles.
Unknown line prefixes are ignored outright.

Saving is strict: a field holding a separator is refused rather than
written, since it would load back as a different record or not at all.

The field layout is a compatibility contract: new record types may be
appended, existing fields must never be reordered.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from finance_ledger.ledger.budgets import BudgetMap
from finance_ledger.ledger.registry import UserProfile, UserProfileRegistry
from finance_ledger.ledger.transactions import TransactionStore
from finance_ledger.models.ledger import Transaction
from finance_ledger.models.outcome import ErrorKind, LedgerError
from finance_ledger.parsing.amounts import parse_amount, parse_kind


USER_TAG = "USER"
NEXT_ID_TAG = "NEXT_ID"
BUDGETS_TAG = "BUDGETS"
TRANS_TAG = "TRANS"
END_USER_TAG = "ENDUSER"

FIELD_SEPARATOR = "|"
BUDGET_SEPARATOR = ","
BUDGET_VALUE_SEPARATOR = ":"

# Characters that would split a field when the line is read back
RECORD_SEPARATORS = (FIELD_SEPARATOR, "\n", "\r")
BUDGET_CATEGORY_SEPARATORS = RECORD_SEPARATORS + (BUDGET_SEPARATOR,)

# "TRANS" plus id, date, category, description, amount, kind
TRANS_FIELD_COUNT = 7


class SchemaSkip(BaseModel):
    """A persisted line that was dropped while loading."""

    line_number: int = Field(..., ge=1)
    line: str
    reason: str
    kind: ErrorKind = ErrorKind.SCHEMA_SKIP


class DecodedLedger(BaseModel):
    """Everything recovered from a ledger file."""

    registry: UserProfileRegistry = Field(default_factory=UserProfileRegistry)
    skipped: list[SchemaSkip] = Field(default_factory=list)


# =============================================================================
# SERIALIZATION
# =============================================================================

def serialize(registry: UserProfileRegistry) -> str:
    """
    Render every profile, in registry order.

    Raises LedgerError (INVALID_INPUT) if a field contains a separator
    or an amount is not finite; such a line would not load back the same.
    """
    lines = []
    for profile in registry.all():
        _check_field(profile.username, RECORD_SEPARATORS, "username")
        _check_field(profile.password, RECORD_SEPARATORS, f"password of {profile.username!r}")
        lines.append(FIELD_SEPARATOR.join([USER_TAG, profile.username, profile.password]))
        lines.append(FIELD_SEPARATOR.join([NEXT_ID_TAG, str(profile.next_id)]))
        lines.append(BUDGETS_TAG + FIELD_SEPARATOR + "".join(
            _format_budget(category, amount) for category, amount in profile.budgets.items()
        ))
        for entry in profile.transactions.entries:
            lines.append(_format_transaction(entry))
        lines.append(END_USER_TAG)

    return "".join(line + "\n" for line in lines)


def _format_budget(category: str, amount: Decimal) -> str:
    _check_field(category, BUDGET_CATEGORY_SEPARATORS, "budget category")
    return f"{category}{BUDGET_VALUE_SEPARATOR}{_format_amount(amount)}{BUDGET_SEPARATOR}"


def _format_transaction(entry: Transaction) -> str:
    for name in ("date", "category", "description"):
        _check_field(getattr(entry, name), RECORD_SEPARATORS, f"transaction {entry.id} {name}")
    return FIELD_SEPARATOR.join([
        TRANS_TAG,
        str(entry.id),
        entry.date,
        entry.category,
        entry.description,
        _format_amount(entry.amount),
        entry.kind.value,
    ])


def _format_amount(amount: Decimal) -> str:
    if not amount.is_finite():
        raise LedgerError(ErrorKind.INVALID_INPUT, f"Amount {amount} cannot be stored")
    # Plain notation only: the loader does not accept exponents
    return format(amount, "f")


def _check_field(value: str, reserved: tuple[str, ...], label: str) -> None:
    if any(character in value for character in reserved):
        raise LedgerError(
            ErrorKind.INVALID_INPUT,
            f"The {label} {value!r} contains a reserved separator character",
        )


# =============================================================================
# DESERIALIZATION
# =============================================================================

class _PendingProfile:
    """Accumulates one USER block until it is closed."""

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password
        self.next_id: Optional[int] = None
        self.budgets = BudgetMap()
        self.entries: list[Transaction] = []
        self.seen_ids: set[int] = set()

    def build(self) -> UserProfile:
        highest = max(self.seen_ids, default=0)
        next_id = self.next_id if self.next_id is not None else 1
        # Keep the counter ahead of every loaded id so ids are never reused
        next_id = max(next_id, highest + 1)
        return UserProfile(
            username=self.username,
            password=self.password,
            transactions=TransactionStore(entries=self.entries, next_id=next_id),
            budgets=self.budgets,
        )


class _Decoder:
    def __init__(self):
        self.registry = UserProfileRegistry()
        self.skipped: list[SchemaSkip] = []
        self.current: Optional[_PendingProfile] = None

    def decode(self, text: str) -> DecodedLedger:
        for line_number, raw_line in enumerate(text.split("\n"), start=1):
            line = raw_line.rstrip("\r")
            if not line:
                continue
            self._decode_line(line_number, line)

        # A final block without ENDUSER still counts
        self._close_profile()
        return DecodedLedger(registry=self.registry, skipped=self.skipped)

    def _decode_line(self, line_number: int, line: str) -> None:
        if line == END_USER_TAG:
            self._close_profile()
            return

        tag, separator, body = line.partition(FIELD_SEPARATOR)
        if not separator:
            return

        if tag == USER_TAG:
            self._close_profile()
            fields = body.split(FIELD_SEPARATOR)
            username = fields[0]
            password = fields[1] if len(fields) > 1 else ""
            self.current = _PendingProfile(username, password)
            return

        if tag not in (NEXT_ID_TAG, BUDGETS_TAG, TRANS_TAG):
            return

        if self.current is None:
            self._skip(line_number, line, f"{tag} record outside of a USER block")
        elif tag == NEXT_ID_TAG:
            self._decode_next_id(line_number, line, body)
        elif tag == BUDGETS_TAG:
            self._decode_budgets(line_number, line, body)
        else:
            self._decode_transaction(line_number, line)

    def _decode_next_id(self, line_number: int, line: str, body: str) -> None:
        try:
            next_id = int(body)
        except ValueError:
            self._skip(line_number, line, f"NEXT_ID is not an integer: {body!r}")
            return
        if next_id < 1:
            self._skip(line_number, line, f"NEXT_ID must be positive: {next_id}")
            return
        self.current.next_id = next_id

    def _decode_budgets(self, line_number: int, line: str, body: str) -> None:
        for part in body.split(BUDGET_SEPARATOR):
            if not part:
                continue
            category, separator, amount_text = part.rpartition(BUDGET_VALUE_SEPARATOR)
            if not separator:
                self._skip(line_number, line, f"Budget entry without amount: {part!r}")
                continue
            amount = parse_amount(amount_text)
            if not amount.success:
                self._skip(line_number, line, amount.error_message)
                continue
            self.current.budgets.set(category, amount.value)

    def _decode_transaction(self, line_number: int, line: str) -> None:
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) != TRANS_FIELD_COUNT:
            self._skip(
                line_number, line,
                f"TRANS record has {len(fields) - 1} fields, expected {TRANS_FIELD_COUNT - 1}",
            )
            return

        _, id_text, date, category, description, amount_text, kind_text = fields
        try:
            transaction_id = int(id_text)
        except ValueError:
            self._skip(line_number, line, f"Transaction id is not an integer: {id_text!r}")
            return
        if transaction_id < 1:
            self._skip(line_number, line, f"Transaction id must be positive: {transaction_id}")
            return
        if transaction_id in self.current.seen_ids:
            self._skip(line_number, line, f"Duplicate transaction id {transaction_id}")
            return

        amount = parse_amount(amount_text)
        if not amount.success:
            self._skip(line_number, line, amount.error_message)
            return
        kind = parse_kind(kind_text)
        if not kind.success:
            self._skip(line_number, line, kind.error_message)
            return

        self.current.entries.append(Transaction(
            id=transaction_id,
            date=date,
            category=category,
            description=description,
            amount=amount.value,
            kind=kind.value,
        ))
        self.current.seen_ids.add(transaction_id)

    def _close_profile(self) -> None:
        if self.current is not None:
            self.registry.append(self.current.build())
            self.current = None

    def _skip(self, line_number: int, line: str, reason: str) -> None:
        self.skipped.append(SchemaSkip(line_number=line_number, line=line, reason=reason))


def deserialize(text: str) -> DecodedLedger:
    """Rebuild a registry from ledger text, collecting skipped records."""
    return _Decoder().decode(text)
