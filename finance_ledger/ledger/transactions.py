"""
Transaction Store

An append/edit/delete collection of one user's ledger entries.

GUARANTEES:
- Ids come from a per-store counter that only moves forward, so an id
  is never reused, even after the entry holding it is deleted
- Entries keep insertion order; nothing here sorts them
- Nothing returned from the store aliases its internal entries: edits
  go through update(id, changes)
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from finance_ledger.models.ledger import Transaction, TransactionFields, TransactionKind
from finance_ledger.models.outcome import ErrorKind, Outcome


class TransactionStore(BaseModel):
    """Ordered ledger entries plus the next id to assign."""

    entries: list[Transaction] = Field(default_factory=list)
    next_id: int = Field(
        default=1,
        ge=1,
        description="Next id to assign; greater than every id ever assigned"
    )

    @model_validator(mode='after')
    def validate_counter(self) -> 'TransactionStore':
        """The counter must stay ahead of every stored id."""
        if self.entries:
            highest = max(entry.id for entry in self.entries)
            if self.next_id <= highest:
                raise ValueError(
                    f"next_id {self.next_id} must be greater than highest id {highest}"
                )
        return self

    def __len__(self) -> int:
        return len(self.entries)

    def add(
        self,
        date: str,
        category: str,
        description: str,
        amount: Decimal,
        kind: TransactionKind,
    ) -> int:
        """Append a new entry and return the id assigned to it."""
        transaction_id = self.next_id
        self.entries.append(Transaction(
            id=transaction_id,
            date=date,
            category=category,
            description=description,
            amount=amount,
            kind=kind,
        ))
        self.next_id += 1
        return transaction_id

    def find_by_id(self, transaction_id: int) -> Outcome[Transaction]:
        index = self._index_of(transaction_id)
        if index is None:
            return self._not_found(transaction_id)
        return Outcome.ok(self.entries[index].model_copy())

    def update(self, transaction_id: int, changes: TransactionFields) -> Outcome[Transaction]:
        """
        Replace the supplied fields of one entry.

        Fields left unset in changes keep their current value. The id
        and the entry's position never change.
        """
        index = self._index_of(transaction_id)
        if index is None:
            return self._not_found(transaction_id)

        updated = self.entries[index].model_copy(update=changes.changes())
        self.entries[index] = updated
        return Outcome.ok(updated.model_copy())

    def delete(self, transaction_id: int) -> Outcome[Transaction]:
        """Remove one entry. The id counter is left alone."""
        index = self._index_of(transaction_id)
        if index is None:
            return self._not_found(transaction_id)
        return Outcome.ok(self.entries.pop(index))

    def list_filtered(self, category: Optional[str] = None) -> list[Transaction]:
        """Entries in storage order, optionally restricted to one category."""
        return [
            entry.model_copy()
            for entry in self.entries
            if category is None or entry.category == category
        ]

    def _index_of(self, transaction_id: int) -> Optional[int]:
        for index, entry in enumerate(self.entries):
            if entry.id == transaction_id:
                return index
        return None

    @staticmethod
    def _not_found(transaction_id: int) -> Outcome:
        return Outcome.fail(
            ErrorKind.NOT_FOUND,
            f"Transaction with ID {transaction_id} not found",
        )
