"""
In-Memory Storage

Keeps the serialized ledger text in memory. It goes through the same
codec as the file backend, so what a test reads back is exactly what
would have been written to disk.
"""

from typing import Optional

from finance_ledger.ledger.registry import UserProfileRegistry
from finance_ledger.models.outcome import LedgerError, Outcome
from finance_ledger.services.storage.codec import DecodedLedger, deserialize, serialize
from finance_ledger.services.storage.interface import LedgerStorageInterface


class InMemoryLedgerStorage(LedgerStorageInterface):

    def __init__(self, text: Optional[str] = None):
        self.text = text
        self.save_count = 0

    @property
    def location(self) -> str:
        return "memory"

    def load(self) -> Outcome[DecodedLedger]:
        if self.text is None:
            return Outcome.ok(DecodedLedger())
        return Outcome.ok(deserialize(self.text))

    def save(self, registry: UserProfileRegistry) -> Outcome[None]:
        try:
            self.text = serialize(registry)
        except LedgerError as e:
            return Outcome.fail(e.kind, str(e))
        self.save_count += 1
        return Outcome.ok()
