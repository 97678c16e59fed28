"""Services package."""

from finance_ledger.services.storage import (
    DecodedLedger,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    SchemaSkip,
    TextFileLedgerStorage,
)

__all__ = [
    "DecodedLedger",
    "InMemoryLedgerStorage",
    "LedgerStorageInterface",
    "SchemaSkip",
    "TextFileLedgerStorage",
]
