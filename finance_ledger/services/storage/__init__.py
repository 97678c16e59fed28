"""
Storage Services Package

Provides the abstract ledger storage interface, the line-oriented codec
and the concrete backends (flat text file, in-memory).
"""

from finance_ledger.services.storage.codec import (
    DecodedLedger,
    SchemaSkip,
    deserialize,
    serialize,
)
from finance_ledger.services.storage.interface import LedgerStorageInterface
from finance_ledger.services.storage.memory import InMemoryLedgerStorage
from finance_ledger.services.storage.text_file import TextFileLedgerStorage

__all__ = [
    # Codec
    "DecodedLedger",
    "SchemaSkip",
    "deserialize",
    "serialize",
    # Interfaces
    "LedgerStorageInterface",
    # Implementations
    "InMemoryLedgerStorage",
    "TextFileLedgerStorage",
]
