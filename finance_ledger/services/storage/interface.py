"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for ledger persistence.
This allows us to:
1. Keep the flat text file as the durable copy
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from where the bytes live

The whole registry is written and read in one piece; there is no
partial or append-only persistence.
"""

from abc import ABC, abstractmethod

from finance_ledger.ledger.registry import UserProfileRegistry
from finance_ledger.models.outcome import Outcome
from finance_ledger.services.storage.codec import DecodedLedger


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage.

    Implementations never raise on I/O problems; they return an
    IO_ERROR outcome instead.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable description of where the ledger lives."""
        pass

    @abstractmethod
    def load(self) -> Outcome[DecodedLedger]:
        """
        Load every profile.

        Returns:
            The decoded ledger. A ledger that does not exist yet loads
            as an empty registry, not as a failure.
        """
        pass

    @abstractmethod
    def save(self, registry: UserProfileRegistry) -> Outcome[None]:
        """
        Replace the stored ledger with the given registry.

        Args:
            registry: Every profile to persist

        Returns:
            Success, or an IO_ERROR outcome if the write failed
        """
        pass
