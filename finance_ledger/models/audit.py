"""
Audit Models for Finance Ledger

Every significant action on the ledger is logged for audit purposes:
profile registration and login, each ledger mutation, each load/save of
the data file, and every record the loader had to skip.

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEventType(str, Enum):
    """Types of events we audit."""
    # Profiles and sessions
    PROFILE_REGISTERED = "profile_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGGED_OUT = "logged_out"

    # Ledger mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    BUDGET_SET = "budget_set"
    INPUT_REJECTED = "input_rejected"
    LOOKUP_FAILED = "lookup_failed"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    LOAD_FAILED = "load_failed"
    LEDGER_SAVED = "ledger_saved"
    SAVE_FAILED = "save_failed"
    RECORD_SKIPPED = "record_skipped"


class EventSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: LedgerEventType
    severity: EventSeverity = EventSeverity.INFO

    # Context - what entity is this about?
    username: Optional[str] = Field(
        default=None,
        description="Profile the event concerns, if any"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget', 'ledger_file')"
    )
    entity_id: Optional[str] = None

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one session)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "username": self.username,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class LedgerEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = LedgerEventBuilder.transaction_added("alice", 7, correlation_id)
        event = LedgerEventBuilder.save_failed(path, error, correlation_id)
    """

    @staticmethod
    def profile_registered(username: str, correlation_id: Optional[UUID] = None) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PROFILE_REGISTERED,
            username=username,
            entity_type="profile",
            entity_id=username,
            correlation_id=correlation_id,
            description=f"Profile registered: {username}",
            is_user_action=True,
        )

    @staticmethod
    def registration_rejected(
        username: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.REGISTRATION_REJECTED,
            severity=EventSeverity.WARNING,
            username=username,
            entity_type="profile",
            correlation_id=correlation_id,
            description=f"Registration rejected for {username!r}",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def login_succeeded(username: str, correlation_id: Optional[UUID] = None) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LOGIN_SUCCEEDED,
            username=username,
            entity_type="profile",
            entity_id=username,
            correlation_id=correlation_id,
            description=f"Login succeeded: {username}",
            is_user_action=True,
        )

    @staticmethod
    def login_failed(username: str, correlation_id: Optional[UUID] = None) -> LedgerEvent:
        # Never record the attempted password
        return LedgerEvent(
            event_type=LedgerEventType.LOGIN_FAILED,
            severity=EventSeverity.WARNING,
            username=username,
            entity_type="profile",
            correlation_id=correlation_id,
            description=f"Login failed for {username!r}",
            is_user_action=True,
        )

    @staticmethod
    def logged_out(username: str, correlation_id: Optional[UUID] = None) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LOGGED_OUT,
            username=username,
            entity_type="profile",
            entity_id=username,
            correlation_id=correlation_id,
            description=f"Logged out: {username}",
            is_user_action=True,
        )

    @staticmethod
    def transaction_changed(
        event_type: LedgerEventType,
        username: str,
        transaction_id: int,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        verb = {
            LedgerEventType.TRANSACTION_ADDED: "added",
            LedgerEventType.TRANSACTION_UPDATED: "updated",
            LedgerEventType.TRANSACTION_DELETED: "deleted",
        }[event_type]
        return LedgerEvent(
            event_type=event_type,
            username=username,
            entity_type="transaction",
            entity_id=str(transaction_id),
            correlation_id=correlation_id,
            description=f"Transaction {transaction_id} {verb}",
            details=details or {},
            is_user_action=True,
        )

    @staticmethod
    def budget_set(
        username: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.BUDGET_SET,
            username=username,
            entity_type="budget",
            entity_id=category,
            correlation_id=correlation_id,
            description=f"Budget for {category} set to {amount}",
            details={"category": category, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def input_rejected(
        username: Optional[str],
        operation: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.INPUT_REJECTED,
            severity=EventSeverity.WARNING,
            username=username,
            correlation_id=correlation_id,
            description=f"{operation} rejected with {len(issues)} issues",
            details={"operation": operation, "issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def lookup_failed(
        username: Optional[str],
        entity_type: str,
        entity_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LOOKUP_FAILED,
            severity=EventSeverity.WARNING,
            username=username,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"No {entity_type} with id {entity_id}",
        )

    @staticmethod
    def ledger_loaded(
        location: str,
        profile_count: int,
        skipped_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_LOADED,
            entity_type="ledger_file",
            entity_id=location,
            correlation_id=correlation_id,
            description=f"Loaded {profile_count} profiles ({skipped_count} records skipped)",
            details={"profile_count": profile_count, "skipped_count": skipped_count},
        )

    @staticmethod
    def record_skipped(
        line_number: int,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECORD_SKIPPED,
            severity=EventSeverity.WARNING,
            entity_type="ledger_record",
            entity_id=str(line_number),
            correlation_id=correlation_id,
            description=f"Skipped malformed record on line {line_number}",
            details={"reason": reason},
        )

    @staticmethod
    def ledger_saved(
        location: str,
        profile_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_SAVED,
            severity=EventSeverity.DEBUG,
            entity_type="ledger_file",
            entity_id=location,
            correlation_id=correlation_id,
            description=f"Saved {profile_count} profiles",
            details={"profile_count": profile_count},
        )

    @staticmethod
    def storage_failed(
        event_type: LedgerEventType,
        location: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        action = "save" if event_type is LedgerEventType.SAVE_FAILED else "load"
        return LedgerEvent(
            event_type=event_type,
            severity=EventSeverity.ERROR,
            entity_type="ledger_file",
            entity_id=location,
            correlation_id=correlation_id,
            description=f"Could not {action} ledger file",
            error_message=error_message,
        )
