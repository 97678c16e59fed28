"""
Audit Logger

DESIGN DECISION: Every significant action on the ledger is logged.
This provides:
1. Complete traceability of who changed what
2. Debugging capability when a save or load goes wrong
3. A visible record of every line the loader had to skip

The audit logger:
- Is synchronous, like the rest of the core
- Gracefully handles failures (doesn't break the caller if logging fails)
- Supports correlation IDs to trace related events (e.g. one session)
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_ledger.models.audit import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structured output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("finance_ledger").setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs every event to the structured local log. Events are also kept
    in memory (most recent last) so callers and tests can inspect them.
    """

    def __init__(self, keep_history: bool = True):
        self._logger = structlog.get_logger("finance_ledger.audit")
        self._keep_history = keep_history
        self.events: list[LedgerEvent] = []

    def log(self, event: LedgerEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        if self._keep_history:
            self.events.append(event)

        log_dict = event.to_log_dict()
        try:
            if event.severity is EventSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity is EventSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity is EventSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Logging must never break a ledger operation
            logging.getLogger(__name__).error("audit_log_failed: %s", e)
            return False

        return True

    def events_of_type(self, event_type: LedgerEventType) -> list[LedgerEvent]:
        return [event for event in self.events if event.event_type is event_type]

    def log_transaction_change(
        self,
        event_type: LedgerEventType,
        username: str,
        transaction_id: int,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an add, update or delete of one transaction."""
        self.log(LedgerEventBuilder.transaction_changed(
            event_type=event_type,
            username=username,
            transaction_id=transaction_id,
            details=details,
            correlation_id=correlation_id,
        ))

    def log_budget_set(
        self,
        username: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.budget_set(
            username=username,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_input_rejected(
        self,
        username: Optional[str],
        operation: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.input_rejected(
            username=username,
            operation=operation,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_lookup_failed(
        self,
        username: Optional[str],
        entity_type: str,
        entity_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.lookup_failed(
            username=username,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
        ))

    def log_ledger_loaded(
        self,
        location: str,
        profile_count: int,
        skipped: list[tuple[int, str]],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a completed load plus one event per skipped record."""
        for line_number, reason in skipped:
            self.log(LedgerEventBuilder.record_skipped(
                line_number=line_number,
                reason=reason,
                correlation_id=correlation_id,
            ))
        self.log(LedgerEventBuilder.ledger_loaded(
            location=location,
            profile_count=profile_count,
            skipped_count=len(skipped),
            correlation_id=correlation_id,
        ))

    def log_ledger_saved(
        self,
        location: str,
        profile_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.ledger_saved(
            location=location,
            profile_count=profile_count,
            correlation_id=correlation_id,
        ))

    def log_storage_failed(
        self,
        event_type: LedgerEventType,
        location: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.storage_failed(
            event_type=event_type,
            location=location,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    The orchestrator creates one per session (login to logout).
    """
    return uuid4()
