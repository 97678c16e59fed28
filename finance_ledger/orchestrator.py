"""
Main Orchestrator for Finance Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. Startup (load file -> registry)
2. Authentication (register / login -> LedgerSession)
3. Ledger use (validate -> mutate -> save) and reports
4. Shutdown (final save)

DESIGN DECISION: There is no process-wide "current user". Logging in
returns a LedgerSession value; the caller holds it and every ledger
operation goes through it.

The orchestrator enforces the boundaries:
- Text input is validated before it reaches a store
- The full registry is saved after every mutation
- A failed save is reported, never raised, and in-memory state is kept
- Every step is audited
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from finance_ledger.audit import AuditLogger, configure_logging, create_correlation_id
from finance_ledger.config import LedgerSettings, get_settings
from finance_ledger.ledger.registry import UserProfile, UserProfileRegistry
from finance_ledger.models.audit import LedgerEventBuilder, LedgerEventType
from finance_ledger.models.ledger import (
    Transaction,
    TransactionFields,
    TransactionKind,
    ValidationResult,
)
from finance_ledger.models.outcome import ErrorKind, Outcome
from finance_ledger.models.reports import BudgetReport, LedgerSummary, TimeSeriesReport
from finance_ledger.reports import aggregation
from finance_ledger.services.storage import (
    DecodedLedger,
    LedgerStorageInterface,
    SchemaSkip,
    TextFileLedgerStorage,
)
from finance_ledger.validation import EntryValidator


class LedgerApp:
    """
    Owns the registry for the lifetime of the process.

    Flow:
    1. start() loads the registry (missing file -> empty registry)
    2. register() / login() hand out a LedgerSession
    3. Sessions mutate their profile and call save()
    4. shutdown() saves once more
    """

    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        settings: Optional[LedgerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[EntryValidator] = None,
    ):
        self._settings = settings or get_settings()
        self._storage = storage or TextFileLedgerStorage(self._settings.data_file)
        self._audit = audit_logger or AuditLogger()
        self._validator = validator or EntryValidator()
        self._registry = UserProfileRegistry()

        self.skipped: list[SchemaSkip] = []
        self.last_load: Optional[Outcome[DecodedLedger]] = None
        self.last_save: Optional[Outcome[None]] = None
        self._overwrite_blocked = False

    @property
    def registry(self) -> UserProfileRegistry:
        return self._registry

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit

    @property
    def validator(self) -> EntryValidator:
        return self._validator

    def start(self) -> Outcome[DecodedLedger]:
        """
        Load the registry from storage.

        An unreadable file is reported and leaves an empty registry; it
        never aborts startup. Saving is then refused until
        allow_overwrite() is called, so the unread file is not replaced
        by the empty registry.
        """
        configure_logging("DEBUG" if self._settings.debug_mode else self._settings.log_level)

        loaded = self._storage.load()
        if loaded.success:
            self._registry = loaded.value.registry
            self.skipped = list(loaded.value.skipped)
            self._overwrite_blocked = False
            self._audit.log_ledger_loaded(
                location=self._storage.location,
                profile_count=len(self._registry),
                skipped=[(skip.line_number, skip.reason) for skip in self.skipped],
            )
        else:
            self._registry = UserProfileRegistry()
            self.skipped = []
            self._overwrite_blocked = True
            self._audit.log_storage_failed(
                event_type=LedgerEventType.LOAD_FAILED,
                location=self._storage.location,
                error_message=loaded.error_message,
            )

        self.last_load = loaded
        return loaded

    def register(self, username: str, password: str) -> Outcome:
        """Create a profile, save, and open a session for it."""
        correlation_id = create_correlation_id()

        checked = self._validator.validate_credentials(username, password)
        if not checked.is_valid:
            self._audit.log(LedgerEventBuilder.registration_rejected(
                username, checked.summary(), correlation_id,
            ))
            return Outcome.fail(ErrorKind.INVALID_INPUT, checked.summary())

        if self._registry.contains(username):
            self._audit.log(LedgerEventBuilder.registration_rejected(
                username, "duplicate username", correlation_id,
            ))
            return Outcome.fail(ErrorKind.DUPLICATE, "Username already exists")

        profile = UserProfile(username=username, password=password)
        self._registry.append(profile)
        self._audit.log(LedgerEventBuilder.profile_registered(username, correlation_id))
        self.save(correlation_id)

        return Outcome.ok(LedgerSession(self, profile, correlation_id))

    def login(self, username: str, password: str) -> Outcome:
        correlation_id = create_correlation_id()

        checked = self._registry.check_credentials(username, password)
        if not checked.success:
            self._audit.log(LedgerEventBuilder.login_failed(username, correlation_id))
            return checked

        self._audit.log(LedgerEventBuilder.login_succeeded(username, correlation_id))
        return Outcome.ok(LedgerSession(self, checked.value, correlation_id))

    def save(self, correlation_id: Optional[UUID] = None) -> Outcome[None]:
        """Rewrite the whole registry to storage."""
        if self._overwrite_blocked:
            saved = Outcome.fail(
                ErrorKind.IO_ERROR,
                f"Not overwriting {self._storage.location}: it could not be read at startup",
            )
        else:
            saved = self._storage.save(self._registry)

        if saved.success:
            self._audit.log_ledger_saved(
                location=self._storage.location,
                profile_count=len(self._registry),
                correlation_id=correlation_id,
            )
        else:
            self._audit.log_storage_failed(
                event_type=LedgerEventType.SAVE_FAILED,
                location=self._storage.location,
                error_message=saved.error_message,
                correlation_id=correlation_id,
            )

        self.last_save = saved
        return saved

    def shutdown(self) -> Outcome[None]:
        return self.save()

    def allow_overwrite(self) -> None:
        """Let saves replace a ledger file that failed to load."""
        self._overwrite_blocked = False


class LedgerSession:
    """
    One logged-in user's view of the ledger.

    Mutators save the full registry afterwards; the outcome of that save
    is available as app.last_save. Report methods are read-only.
    """

    def __init__(
        self,
        app: LedgerApp,
        profile: UserProfile,
        correlation_id: Optional[UUID] = None,
    ):
        self._app = app
        self._profile = profile
        self._correlation_id = correlation_id or create_correlation_id()

    @property
    def username(self) -> str:
        return self._profile.username

    @property
    def next_id(self) -> int:
        return self._profile.next_id

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def add_transaction(
        self,
        date: str,
        category: str,
        description: str,
        amount: Decimal,
        kind: TransactionKind,
    ) -> Outcome[Transaction]:
        """Add an already-parsed entry and save."""
        checked = self._app.validator.validate_storable(TransactionFields(
            date=date, category=category, description=description, amount=amount, kind=kind,
        ))
        if not checked.is_valid:
            return self._reject("add_transaction", checked)

        store = self._profile.transactions
        transaction_id = store.add(date, category, description, amount, kind)

        self._app.audit_logger.log_transaction_change(
            event_type=LedgerEventType.TRANSACTION_ADDED,
            username=self.username,
            transaction_id=transaction_id,
            details={"category": category, "amount": str(amount), "kind": kind.value},
            correlation_id=self._correlation_id,
        )
        self._app.save(self._correlation_id)
        return store.find_by_id(transaction_id)

    def record_entry(
        self,
        date: str,
        category: str,
        description: str,
        amount_text: str,
        kind_text: str,
    ) -> Outcome[Transaction]:
        """Validate raw text fields, then add the entry."""
        checked = self._app.validator.validate_entry(
            date, category, description, amount_text, kind_text,
        )
        if not checked.is_valid:
            return self._reject("record_entry", checked)

        fields = checked.fields
        return self.add_transaction(
            fields.date, fields.category, fields.description, fields.amount, fields.kind,
        )

    def find_transaction(self, transaction_id: int) -> Outcome[Transaction]:
        found = self._profile.transactions.find_by_id(transaction_id)
        if not found.success:
            self._lookup_failed(transaction_id)
        return found

    def list_transactions(self, category: Optional[str] = None) -> list[Transaction]:
        return self._profile.transactions.list_filtered(category)

    def update_transaction(
        self,
        transaction_id: int,
        changes: TransactionFields,
    ) -> Outcome[Transaction]:
        """Replace the supplied fields of one entry and save."""
        checked = self._app.validator.validate_storable(changes)
        if not checked.is_valid:
            return self._reject("update_transaction", checked)

        updated = self._profile.transactions.update(transaction_id, changes)
        if not updated.success:
            self._lookup_failed(transaction_id)
            return updated

        self._app.audit_logger.log_transaction_change(
            event_type=LedgerEventType.TRANSACTION_UPDATED,
            username=self.username,
            transaction_id=transaction_id,
            details=changes.model_dump(mode="json", exclude_none=True),
            correlation_id=self._correlation_id,
        )
        self._app.save(self._correlation_id)
        return updated

    def edit_entry(
        self,
        transaction_id: int,
        date: Optional[str] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        amount_text: Optional[str] = None,
        kind_text: Optional[str] = None,
    ) -> Outcome[Transaction]:
        """Validate raw edit text (blank = keep), then update the entry."""
        checked = self._app.validator.validate_changes(
            date, category, description, amount_text, kind_text,
        )
        if not checked.is_valid:
            return self._reject("edit_entry", checked)
        return self.update_transaction(transaction_id, checked.fields)

    def delete_transaction(self, transaction_id: int) -> Outcome[Transaction]:
        deleted = self._profile.transactions.delete(transaction_id)
        if not deleted.success:
            self._lookup_failed(transaction_id)
            return deleted

        self._app.audit_logger.log_transaction_change(
            event_type=LedgerEventType.TRANSACTION_DELETED,
            username=self.username,
            transaction_id=transaction_id,
            correlation_id=self._correlation_id,
        )
        self._app.save(self._correlation_id)
        return deleted

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    def set_budget(self, category: str, amount: Decimal) -> Outcome[Decimal]:
        checked = self._app.validator.validate_budget_value(category, amount)
        if not checked.is_valid:
            return self._reject("set_budget", checked)

        self._profile.budgets.set(category, amount)
        self._app.audit_logger.log_budget_set(
            username=self.username,
            category=category,
            amount=str(amount),
            correlation_id=self._correlation_id,
        )
        self._app.save(self._correlation_id)
        return Outcome.ok(amount)

    def record_budget(self, category: str, amount_text: str) -> Outcome[Decimal]:
        checked = self._app.validator.validate_budget(category, amount_text)
        if not checked.is_valid:
            return self._reject("record_budget", checked)
        return self.set_budget(checked.fields.category, checked.fields.amount)

    def budgets(self) -> list[tuple[str, Decimal]]:
        return self._profile.budgets.items()

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def expenses_by_category(self) -> dict[str, Decimal]:
        return aggregation.expenses_by_category(self._profile.transactions.entries)

    def summary(self) -> LedgerSummary:
        return aggregation.summarize(self._profile.transactions.entries)

    def budget_report(self) -> BudgetReport:
        return aggregation.budget_report(
            self._profile.budgets,
            self._profile.transactions.entries,
            warning_ratio=self._app.settings.budget_warning_ratio,
        )

    def time_series(self) -> TimeSeriesReport:
        return aggregation.time_series(self._profile.transactions.entries)

    def logout(self) -> None:
        self._app.audit_logger.log(
            LedgerEventBuilder.logged_out(self.username, self._correlation_id)
        )

    def _reject(self, operation: str, checked: ValidationResult) -> Outcome:
        self._app.audit_logger.log_input_rejected(
            username=self.username,
            operation=operation,
            issues=[issue.model_dump() for issue in checked.issues],
            correlation_id=self._correlation_id,
        )
        return Outcome.fail(ErrorKind.INVALID_INPUT, checked.summary())

    def _lookup_failed(self, transaction_id: int) -> None:
        self._app.audit_logger.log_lookup_failed(
            username=self.username,
            entity_type="transaction",
            entity_id=str(transaction_id),
            correlation_id=self._correlation_id,
        )
