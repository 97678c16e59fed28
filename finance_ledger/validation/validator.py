"""
Boundary Validation

DESIGN DECISION: The UI collaborator hands us trimmed text for each
field. Before anything reaches a TransactionStore or BudgetMap the text
goes through two checks:

STAGE 1 - SHAPE:
- Required fields present
- No record separators ('|', newline) that would corrupt the ledger file

STAGE 2 - VALUES:
- Amount parses as a finite decimal
- Kind is I or E
- Date has the YYYY-MM-DD shape (warning only: entries with any date
  text are accepted, they simply drop out of the time series)

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the caller can show them to the user.
"""

from decimal import Decimal
from typing import Optional

from finance_ledger.models.ledger import (
    TransactionFields,
    ValidationIssue,
    ValidationResult,
)
from finance_ledger.parsing.amounts import parse_amount, parse_kind
from finance_ledger.parsing.dates import parse_date
from finance_ledger.services.storage.codec import (
    BUDGET_CATEGORY_SEPARATORS,
    RECORD_SEPARATORS,
)


class EntryValidator:
    """Validates the text fields of ledger entries, budgets and credentials."""

    def validate_entry(
        self,
        date: str,
        category: str,
        description: str,
        amount_text: str,
        kind_text: str,
    ) -> ValidationResult:
        """Validate a new entry: every field is required."""
        return self._validate_fields(
            {
                "date": date,
                "category": category,
                "description": description,
                "amount": amount_text,
                "kind": kind_text,
            },
            partial=False,
        )

    def validate_changes(
        self,
        date: Optional[str] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        amount_text: Optional[str] = None,
        kind_text: Optional[str] = None,
    ) -> ValidationResult:
        """
        Validate an edit.

        A field left empty (or None) means "keep the current value" and
        is absent from the resulting fields.
        """
        return self._validate_fields(
            {
                "date": date,
                "category": category,
                "description": description,
                "amount": amount_text,
                "kind": kind_text,
            },
            partial=True,
        )

    def validate_budget(self, category: str, amount_text: str) -> ValidationResult:
        issues = []
        fields = TransactionFields()

        issues.extend(self._check_budget_category(category, fields))
        if not amount_text:
            issues.append(_missing("amount"))
        else:
            issues.extend(self._check_amount(amount_text, fields))

        return ValidationResult(issues=issues, fields=fields)

    def validate_budget_value(self, category: str, amount: Decimal) -> ValidationResult:
        """Validate an already-parsed budget before it reaches a BudgetMap."""
        fields = TransactionFields()
        issues = self._check_budget_category(category, fields)
        if amount.is_finite():
            fields.amount = amount
        else:
            issues.append(_not_finite(amount))
        return ValidationResult(issues=issues, fields=fields)

    def validate_storable(self, fields: TransactionFields) -> ValidationResult:
        """
        Check already-parsed entry fields can be written to the ledger file.

        Only the supplied fields are checked; nothing is required.
        """
        issues = []
        for name in ("date", "category", "description"):
            value = getattr(fields, name)
            if value is not None and _contains_any(value, RECORD_SEPARATORS):
                issues.append(_reserved_character(name))
        if fields.amount is not None and not fields.amount.is_finite():
            issues.append(_not_finite(fields.amount))
        return ValidationResult(issues=issues, fields=fields)

    def validate_credentials(self, username: str, password: str) -> ValidationResult:
        issues = []
        for name, value in (("username", username), ("password", password)):
            if not value:
                issues.append(_missing(name))
            elif _contains_any(value, RECORD_SEPARATORS):
                issues.append(_reserved_character(name))
        return ValidationResult(issues=issues)

    def _validate_fields(self, raw: dict[str, Optional[str]], partial: bool) -> ValidationResult:
        issues = []
        fields = TransactionFields()

        # Stage 1: shape
        supplied = {}
        for name, value in raw.items():
            if not value:
                if not partial:
                    issues.append(_missing(name))
                continue
            if _contains_any(value, RECORD_SEPARATORS):
                issues.append(_reserved_character(name))
                continue
            supplied[name] = value

        # Stage 2: values
        if "date" in supplied:
            fields.date = supplied["date"]
            if not parse_date(supplied["date"]).success:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message=f"Date {supplied['date']!r} is not in YYYY-MM-DD form",
                    severity="warning",
                    suggested_fix="This entry will not appear in monthly or yearly reports",
                ))
        if "category" in supplied:
            fields.category = supplied["category"]
        if "description" in supplied:
            fields.description = supplied["description"]
        if "amount" in supplied:
            issues.extend(self._check_amount(supplied["amount"], fields))
        if "kind" in supplied:
            kind = parse_kind(supplied["kind"])
            if kind.success:
                fields.kind = kind.value
            else:
                issues.append(ValidationIssue(
                    field="kind",
                    issue_type="invalid_value",
                    message="Invalid type. Must be 'I' or 'E'.",
                    severity="error",
                    suggested_fix="Enter I for income or E for expense",
                ))

        return ValidationResult(issues=issues, fields=fields)

    def _check_budget_category(self, category: str, fields: TransactionFields) -> list[ValidationIssue]:
        if not category:
            return [_missing("category")]
        if _contains_any(category, BUDGET_CATEGORY_SEPARATORS):
            return [ValidationIssue(
                field="category",
                issue_type="reserved_character",
                message="Budget category may not contain '|', ',' or line breaks",
                severity="error",
                suggested_fix="Remove the separator characters from the category",
            )]
        fields.category = category
        return []

    def _check_amount(self, amount_text: str, fields: TransactionFields) -> list[ValidationIssue]:
        amount = parse_amount(amount_text)
        if not amount.success:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Invalid amount. Please enter a valid number.",
                severity="error",
                suggested_fix="Use digits with an optional decimal point, e.g. 12.50",
            )]

        fields.amount = amount.value
        if amount.value < 0:
            return [ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({amount.value}) is negative",
                severity="warning",
                suggested_fix="Amounts are magnitudes; the type (I/E) sets the direction",
            )]
        return []


def _contains_any(value: str, characters: tuple[str, ...]) -> bool:
    return any(character in value for character in characters)


def _missing(field: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="missing",
        message=f"{field.capitalize()} is required",
        severity="error",
    )


def _reserved_character(field: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="reserved_character",
        message=f"{field.capitalize()} may not contain '|' or line breaks",
        severity="error",
        suggested_fix="Remove the '|' character",
    )


def _not_finite(amount: Decimal) -> ValidationIssue:
    return ValidationIssue(
        field="amount",
        issue_type="invalid_value",
        message=f"Amount ({amount}) must be a finite number",
        severity="error",
    )
