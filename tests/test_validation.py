"""Tests for boundary validation."""

from decimal import Decimal

import pytest

from finance_ledger.models import TransactionFields, TransactionKind
from finance_ledger.validation import EntryValidator


@pytest.fixture
def validator():
    return EntryValidator()


class TestValidateEntry:
    """Tests for new-entry validation."""

    def test_valid_entry(self, validator):
        """Test a well-formed entry yields parsed fields."""
        result = validator.validate_entry("2024-01-15", "Food", "Lunch", "12.50", "e")
        assert result.is_valid is True
        assert result.issues == []
        assert result.fields.amount == Decimal("12.50")
        assert result.fields.kind is TransactionKind.EXPENSE
        assert result.fields.date == "2024-01-15"

    def test_all_fields_required(self, validator):
        """Test blank fields are each reported."""
        result = validator.validate_entry("", "", "", "", "")
        assert result.error_count == 5
        assert {issue.issue_type for issue in result.issues} == {"missing"}

    def test_bad_amount(self, validator):
        """Test non-numeric amount text is an error."""
        result = validator.validate_entry("2024-01-15", "Food", "Lunch", "twelve", "E")
        assert result.is_valid is False
        assert result.summary() == "Invalid amount. Please enter a valid number."

    def test_bad_kind(self, validator):
        """Test kinds other than I/E are errors."""
        result = validator.validate_entry("2024-01-15", "Food", "Lunch", "1", "X")
        assert result.summary() == "Invalid type. Must be 'I' or 'E'."

    def test_separator_rejected(self, validator):
        """Test a field containing the record separator is rejected."""
        result = validator.validate_entry("2024-01-15", "Food", "a|b", "1", "E")
        assert result.is_valid is False
        assert result.issues[0].field == "description"
        assert result.issues[0].issue_type == "reserved_character"

    def test_malformed_date_is_warning(self, validator):
        """Test an unparseable date is accepted with a warning."""
        result = validator.validate_entry("2024/03/01", "Food", "Lunch", "1", "E")
        assert result.is_valid is True
        assert len(result.warnings) == 1
        assert result.fields.date == "2024/03/01"

    def test_negative_amount_is_warning(self, validator):
        """Test a negative amount is kept and flagged."""
        result = validator.validate_entry("2024-01-15", "Refund", "Shop", "-5", "I")
        assert result.is_valid is True
        assert result.fields.amount == Decimal("-5")
        assert result.warnings


class TestValidateChanges:
    """Tests for edit validation."""

    def test_blank_means_keep(self, validator):
        """Test omitted fields are absent from the changes."""
        result = validator.validate_changes(amount_text="15", category="")
        assert result.is_valid is True
        assert result.fields.changes() == {"amount": Decimal("15")}

    def test_no_changes(self, validator):
        """Test an edit with nothing supplied is valid and empty."""
        result = validator.validate_changes()
        assert result.is_valid is True
        assert result.fields.is_empty is True

    def test_bad_kind_in_edit(self, validator):
        """Test supplied fields are still checked."""
        assert validator.validate_changes(kind_text="Z").is_valid is False


class TestValidateBudget:
    """Tests for budget validation."""

    def test_valid_budget(self, validator):
        """Test category and amount are parsed."""
        result = validator.validate_budget("Food", "200")
        assert result.is_valid is True
        assert result.fields.category == "Food"
        assert result.fields.amount == Decimal("200")

    @pytest.mark.parametrize("category", ["Fo,od", "Fo|od", ""])
    def test_bad_category(self, validator, category):
        """Test categories that would break the BUDGETS line."""
        assert validator.validate_budget(category, "200").is_valid is False

    def test_bad_amount(self, validator):
        """Test budget amount must parse."""
        assert validator.validate_budget("Food", "lots").is_valid is False


class TestValidateCredentials:
    """Tests for username/password validation."""

    def test_valid_credentials(self, validator):
        """Test plain credentials pass."""
        assert validator.validate_credentials("alice", "secret").is_valid is True

    def test_blank_credentials(self, validator):
        """Test both fields are required."""
        assert validator.validate_credentials("", "").error_count == 2

    def test_separator_in_username(self, validator):
        """Test a username that would corrupt the USER line."""
        assert validator.validate_credentials("al|ice", "pw").is_valid is False


class TestValidateParsedValues:
    """Tests for checks on values that were parsed by the caller."""

    def test_storable_fields(self, validator):
        """Test plain parsed fields pass."""
        fields = TransactionFields(category="Food", description="Lunch", amount=Decimal("3"))
        assert validator.validate_storable(fields).is_valid is True

    @pytest.mark.parametrize("name", ["date", "category", "description"])
    def test_separator_in_parsed_field(self, validator, name):
        """Test each text field is checked for separators."""
        result = validator.validate_storable(TransactionFields(**{name: "a|b"}))
        assert result.is_valid is False
        assert result.issues[0].field == name

    def test_budget_value(self, validator):
        """Test a parsed budget is checked like a typed one."""
        assert validator.validate_budget_value("Food", Decimal("20")).is_valid is True
        assert validator.validate_budget_value("Food,Drinks", Decimal("20")).is_valid is False
        assert validator.validate_budget_value("Food", Decimal("Infinity")).is_valid is False
