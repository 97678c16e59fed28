"""Tests for the ledger file codec."""

from decimal import Decimal

import pytest

from finance_ledger.ledger import UserProfile, UserProfileRegistry
from finance_ledger.models import ErrorKind, LedgerError, TransactionKind
from finance_ledger.services.storage import deserialize, serialize


def _alice():
    profile = UserProfile(username="alice", password="pw")
    profile.budgets.set("Food", Decimal("200"))
    profile.transactions.add("2024-01-15", "Food", "Lunch", Decimal("12.50"), TransactionKind.EXPENSE)
    return profile


class TestSerialize:
    """Tests for rendering the registry."""

    def test_block_layout(self):
        """Test one profile renders to the documented block."""
        registry = UserProfileRegistry()
        registry.append(_alice())

        assert serialize(registry) == (
            "USER|alice|pw\n"
            "NEXT_ID|2\n"
            "BUDGETS|Food:200,\n"
            "TRANS|1|2024-01-15|Food|Lunch|12.50|E\n"
            "ENDUSER\n"
        )

    def test_profile_without_budgets(self):
        """Test an empty BUDGETS line is still written."""
        registry = UserProfileRegistry()
        registry.append(UserProfile(username="bob", password="x"))
        assert serialize(registry) == "USER|bob|x\nNEXT_ID|1\nBUDGETS|\nENDUSER\n"

    def test_empty_registry(self):
        """Test an empty registry renders to empty text."""
        assert serialize(UserProfileRegistry()) == ""


class TestDeserialize:
    """Tests for permissive loading."""

    def test_reads_back_what_was_written(self):
        """Test a saved registry loads with the same contents."""
        registry = UserProfileRegistry()
        registry.append(_alice())
        registry.append(UserProfile(username="bob", password="secret"))

        decoded = deserialize(serialize(registry))

        assert decoded.skipped == []
        assert [profile.username for profile in decoded.registry.all()] == ["alice", "bob"]
        alice = decoded.registry.find_by_username("alice").value
        assert alice.next_id == 2
        assert alice.budgets.get("Food") == Decimal("200")
        entry = alice.transactions.find_by_id(1).value
        assert entry.amount == Decimal("12.50")
        assert entry.kind is TransactionKind.EXPENSE
        assert entry.description == "Lunch"

    def test_malformed_lines_are_skipped(self):
        """Test bad records are dropped while later lines and profiles load."""
        text = (
            "USER|alice|pw\n"
            "NEXT_ID|3\n"
            "BUDGETS|Food:100,Fun:abc,\n"
            "TRANS|1|2024-01-01|Food|x|10|E\n"
            "TRANS|2|2024-01-02|Food|10|E\n"
            "TRANS|1|2024-01-03|Food|dup|10|E\n"
            "ENDUSER\n"
            "USER|bob|pw2\n"
            "TRANS|5|2024-02-01|Pay|salary|100|i\n"
            "ENDUSER\n"
        )

        decoded = deserialize(text)

        assert [skip.line_number for skip in decoded.skipped] == [3, 5, 6]
        assert {skip.kind for skip in decoded.skipped} == {ErrorKind.SCHEMA_SKIP}
        alice = decoded.registry.find_by_username("alice").value
        assert [entry.id for entry in alice.transactions.entries] == [1]
        assert alice.budgets.items() == [("Food", Decimal("100"))]
        assert alice.next_id == 3

        bob = decoded.registry.find_by_username("bob").value
        assert bob.transactions.find_by_id(5).value.kind is TransactionKind.INCOME
        assert bob.next_id == 6

    def test_trailing_comma_in_budgets(self):
        """Test the trailing comma yields no extra entry."""
        decoded = deserialize("USER|a|b\nBUDGETS|Food:1,Rent:2,\nENDUSER\n")
        budgets = decoded.registry.find_by_username("a").value.budgets
        assert len(budgets) == 2
        assert decoded.skipped == []

    def test_category_with_colon(self):
        """Test the amount is taken after the last colon."""
        decoded = deserialize("USER|a|b\nBUDGETS|Trip: Paris:50,\nENDUSER\n")
        budgets = decoded.registry.find_by_username("a").value.budgets
        assert budgets.get("Trip: Paris") == Decimal("50")

    def test_unknown_prefix_ignored(self):
        """Test lines with unknown tags are ignored without a skip."""
        decoded = deserialize("USER|a|b\nMYSTERY|whatever\nNOTES\nENDUSER\n")
        assert len(decoded.registry) == 1
        assert decoded.skipped == []

    def test_counter_bumped_past_loaded_ids(self):
        """Test a stale NEXT_ID is raised above the highest id."""
        decoded = deserialize(
            "USER|a|b\nNEXT_ID|1\nTRANS|4|2024-01-01|Food|x|1|E\nENDUSER\n"
        )
        profile = decoded.registry.find_by_username("a").value
        assert profile.next_id == 5
        assert profile.transactions.add("2024-01-02", "Food", "y", Decimal("1"), TransactionKind.EXPENSE) == 5

    def test_record_outside_profile_skipped(self):
        """Test a TRANS line before any USER line is reported."""
        decoded = deserialize("TRANS|1|2024-01-01|Food|x|1|E\nUSER|a|b\nENDUSER\n")
        assert len(decoded.skipped) == 1
        assert decoded.skipped[0].line_number == 1
        assert len(decoded.registry) == 1

    def test_bad_next_id_skipped(self):
        """Test a non-numeric NEXT_ID falls back to 1."""
        decoded = deserialize("USER|a|b\nNEXT_ID|seven\nENDUSER\n")
        assert len(decoded.skipped) == 1
        assert decoded.registry.find_by_username("a").value.next_id == 1

    def test_missing_enduser_still_loads(self):
        """Test the last block is kept without its ENDUSER line."""
        decoded = deserialize("USER|a|b\nNEXT_ID|2\n")
        assert decoded.registry.contains("a")

    def test_windows_line_endings(self):
        """Test CRLF files load the same as LF files."""
        decoded = deserialize("USER|a|b\r\nTRANS|1|2024-01-01|Food|x|3|E\r\nENDUSER\r\n")
        entry = decoded.registry.find_by_username("a").value.transactions.find_by_id(1).value
        assert entry.kind is TransactionKind.EXPENSE
        assert decoded.skipped == []

    def test_empty_text(self):
        """Test empty text decodes to an empty registry."""
        decoded = deserialize("")
        assert len(decoded.registry) == 0
        assert decoded.skipped == []


class TestSerializeRefusals:
    """Tests for values that cannot be written without changing on reload."""

    def test_budget_category_with_comma(self):
        """Test a comma in a budget category is refused, not split."""
        registry = UserProfileRegistry()
        profile = UserProfile(username="alice", password="pw")
        profile.budgets.set("Food,Drinks", Decimal("20"))
        registry.append(profile)

        with pytest.raises(LedgerError) as excinfo:
            serialize(registry)
        assert excinfo.value.kind is ErrorKind.INVALID_INPUT

    def test_description_with_field_separator(self):
        """Test a '|' in a description is refused, not written as a broken line."""
        registry = UserProfileRegistry()
        profile = UserProfile(username="alice", password="pw")
        profile.transactions.add("2024-01-01", "Food", "a|b", Decimal("1"), TransactionKind.EXPENSE)
        registry.append(profile)

        with pytest.raises(LedgerError, match="description"):
            serialize(registry)

    @pytest.mark.parametrize("username,password", [("al|ice", "pw"), ("alice", "p\nw")])
    def test_credentials_with_separator(self, username, password):
        """Test USER line fields are checked too."""
        registry = UserProfileRegistry()
        registry.append(UserProfile(username=username, password=password))
        with pytest.raises(LedgerError):
            serialize(registry)

    def test_non_finite_budget(self):
        """Test an infinite ceiling is refused."""
        registry = UserProfileRegistry()
        profile = UserProfile(username="alice", password="pw")
        profile.budgets.set("Food", Decimal("Infinity"))
        registry.append(profile)
        with pytest.raises(LedgerError):
            serialize(registry)

    def test_small_amount_written_in_plain_notation(self):
        """Test amounts never use exponent notation, so they load back."""
        registry = UserProfileRegistry()
        profile = UserProfile(username="alice", password="pw")
        profile.transactions.add("2024-01-01", "Fee", "tiny", Decimal("1E-7"), TransactionKind.EXPENSE)
        profile.budgets.set("Fee", Decimal("1E+3"))
        registry.append(profile)

        text = serialize(registry)
        assert "|0.0000001|E" in text
        assert "Fee:1000," in text

        decoded = deserialize(text)
        assert decoded.skipped == []
        alice = decoded.registry.find_by_username("alice").value
        assert alice.transactions.find_by_id(1).value.amount == Decimal("1E-7")
        assert alice.budgets.get("Fee") == Decimal("1000")
