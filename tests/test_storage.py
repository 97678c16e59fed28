"""Tests for the storage backends."""

from decimal import Decimal

from finance_ledger.ledger import UserProfile, UserProfileRegistry
from finance_ledger.models import ErrorKind, TransactionKind
from finance_ledger.services import InMemoryLedgerStorage, TextFileLedgerStorage


def _registry():
    registry = UserProfileRegistry()
    profile = UserProfile(username="alice", password="pw")
    profile.transactions.add("2024-01-15", "Food", "Lunch", Decimal("9.99"), TransactionKind.EXPENSE)
    registry.append(profile)
    return registry


class TestTextFileLedgerStorage:
    """Tests for the flat-file backend."""

    def test_missing_file_is_empty_ledger(self, tmp_path):
        """Test first start with no file yields an empty registry."""
        storage = TextFileLedgerStorage(tmp_path / "users.txt")
        loaded = storage.load()
        assert loaded.success is True
        assert len(loaded.value.registry) == 0

    def test_save_then_load(self, tmp_path):
        """Test a saved registry is read back from disk."""
        path = tmp_path / "users.txt"
        storage = TextFileLedgerStorage(path)

        assert storage.save(_registry()).success is True
        assert path.read_text(encoding="utf-8").startswith("USER|alice|pw\n")

        loaded = TextFileLedgerStorage(path).load()
        alice = loaded.value.registry.find_by_username("alice").value
        assert alice.transactions.find_by_id(1).value.amount == Decimal("9.99")

    def test_save_leaves_no_temp_file(self, tmp_path):
        """Test the temporary file is replaced into place."""
        storage = TextFileLedgerStorage(tmp_path / "users.txt")
        storage.save(_registry())
        assert sorted(p.name for p in tmp_path.iterdir()) == ["users.txt"]

    def test_save_overwrites_previous_contents(self, tmp_path):
        """Test each save rewrites the whole file."""
        path = tmp_path / "users.txt"
        path.write_text("USER|old|x\nENDUSER\n", encoding="utf-8")
        TextFileLedgerStorage(path).save(_registry())
        assert "old" not in path.read_text(encoding="utf-8")

    def test_unreadable_path_is_io_error(self, tmp_path):
        """Test a directory in place of the file reports io_error."""
        loaded = TextFileLedgerStorage(tmp_path).load()
        assert loaded.success is False
        assert loaded.error_kind == ErrorKind.IO_ERROR

    def test_unwritable_path_is_io_error(self, tmp_path):
        """Test a save into a missing directory reports io_error."""
        storage = TextFileLedgerStorage(tmp_path / "missing" / "users.txt")
        saved = storage.save(_registry())
        assert saved.success is False
        assert saved.error_kind == ErrorKind.IO_ERROR

    def test_latin1_lines_are_kept(self, tmp_path):
        """Test a line that is not UTF-8 is read as Latin-1, not failing the load."""
        path = tmp_path / "users.txt"
        path.write_bytes(
            b"USER|alice|pw\nNEXT_ID|2\nBUDGETS|Food:50,\n"
            b"TRANS|1|2024-01-01|Food|caf\xe9|5|E\nENDUSER\n"
        )

        loaded = TextFileLedgerStorage(path).load()

        assert loaded.success is True
        assert loaded.value.skipped == []
        alice = loaded.value.registry.find_by_username("alice").value
        assert alice.transactions.find_by_id(1).value.description == "café"
        assert alice.budgets.get("Food") == Decimal("50")

    def test_refused_save_leaves_file_alone(self, tmp_path):
        """Test a registry holding a separator in a field is not written."""
        path = tmp_path / "users.txt"
        path.write_text("USER|old|x\nENDUSER\n", encoding="utf-8")
        registry = _registry()
        registry.find_by_username("alice").value.budgets.set("Food,Drinks", Decimal("20"))

        saved = TextFileLedgerStorage(path).save(registry)

        assert saved.success is False
        assert saved.error_kind == ErrorKind.INVALID_INPUT
        assert path.read_text(encoding="utf-8") == "USER|old|x\nENDUSER\n"

    def test_location(self, tmp_path):
        """Test location names the file."""
        path = tmp_path / "ledger.txt"
        assert TextFileLedgerStorage(path).location == str(path)


class TestInMemoryLedgerStorage:
    """Tests for the in-memory backend."""

    def test_empty_load(self):
        """Test a fresh store loads as empty."""
        assert len(InMemoryLedgerStorage().load().value.registry) == 0

    def test_save_keeps_serialized_text(self):
        """Test saves go through the codec."""
        storage = InMemoryLedgerStorage()
        storage.save(_registry())
        assert storage.save_count == 1
        assert "TRANS|1|2024-01-15|Food|Lunch|9.99|E" in storage.text
        assert storage.load().value.registry.contains("alice")

    def test_refused_save(self):
        """Test the in-memory backend refuses the same registries."""
        storage = InMemoryLedgerStorage()
        registry = _registry()
        registry.find_by_username("alice").value.budgets.set("Food|Drinks", Decimal("20"))

        assert storage.save(registry).error_kind == ErrorKind.INVALID_INPUT
        assert storage.text is None
        assert storage.save_count == 0
