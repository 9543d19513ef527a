"""Tests for state store."""

import sqlite3
from datetime import date
from decimal import Decimal

import pytest

from spend_tracker.schemas import CanonicalEntry, TransactionType
from spend_tracker.state_store import StateStore, StateStoreError


def make_entry(
    day: date = date(2024, 1, 5),
    description: str = "Groceries",
    amount: str = "450",
    type: TransactionType = TransactionType.EXPENSE,
) -> CanonicalEntry:
    return CanonicalEntry(
        date=day,
        description=description,
        category="Food",
        type=type,
        amount=Decimal(amount),
    )


class TestStateStore:
    """Tests for SQLite state store."""

    @pytest.fixture
    def store(self, temp_db):
        """Create a fresh state store."""
        return StateStore(temp_db)

    def test_init_creates_db(self, temp_db):
        """Initializing creates database file."""
        StateStore(temp_db)
        assert temp_db.exists()

    def test_init_creates_parent_dirs(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "state.db"
        StateStore(db_path)
        assert db_path.exists()

    def test_init_creates_tables(self, store):
        """All required tables are created."""
        conn = store._get_connection()
        try:
            tables = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
            table_names = [t[0] for t in tables]

            assert "transactions" in table_names
            assert "import_runs" in table_names
        finally:
            conn.close()

    def test_reopen_keeps_data(self, temp_db):
        StateStore(temp_db).save_transaction(make_entry(), "1")
        assert StateStore(temp_db).count_transactions("1") == 1


class TestTransactionOperations:
    """Tests for transaction persistence and lookup."""

    @pytest.fixture
    def store(self, temp_db):
        return StateStore(temp_db)

    def test_save_and_list(self, store):
        tx_id = store.save_transaction(make_entry(), "1")

        stored = store.list_transactions("1")
        assert len(stored) == 1
        assert stored[0].id == tx_id
        assert stored[0].date == "2024-01-05"
        assert stored[0].description == "Groceries"
        assert stored[0].type is TransactionType.EXPENSE
        assert stored[0].amount == Decimal("450")

    def test_amount_stored_in_canonical_form(self, store):
        store.save_transaction(make_entry(amount="100.50"), "1")

        conn = store._get_connection()
        try:
            raw = conn.execute("SELECT amount FROM transactions").fetchone()[0]
        finally:
            conn.close()
        assert raw == "100.5"

    def test_find_duplicate_same_day(self, store):
        store.save_transaction(make_entry(amount="100.50"), "1")

        found = store.find_duplicate("1", "Groceries", Decimal("100.5"), "2024-01-05", "2024-01-06")
        assert found is not None
        assert found.description == "Groceries"

    def test_find_duplicate_other_day(self, store):
        store.save_transaction(make_entry(), "1")

        assert store.find_duplicate("1", "Groceries", Decimal("450"), "2024-01-06", "2024-01-07") is None

    def test_find_duplicate_is_owner_scoped(self, store):
        store.save_transaction(make_entry(), "1")

        assert store.find_duplicate("2", "Groceries", Decimal("450"), "2024-01-05", "2024-01-06") is None

    def test_find_duplicate_requires_same_description_and_amount(self, store):
        store.save_transaction(make_entry(), "1")

        assert store.find_duplicate("1", "groceries", Decimal("450"), "2024-01-05", "2024-01-06") is None
        assert store.find_duplicate("1", "Groceries", Decimal("451"), "2024-01-05", "2024-01-06") is None

    def test_save_rejects_non_positive_amount(self, store):
        with pytest.raises(StateStoreError):
            store.save_transaction(make_entry(amount="0"), "1")

    def test_save_wraps_database_errors(self, store, monkeypatch):
        def broken_connection():
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(store, "_get_connection", broken_connection)

        with pytest.raises(StateStoreError, match="database is locked"):
            store.save_transaction(make_entry(), "1")

    def test_type_check_constraint(self, store):
        conn = store._get_connection()
        try:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO transactions (owner_id, date, description, category, type, amount, created_at)"
                    " VALUES ('1', '2024-01-05', 'x', 'y', 'transfer', '1', 'now')"
                )
        finally:
            conn.close()

    def test_amount_check_constraint(self, store):
        conn = store._get_connection()
        try:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO transactions (owner_id, date, description, category, type, amount, created_at)"
                    " VALUES ('1', '2024-01-05', 'x', 'y', 'expense', '0', 'now')"
                )
        finally:
            conn.close()

    def test_list_transactions_date_range(self, store):
        for day in (1, 5, 9):
            store.save_transaction(make_entry(day=date(2024, 1, day), description=f"d{day}"), "1")

        stored = store.list_transactions("1", start=date(2024, 1, 2), end=date(2024, 1, 9))
        assert [tx.description for tx in stored] == ["d5", "d9"]

    def test_count_transactions(self, store):
        store.save_transaction(make_entry(description="a"), "1")
        store.save_transaction(make_entry(description="b"), "1")
        store.save_transaction(make_entry(description="c"), "2")

        assert store.count_transactions() == 3
        assert store.count_transactions("1") == 2

    def test_to_dict(self, store):
        store.save_transaction(make_entry(amount="12.30"), "1")

        assert store.list_transactions("1")[0].to_dict()["amount"] == "12.3"


class TestImportRuns:
    """Tests for the import audit trail."""

    @pytest.fixture
    def store(self, temp_db):
        return StateStore(temp_db)

    def test_record_and_list(self, store):
        store.record_import_run("1", "jan.pdf", total_read=3, inserted=2, skipped=1, file_hash="a" * 64, strategy="pdf_text")
        store.record_import_run("1", "feb.xlsx", total_read=1, inserted=1, skipped=0)
        store.record_import_run("2", "other.png", total_read=0, inserted=0, skipped=0)

        runs = store.list_import_runs("1")
        assert [run.source_name for run in runs] == ["feb.xlsx", "jan.pdf"]
        assert runs[1].strategy == "pdf_text"
        assert runs[1].skipped == 1

        assert len(store.list_import_runs()) == 3
        assert len(store.list_import_runs(limit=1)) == 1

    def test_get_stats(self, store):
        store.save_transaction(make_entry(type=TransactionType.INCOME), "1")
        store.save_transaction(make_entry(description="x"), "2")
        store.record_import_run("1", "jan.pdf", total_read=1, inserted=1, skipped=0)

        stats = store.get_stats()

        assert stats["transactions_total"] == 2
        assert stats["owners_total"] == 2
        assert stats["import_runs_total"] == 1
        assert stats["transactions_income"] == 1
        assert stats["transactions_expense"] == 1
