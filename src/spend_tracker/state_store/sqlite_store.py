"""
SQLite-based state store implementation.

Tables:
- transactions: Imported spends, owned by an owner id
- import_runs: One audit row per statement import
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from ..schemas.dedupe import normalize_amount
from ..schemas.transaction import CanonicalEntry, TransactionType


class StateStoreError(Exception):
    """Raised when a record cannot be persisted."""

    pass


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class StoredTransaction:
    """A persisted transaction."""

    id: int
    owner_id: str
    date: str  # YYYY-MM-DD
    description: str
    category: str
    type: TransactionType
    amount: Decimal
    created_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "StoredTransaction":
        """Create from database row."""
        return cls(
            id=row["id"],
            owner_id=row["owner_id"],
            date=row["date"],
            description=row["description"],
            category=row["category"],
            type=TransactionType(row["type"]),
            amount=Decimal(row["amount"]),
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "description": self.description,
            "category": self.category,
            "type": self.type.value,
            "amount": str(self.amount),
        }


@dataclass
class ImportRunRecord:
    """Audit record of one statement import."""

    id: int
    owner_id: str
    source_name: str
    file_hash: str | None
    strategy: str | None
    total_read: int
    inserted: int
    skipped: int
    created_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "ImportRunRecord":
        """Create from database row."""
        return cls(
            id=row["id"],
            owner_id=row["owner_id"],
            source_name=row["source_name"],
            file_hash=row["file_hash"],
            strategy=row["strategy"],
            total_read=row["total_read"],
            inserted=row["inserted"],
            skipped=row["skipped"],
            created_at=row["created_at"],
        )


class StateStore:
    """
    SQLite-based store for imported transactions.

    Every query is scoped by owner id. There is no locking across
    concurrent imports of the same owner.
    """

    def __init__(self, db_path: Path | str):
        """
        Initialize state store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS transactions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id TEXT NOT NULL,
                    date TEXT NOT NULL,  -- YYYY-MM-DD
                    description TEXT NOT NULL,
                    category TEXT NOT NULL,
                    type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
                    amount TEXT NOT NULL CHECK (CAST(amount AS REAL) > 0),  -- canonical decimal text
                    created_at TEXT NOT NULL
                )
            """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_transactions_owner_date
                ON transactions(owner_id, date)
            """
            )

            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS import_runs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id TEXT NOT NULL,
                    source_name TEXT NOT NULL,
                    file_hash TEXT,
                    strategy TEXT,
                    total_read INTEGER NOT NULL,
                    inserted INTEGER NOT NULL,
                    skipped INTEGER NOT NULL,
                    created_at TEXT NOT NULL
                )
            """
            )

    # =========================================================================
    # Transactions
    # =========================================================================

    def find_duplicate(
        self,
        owner_id: str,
        description: str,
        amount: Decimal,
        day_start: str,
        day_end: str,
    ) -> StoredTransaction | None:
        """
        Find a stored transaction matching description and amount in a date range.

        Args:
            owner_id: Owner the lookup is scoped to
            description: Exact description
            amount: Amount (compared in canonical form)
            day_start: Inclusive range start (YYYY-MM-DD)
            day_end: Exclusive range end (YYYY-MM-DD)
        """
        with self._transaction() as conn:
            row = conn.execute(
                """
                SELECT * FROM transactions
                WHERE owner_id = ? AND description = ? AND amount = ?
                  AND date >= ? AND date < ?
                ORDER BY id
                LIMIT 1
            """,
                (str(owner_id), description, normalize_amount(amount), day_start, day_end),
            ).fetchone()
        return StoredTransaction.from_row(row) if row else None

    def save_transaction(self, entry: CanonicalEntry, owner_id: str) -> int:
        """
        Persist a canonical entry for an owner.

        Returns:
            ID of the new transaction

        Raises:
            StateStoreError: The entry violates a table constraint or cannot be written
        """
        if entry.amount <= 0:
            raise StateStoreError(f"Amount must be positive, got {entry.amount}")

        try:
            with self._transaction() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO transactions
                    (owner_id, date, description, category, type, amount, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                    (
                        str(owner_id),
                        entry.date.isoformat(),
                        entry.description,
                        entry.category,
                        TransactionType(entry.type).value,
                        normalize_amount(entry.amount),
                        _now(),
                    ),
                )
                return cursor.lastrowid
        except (sqlite3.Error, ValueError) as e:
            raise StateStoreError(f"Could not save transaction {entry.description!r}: {e}") from e

    def list_transactions(
        self,
        owner_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[StoredTransaction]:
        """List an owner's transactions in date order, optionally within [start, end]."""
        query = "SELECT * FROM transactions WHERE owner_id = ?"
        params: list[Any] = [str(owner_id)]
        if start:
            query += " AND date >= ?"
            params.append(start.isoformat())
        if end:
            query += " AND date <= ?"
            params.append(end.isoformat())
        query += " ORDER BY date, id"

        with self._transaction() as conn:
            rows = conn.execute(query, params).fetchall()
        return [StoredTransaction.from_row(row) for row in rows]

    def count_transactions(self, owner_id: str | None = None) -> int:
        """Count stored transactions, for one owner or overall."""
        with self._transaction() as conn:
            if owner_id is None:
                row = conn.execute("SELECT COUNT(*) FROM transactions").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) FROM transactions WHERE owner_id = ?", (str(owner_id),)
                ).fetchone()
        return row[0]

    # =========================================================================
    # Import runs
    # =========================================================================

    def record_import_run(
        self,
        owner_id: str,
        source_name: str,
        total_read: int,
        inserted: int,
        skipped: int,
        file_hash: str | None = None,
        strategy: str | None = None,
    ) -> int:
        """Store an audit row for an import. Returns its ID."""
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO import_runs
                (owner_id, source_name, file_hash, strategy, total_read, inserted, skipped, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    str(owner_id),
                    source_name,
                    file_hash,
                    strategy,
                    total_read,
                    inserted,
                    skipped,
                    _now(),
                ),
            )
            return cursor.lastrowid

    def list_import_runs(self, owner_id: str | None = None, limit: int = 20) -> list[ImportRunRecord]:
        """Most recent import runs first."""
        with self._transaction() as conn:
            if owner_id is None:
                rows = conn.execute(
                    "SELECT * FROM import_runs ORDER BY id DESC LIMIT ?", (limit,)
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM import_runs WHERE owner_id = ? ORDER BY id DESC LIMIT ?",
                    (str(owner_id), limit),
                ).fetchall()
        return [ImportRunRecord.from_row(row) for row in rows]

    def get_stats(self) -> dict[str, int]:
        """Get statistics about stored data."""
        with self._transaction() as conn:
            stats = {
                "transactions_total": conn.execute("SELECT COUNT(*) FROM transactions").fetchone()[0],
                "owners_total": conn.execute(
                    "SELECT COUNT(DISTINCT owner_id) FROM transactions"
                ).fetchone()[0],
                "import_runs_total": conn.execute("SELECT COUNT(*) FROM import_runs").fetchone()[0],
            }
            by_type = conn.execute(
                "SELECT type, COUNT(*) as count FROM transactions GROUP BY type"
            ).fetchall()
            for row in by_type:
                stats[f"transactions_{row['type']}"] = row["count"]
        return stats
