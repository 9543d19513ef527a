"""
State Store (SQLite-based).

Lightweight persistent DB for tracking:
- Imported transactions, scoped by owner
- Import runs (audit trail)
"""

from .sqlite_store import (
    ImportRunRecord,
    StateStore,
    StateStoreError,
    StoredTransaction,
)

__all__ = [
    "ImportRunRecord",
    "StateStore",
    "StateStoreError",
    "StoredTransaction",
]
