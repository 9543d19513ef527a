"""Services layer for the statement importer."""

from spend_tracker.services.importer import (
    StatementImporter,
    insert_entries,
    rows_from_extraction,
)

__all__ = [
    "StatementImporter",
    "insert_entries",
    "rows_from_extraction",
]
