"""
Schemas and pure normalizers (SSOT for transaction shapes).

Provides:
- RawRow / CanonicalEntry / ImportResult
- Field normalizers for dates, amounts and types
- Duplicate detection keys
"""

from .dedupe import compute_file_hash, day_window, normalize_amount
from .fields import extract_amount, fix_type, parse_flexible_date
from .transaction import (
    DEFAULT_ENTRY_TYPE,
    CanonicalEntry,
    ImportResult,
    RawRow,
    SkippedEntry,
    SkipReason,
    TransactionType,
)

__all__ = [
    "CanonicalEntry",
    "DEFAULT_ENTRY_TYPE",
    "ImportResult",
    "RawRow",
    "SkippedEntry",
    "SkipReason",
    "TransactionType",
    "compute_file_hash",
    "day_window",
    "extract_amount",
    "fix_type",
    "normalize_amount",
    "parse_flexible_date",
]
