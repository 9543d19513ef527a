"""
Map loosely keyed rows onto the canonical transaction schema.

Rows whose date cannot be parsed or whose amount is not positive are
dropped; they are never reported individually.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from ..schemas.fields import extract_amount, fix_type, parse_flexible_date
from ..schemas.transaction import DEFAULT_ENTRY_TYPE, CanonicalEntry, TransactionType

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "N/A"
DEFAULT_CATEGORY = "Other"


def clean_row(row: Mapping[Any, Any]) -> dict[str, Any]:
    """
    Lowercase and trim keys; trim text values.

    Date objects are kept as-is so the date field can use them directly.
    """
    cleaned: dict[str, Any] = {}
    for key, value in row.items():
        if value is None:
            continue
        clean_key = str(key).strip().lower()
        cleaned[clean_key] = value if isinstance(value, date) else str(value).strip()
    return cleaned


def resolve_type(token: Any) -> TransactionType:
    """
    Canonical type for a raw type token.

    Blank and unrecognized tokens fall back to DEFAULT_ENTRY_TYPE (expense).
    """
    canonical = fix_type(token) if token else None
    resolved = TransactionType.from_token(canonical)
    if resolved is None:
        if canonical:
            logger.debug("Unrecognized type %r, using %s", token, DEFAULT_ENTRY_TYPE.value)
        return DEFAULT_ENTRY_TYPE
    return resolved


def normalize_row(row: Mapping[Any, Any]) -> CanonicalEntry | None:
    """
    Convert one raw row into a CanonicalEntry.

    Args:
        row: Row from a spreadsheet or the line parser

    Returns:
        CanonicalEntry, or None if the date is unparseable or amount <= 0
    """
    cleaned = clean_row(row)

    date_text = parse_flexible_date(cleaned.get("date"))
    if not date_text:
        logger.debug("Dropping row with unparseable date: %s", cleaned)
        return None

    amount = extract_amount(cleaned.get("amount"))
    if amount <= 0:
        logger.debug("Dropping row with non-positive amount: %s", cleaned)
        return None

    return CanonicalEntry(
        date=date.fromisoformat(date_text),
        description=cleaned.get("desc") or cleaned.get("description") or DEFAULT_DESCRIPTION,
        category=cleaned.get("cat") or cleaned.get("category") or DEFAULT_CATEGORY,
        type=resolve_type(cleaned.get("type")),
        amount=amount,
    )


def normalize_entries(rows: Iterable[Mapping[Any, Any]]) -> list[CanonicalEntry]:
    """Normalize rows in order, dropping invalid ones."""
    entries: list[CanonicalEntry] = []
    read = 0
    for row in rows:
        read += 1
        entry = normalize_row(row)
        if entry is not None:
            entries.append(entry)

    if read != len(entries):
        logger.info("Normalized %d of %d rows (%d dropped)", len(entries), read, read - len(entries))
    return entries
