"""
Canonical transaction objects for the import pipeline.

RawRow is whatever an extraction strategy produced; CanonicalEntry is the
only shape that may reach the state store. ImportResult summarizes one
import call.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

# Loosely keyed row from a spreadsheet or the line parser
RawRow = dict[str, str]


class TransactionType(str, Enum):
    """Direction of money for a spend entry."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_token(cls, token: str | None) -> "TransactionType | None":
        """Return the matching type for an already canonicalized token."""
        for member in cls:
            if member.value == token:
                return member
        return None


# Applied when a row has no usable type token
DEFAULT_ENTRY_TYPE = TransactionType.EXPENSE


class SkipReason(str, Enum):
    """Why an entry was not inserted."""

    DUPLICATE = "Duplicate"
    SAVE_FAILED = "SaveFailed"


@dataclass(frozen=True)
class CanonicalEntry:
    """
    A validated transaction ready for insertion.

    Invariants: amount > 0 and type is a TransactionType.
    """

    date: date
    description: str
    category: str
    type: TransactionType
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "date": self.date.isoformat(),
            "description": self.description,
            "category": self.category,
            "type": self.type.value,
            "amount": str(self.amount),
        }


@dataclass
class SkippedEntry:
    """An entry that was read but not inserted."""

    entry: CanonicalEntry
    reason: SkipReason


@dataclass
class ImportResult:
    """Outcome of inserting a batch of entries for one owner."""

    total_read: int = 0
    inserted: int = 0
    skipped: int = 0
    skipped_entries: list[SkippedEntry] = field(default_factory=list)

    def skip(self, entry: CanonicalEntry, reason: SkipReason) -> None:
        """Record a skipped entry."""
        self.skipped += 1
        self.skipped_entries.append(SkippedEntry(entry=entry, reason=reason))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the response shape used by the upload endpoint and CLI."""
        return {
            "totalRead": self.total_read,
            "inserted": self.inserted,
            "skipped": self.skipped,
            "skippedDetails": [
                {
                    "date": skipped.entry.date.isoformat(),
                    "description": skipped.entry.description,
                    "reason": skipped.reason.value,
                }
                for skipped in self.skipped_entries
            ],
        }
