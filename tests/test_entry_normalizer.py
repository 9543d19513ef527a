"""Tests for mapping raw rows onto canonical entries."""

from datetime import date
from decimal import Decimal

from spend_tracker.parsing import normalize_entries, normalize_row, parse_text_lines
from spend_tracker.parsing.entry_normalizer import (
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    clean_row,
    resolve_type,
)
from spend_tracker.schemas import CanonicalEntry, TransactionType


class TestNormalizeRow:
    """Tests for normalize_row."""

    def test_canonical_row(self):
        entry = normalize_row(
            {
                "date": "2024-01-05",
                "description": "Groceries",
                "category": "Food",
                "type": "expense",
                "amount": "450",
            }
        )

        assert entry == CanonicalEntry(
            date=date(2024, 1, 5),
            description="Groceries",
            category="Food",
            type=TransactionType.EXPENSE,
            amount=Decimal("450"),
        )

    def test_keys_are_trimmed_and_lowercased(self):
        entry = normalize_row(
            {" Date ": "25 Dec 2024", "DESC": " Dinner ", "Cat": "Food", "Type": "INC", "Amount": "$1,000"}
        )

        assert entry.date == date(2024, 12, 25)
        assert entry.description == "Dinner"
        assert entry.category == "Food"
        assert entry.type is TransactionType.INCOME
        assert entry.amount == Decimal("1000")

    def test_defaults_for_missing_fields(self):
        entry = normalize_row({"date": "2024-01-05", "amount": "450"})

        assert entry.description == DEFAULT_DESCRIPTION == "N/A"
        assert entry.category == DEFAULT_CATEGORY == "Other"
        assert entry.type is TransactionType.EXPENSE

    def test_blank_values_use_defaults(self):
        entry = normalize_row({"date": "2024-01-05", "description": "  ", "category": "", "amount": "1"})

        assert entry.description == "N/A"
        assert entry.category == "Other"

    def test_unknown_type_defaults_to_expense(self):
        entry = normalize_row({"date": "2024-01-05", "type": "transfer", "amount": "10"})
        assert entry.type is TransactionType.EXPENSE

    def test_structured_date(self):
        entry = normalize_row({"date": date(2024, 1, 5), "amount": "10"})
        assert entry.date == date(2024, 1, 5)

    def test_bad_date_dropped(self):
        assert normalize_row({"date": "yesterday", "amount": "450"}) is None
        assert normalize_row({"amount": "450"}) is None

    def test_non_positive_amount_dropped(self):
        assert normalize_row({"date": "2024-01-05", "amount": "0"}) is None
        assert normalize_row({"date": "2024-01-05", "amount": "-20"}) is None
        assert normalize_row({"date": "2024-01-05", "amount": "n/a"}) is None
        assert normalize_row({"date": "2024-01-05"}) is None


class TestNormalizeEntries:
    """Tests for normalize_entries."""

    def test_spreadsheet_rows_map_one_to_one(self, sample_rows):
        entries = normalize_entries(sample_rows)

        assert len(entries) == len(sample_rows)
        for row, entry in zip(sample_rows, entries):
            assert entry.date.isoformat() == row["date"]
            assert entry.description == row["description"]
            assert entry.category == row["category"]
            assert entry.type.value == row["type"]
            assert entry.amount == Decimal(row["amount"])

    def test_order_preserved_and_invalid_dropped(self):
        rows = [
            {"date": "2024-01-03", "description": "c", "amount": "3"},
            {"date": "bad", "description": "x", "amount": "3"},
            {"date": "2024-01-01", "description": "a", "amount": "1"},
            {"date": "2024-01-02", "description": "y", "amount": "0"},
        ]

        entries = normalize_entries(rows)
        assert [e.description for e in entries] == ["c", "a"]

    def test_parsed_text_to_entries(self, sample_labeled_text):
        entries = normalize_entries(parse_text_lines(sample_labeled_text))

        assert entries == [
            CanonicalEntry(
                date=date(2024, 12, 25),
                description="Christmas Dinner",
                category="Food",
                type=TransactionType.EXPENSE,
                amount=Decimal("2500"),
            ),
            CanonicalEntry(
                date=date(2024, 12, 26),
                description="Taxi",
                category="Travel",
                type=TransactionType.EXPENSE,
                amount=Decimal("350"),
            ),
        ]

    def test_amount_only_record_gets_defaults(self):
        entries = normalize_entries(parse_text_lines("date=2024-01-05\namount=450"))

        assert len(entries) == 1
        assert entries[0].description == "N/A"
        assert entries[0].category == "Other"
        assert entries[0].type is TransactionType.EXPENSE


class TestHelpers:
    def test_clean_row_skips_none(self):
        assert clean_row({"A ": None, " B": " x "}) == {"b": "x"}

    def test_resolve_type(self):
        assert resolve_type("incom") is TransactionType.INCOME
        assert resolve_type("") is TransactionType.EXPENSE
        assert resolve_type(None) is TransactionType.EXPENSE
