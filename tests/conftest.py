"""Test fixtures and utilities."""

from pathlib import Path

import pytest

# Statement text as it comes out of a PDF text layer
SAMPLE_STATEMENT_TEXT = """
ACME BANK - Account Statement
Period: December 2024

2024-12-01 Salary December Salary income 50000
2024-12-03 Grocery Shopping Food expense 450
2024-12-05, Electricity Bill, Utilities, expense, 1200

Page 1 of 1
"""

# OCR of a hand-written expense log with labeled fields
SAMPLE_LABELED_TEXT = """
Date: 25 Dec 2024
Description: Christmas Dinner
Category: Food
Type: expnse
Amount: ₹2,500

date=2024-12-26 description=Taxi category=Travel type=exp amount=350
"""

SAMPLE_ROWS = [
    {"date": "2024-12-01", "description": "Salary", "category": "Salary", "type": "income", "amount": "50000"},
    {"date": "2024-12-03", "description": "Groceries", "category": "Food", "type": "expense", "amount": "450"},
    {"date": "2024-12-05", "description": "Electricity", "category": "Utilities", "type": "expense", "amount": "1200.50"},
]


@pytest.fixture
def sample_statement_text() -> str:
    """Statement text with space separated and delimited lines."""
    return SAMPLE_STATEMENT_TEXT


@pytest.fixture
def sample_labeled_text() -> str:
    """Statement text with labeled fields."""
    return SAMPLE_LABELED_TEXT


@pytest.fixture
def sample_rows() -> list[dict]:
    """Spreadsheet-style rows with canonical headers."""
    return [dict(row) for row in SAMPLE_ROWS]


@pytest.fixture
def temp_db(tmp_path) -> Path:
    """Temporary database path for testing."""
    return tmp_path / "test_state.db"


@pytest.fixture
def sample_xlsx(tmp_path) -> Path:
    """Workbook with a header row and three transactions."""
    import pandas as pd

    path = tmp_path / "statement.xlsx"
    pd.DataFrame(SAMPLE_ROWS).to_excel(path, index=False)
    return path


@pytest.fixture
def sample_text_file(tmp_path) -> Path:
    """Dummy PDF bytes; tests pair it with a stubbed text extractor."""
    path = tmp_path / "statement.pdf"
    path.write_bytes(b"%PDF-1.4\n% test statement\n")
    return path
