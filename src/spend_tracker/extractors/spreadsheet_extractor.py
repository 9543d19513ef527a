"""
Spreadsheet extractor.

Reads the first sheet of an .xls/.xlsx workbook. The header row becomes the
keys of each RawRow, so this path never goes through the line parser.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd

from ..schemas.transaction import RawRow
from .base import BaseExtractor, ExtractionResult


def cell_to_text(value: Any) -> str | None:
    """
    Render a spreadsheet cell as text.

    Date cells become YYYY-MM-DD, whole floats lose their ".0", empty
    cells (None/NaN/NaT) become None.
    """
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value).strip()
    return text or None


def record_to_row(record: dict[Any, Any]) -> RawRow:
    """Convert a pandas record to a RawRow, omitting empty cells."""
    row: RawRow = {}
    for key, value in record.items():
        text = cell_to_text(value)
        if text is not None:
            row[str(key).strip()] = text
    return row


class SpreadsheetExtractor(BaseExtractor):
    """Read transaction rows directly from the first worksheet."""

    @property
    def name(self) -> str:
        return "spreadsheet"

    @property
    def priority(self) -> int:
        return 100

    @property
    def extensions(self) -> tuple[str, ...]:
        return (".xls", ".xlsx")

    def extract(self, file_path: Path) -> ExtractionResult:
        try:
            frame = pd.read_excel(file_path, sheet_name=0)
        except Exception as e:
            # pandas surfaces openpyxl/xlrd/zipfile errors unchanged
            return ExtractionResult.failure(self.name, f"Could not read workbook: {e}")

        rows = [record_to_row(record) for record in frame.to_dict(orient="records")]
        return ExtractionResult(strategy=self.name, rows=[row for row in rows if row])
