"""
Embedded PDF text extractor.

Machine-generated statements carry a text layer; scanned ones usually carry
nothing or a few stray characters. Results with too little visible text are
reported as insufficient so the router falls back to OCR.
"""

from pathlib import Path

import pdfplumber

from .base import BaseExtractor, ExtractionResult, count_visible_chars


class PdfTextExtractor(BaseExtractor):
    """Extract the text layer of every page with pdfplumber."""

    def __init__(self, min_text_chars: int = 20):
        self.min_text_chars = min_text_chars

    @property
    def name(self) -> str:
        return "pdf_text"

    @property
    def priority(self) -> int:
        return 50

    @property
    def extensions(self) -> tuple[str, ...]:
        return (".pdf",)

    def extract(self, file_path: Path) -> ExtractionResult:
        try:
            with pdfplumber.open(file_path) as pdf:
                page_texts = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            # pdfminer raises a variety of parser errors for damaged files
            return ExtractionResult.failure(self.name, f"Could not read PDF text: {e}")

        return ExtractionResult(
            strategy=self.name,
            text="\n".join(page_texts),
            page_count=len(page_texts),
        )

    def is_sufficient(self, result: ExtractionResult) -> bool:
        if result.failed:
            return False
        return count_visible_chars(result.text) >= self.min_text_chars
