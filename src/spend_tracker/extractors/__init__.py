"""
Statement content extractors.

Provides:
- ExtractorRouter: Chooses extraction strategy per file extension
- Spreadsheet extractor (first worksheet → rows)
- Embedded PDF text extractor
- OCR extractors for scanned PDFs and images
- Base classes for custom extractors

Strategies are pluggable and testable.
"""

from .base import (
    BaseExtractor,
    ExtractionError,
    ExtractionResult,
    UnsupportedFileType,
    count_visible_chars,
)
from .ocr_extractor import (
    ImageOcrExtractor,
    OcrEngine,
    PageRenderer,
    Pdf2ImageRenderer,
    ScannedPdfOcrExtractor,
    TesseractEngine,
)
from .pdf_text_extractor import PdfTextExtractor
from .router import ExtractorRouter, normalize_extension
from .spreadsheet_extractor import SpreadsheetExtractor

__all__ = [
    "BaseExtractor",
    "ExtractionError",
    "ExtractionResult",
    "ExtractorRouter",
    "ImageOcrExtractor",
    "OcrEngine",
    "PageRenderer",
    "Pdf2ImageRenderer",
    "PdfTextExtractor",
    "ScannedPdfOcrExtractor",
    "SpreadsheetExtractor",
    "TesseractEngine",
    "UnsupportedFileType",
    "count_visible_chars",
    "normalize_extension",
]
