"""
Extractor router - chooses and applies extraction strategies.
"""

import logging
from pathlib import Path

from ..config import SUPPORTED_EXTENSIONS, Config, normalize_extension
from .base import BaseExtractor, ExtractionError, ExtractionResult, UnsupportedFileType
from .ocr_extractor import (
    ImageOcrExtractor,
    OcrEngine,
    PageRenderer,
    Pdf2ImageRenderer,
    ScannedPdfOcrExtractor,
    TesseractEngine,
)
from .pdf_text_extractor import PdfTextExtractor
from .spreadsheet_extractor import SpreadsheetExtractor

logger = logging.getLogger(__name__)


class ExtractorRouter:
    """
    Routes extraction to the appropriate strategy.

    Tries the extractors registered for a file extension in priority order:
    1. Spreadsheet table read (.xls, .xlsx)
    2. Embedded PDF text (.pdf)
    3. OCR of rendered PDF pages (.pdf) or of the image itself (.jpg, .png)

    The first sufficient result wins. ExtractionError is raised only when
    every strategy for the extension failed.
    """

    def __init__(
        self,
        extractors: list[BaseExtractor],
        allowed_extensions: tuple[str, ...] = SUPPORTED_EXTENSIONS,
    ):
        self.extractors = sorted(extractors, key=lambda e: -e.priority)
        self.allowed_extensions = tuple(normalize_extension(ext) for ext in allowed_extensions)

    @classmethod
    def from_config(
        cls,
        config: Config,
        engine: OcrEngine | None = None,
        renderer: PageRenderer | None = None,
    ) -> "ExtractorRouter":
        """Build the default strategy set from configuration."""
        ocr = config.ocr
        engine = engine or TesseractEngine(language=ocr.language, tesseract_cmd=ocr.tesseract_cmd)
        renderer = renderer or Pdf2ImageRenderer(
            dpi=ocr.dpi, width=ocr.page_width, height=ocr.page_height
        )
        return cls(
            extractors=[
                SpreadsheetExtractor(),
                PdfTextExtractor(min_text_chars=ocr.min_text_chars),
                ScannedPdfOcrExtractor(engine, renderer, work_dir=config.imports.upload_dir),
                ImageOcrExtractor(engine),
            ],
            allowed_extensions=config.imports.allowed_extensions,
        )

    def is_supported(self, extension: str) -> bool:
        """Check whether an extension is accepted for import."""
        extension = normalize_extension(extension)
        return extension in self.allowed_extensions and any(
            e.can_extract(extension) for e in self.extractors
        )

    def ensure_supported(self, extension: str) -> str:
        """Return the normalized extension or raise UnsupportedFileType."""
        normalized = normalize_extension(extension)
        if not self.is_supported(normalized):
            raise UnsupportedFileType(normalized)
        return normalized

    def extract(self, file_path: Path | str, extension: str) -> ExtractionResult:
        """
        Extract rows or text from a statement file.

        Args:
            file_path: Path to the file on local storage
            extension: Declared file extension (e.g. ".pdf")

        Returns:
            The first sufficient ExtractionResult

        Raises:
            UnsupportedFileType: No strategy handles the extension
            ExtractionError: Every strategy failed
        """
        extension = self.ensure_supported(extension)
        file_path = Path(file_path)

        last_result: ExtractionResult | None = None
        errors: list[str] = []

        for extractor in self.extractors:
            if not extractor.can_extract(extension):
                continue

            result = extractor.extract(file_path)
            if extractor.is_sufficient(result):
                logger.info(
                    "Extracted %s with %s (%s)",
                    file_path.name,
                    extractor.name,
                    f"{len(result.rows)} rows" if result.rows is not None else f"{len(result.text or '')} chars",
                )
                return result

            if result.failed:
                errors.append(f"{extractor.name}: {result.error}")
                logger.warning("Extractor %s failed for %s: %s", extractor.name, file_path.name, result.error)
            else:
                last_result = result
                logger.warning(
                    "Extractor %s produced too little content for %s, trying next strategy",
                    extractor.name,
                    file_path.name,
                )

        # Thin but successful output beats no output at all
        if last_result is not None:
            return last_result

        raise ExtractionError(f"All extraction strategies failed for {file_path.name}: " + "; ".join(errors))
