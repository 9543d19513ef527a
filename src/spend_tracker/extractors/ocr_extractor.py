"""
OCR extractors.

Used for photographed statements and as the fallback for PDFs without a
usable text layer. The OCR engine and the PDF page renderer are
collaborators behind small protocols so they can be swapped in tests.

Scanned PDFs are processed one page at a time, in page order. Each page
bitmap is deleted right after recognition, also when recognition fails.
"""

import logging
import uuid
from pathlib import Path
from typing import Protocol

import pdfplumber
import pytesseract
from pdf2image import convert_from_path, pdfinfo_from_path
from PIL import Image

from .base import BaseExtractor, ExtractionResult

logger = logging.getLogger(__name__)

# Prefix for temporary page bitmaps in the work directory
TEMP_PAGE_PREFIX = "ocr_temp"


class OcrEngine(Protocol):
    """Turns an image file into recognized text."""

    def recognize(self, image_path: Path) -> str: ...


class PageRenderer(Protocol):
    """Renders single PDF pages to bitmap files."""

    def page_count(self, pdf_path: Path) -> int: ...

    def render(self, pdf_path: Path, page_number: int, output_dir: Path) -> Path: ...


class TesseractEngine:
    """OCR engine backed by the tesseract binary via pytesseract."""

    def __init__(self, language: str = "eng", tesseract_cmd: str | None = None):
        self.language = language
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image_path: Path) -> str:
        with Image.open(image_path) as image:
            return pytesseract.image_to_string(image, lang=self.language)


class Pdf2ImageRenderer:
    """Page renderer backed by poppler via pdf2image."""

    def __init__(self, dpi: int = 150, width: int = 1200, height: int = 1600):
        self.dpi = dpi
        self.width = width
        self.height = height

    def page_count(self, pdf_path: Path) -> int:
        """
        Count pages, preferring pdfplumber and falling back to pdfinfo.

        pdfinfo copes with some files pdfminer refuses to parse.
        """
        try:
            with pdfplumber.open(pdf_path) as pdf:
                return len(pdf.pages) or 1
        except Exception as e:
            logger.debug("pdfplumber could not count pages of %s (%s), using pdfinfo", pdf_path, e)

        info = pdfinfo_from_path(str(pdf_path))
        return int(info.get("Pages", 1)) or 1

    def render(self, pdf_path: Path, page_number: int, output_dir: Path) -> Path:
        paths = convert_from_path(
            str(pdf_path),
            dpi=self.dpi,
            first_page=page_number,
            last_page=page_number,
            size=(self.width, self.height),
            fmt="png",
            output_folder=str(output_dir),
            output_file=f"{TEMP_PAGE_PREFIX}_{uuid.uuid4().hex}",
            paths_only=True,
        )
        if not paths:
            raise RuntimeError(f"pdf2image rendered no image for page {page_number}")
        return Path(paths[0])


class ImageOcrExtractor(BaseExtractor):
    """OCR a photographed or scanned statement image as-is."""

    def __init__(self, engine: OcrEngine):
        self.engine = engine

    @property
    def name(self) -> str:
        return "image_ocr"

    @property
    def priority(self) -> int:
        return 10

    @property
    def extensions(self) -> tuple[str, ...]:
        return (".jpg", ".jpeg", ".png")

    def extract(self, file_path: Path) -> ExtractionResult:
        try:
            text = self.engine.recognize(Path(file_path))
        except Exception as e:
            return ExtractionResult.failure(self.name, f"OCR failed: {e}")
        return ExtractionResult(strategy=self.name, text=text, page_count=1)


class ScannedPdfOcrExtractor(BaseExtractor):
    """
    Render each PDF page to a bitmap and OCR it.

    Lowest priority for PDFs: only used when the embedded text layer is
    missing, too short, or unreadable.
    """

    def __init__(self, engine: OcrEngine, renderer: PageRenderer, work_dir: Path):
        self.engine = engine
        self.renderer = renderer
        self.work_dir = Path(work_dir)

    @property
    def name(self) -> str:
        return "pdf_ocr"

    @property
    def priority(self) -> int:
        return 10

    @property
    def extensions(self) -> tuple[str, ...]:
        return (".pdf",)

    def extract(self, file_path: Path) -> ExtractionResult:
        file_path = Path(file_path)
        try:
            page_count = self.renderer.page_count(file_path)
        except Exception as e:
            return ExtractionResult.failure(self.name, f"Could not count PDF pages: {e}")

        self.work_dir.mkdir(parents=True, exist_ok=True)

        chunks: list[str] = []
        failed_pages = 0
        for page_number in range(1, page_count + 1):
            text = self._recognize_page(file_path, page_number)
            if text is None:
                failed_pages += 1
            else:
                chunks.append(text)

        if page_count and failed_pages == page_count:
            return ExtractionResult.failure(self.name, f"OCR failed on all {page_count} pages")

        return ExtractionResult(strategy=self.name, text="\n".join(chunks), page_count=page_count)

    def _recognize_page(self, file_path: Path, page_number: int) -> str | None:
        """OCR one page; returns None when rendering or recognition fails."""
        image_path: Path | None = None
        try:
            image_path = self.renderer.render(file_path, page_number, self.work_dir)
            text = self.engine.recognize(image_path)
            logger.debug("OCR page %d of %s: %d characters", page_number, file_path.name, len(text))
            return text
        except Exception as e:
            logger.warning("OCR failed for page %d of %s: %s", page_number, file_path.name, e)
            return None
        finally:
            if image_path is not None:
                image_path.unlink(missing_ok=True)
