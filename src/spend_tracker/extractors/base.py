"""
Base extractor interface and common types.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..schemas.transaction import RawRow


class ExtractionError(Exception):
    """Raised when every extraction strategy for a file failed."""

    pass


class UnsupportedFileType(ValueError):
    """Raised for uploads whose extension has no extraction strategy."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported file type: {extension or '(none)'}")


@dataclass
class ExtractionResult:
    """
    Result from one extraction attempt.

    Exactly one of text/rows is set on success; error is set on failure.
    Strategies report failures here instead of raising.
    """

    strategy: str
    text: str | None = None
    rows: list[RawRow] | None = None
    page_count: int | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def failure(cls, strategy: str, error: str) -> "ExtractionResult":
        """Build a failed result."""
        return cls(strategy=strategy, error=error)


def count_visible_chars(text: str | None) -> int:
    """Number of non-whitespace characters in text."""
    if not text:
        return 0
    return sum(1 for ch in text if not ch.isspace())


class BaseExtractor(ABC):
    """
    Base class for all extractors.

    Each extractor implements a specific strategy:
    - Spreadsheet table read
    - Embedded PDF text
    - OCR of rendered PDF pages or photos
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Extractor name for logging and provenance."""
        pass

    @property
    @abstractmethod
    def priority(self) -> int:
        """
        Priority for extractor selection.
        Higher = tried first.
        """
        pass

    @property
    @abstractmethod
    def extensions(self) -> tuple[str, ...]:
        """Lowercase file extensions (with dot) this extractor handles."""
        pass

    def can_extract(self, extension: str) -> bool:
        """Check if this extractor handles the given file extension."""
        return extension.lower() in self.extensions

    @abstractmethod
    def extract(self, file_path: Path) -> ExtractionResult:
        """
        Extract rows or text from a file.

        Args:
            file_path: Path to the file on local storage

        Returns:
            ExtractionResult; failures are reported, not raised
        """
        pass

    def is_sufficient(self, result: ExtractionResult) -> bool:
        """Whether a result is good enough to stop trying further strategies."""
        return not result.failed
