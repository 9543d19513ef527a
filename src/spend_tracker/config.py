"""
Configuration management (SSOT).

This module defines ALL configuration for the statement importer.
All config keys are defined here; no other module should invent config keys.

Key invariants:
- Uploaded files and OCR page bitmaps live in imports.upload_dir
- The transaction store and the Django auth DB are separate SQLite files
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

SUPPORTED_EXTENSIONS = (".xls", ".xlsx", ".pdf", ".jpg", ".jpeg", ".png")


def normalize_extension(extension: str) -> str:
    """Lowercase an extension and make sure it starts with a dot."""
    extension = (extension or "").strip().lower()
    if extension and not extension.startswith("."):
        extension = f".{extension}"
    return extension


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class OcrConfig:
    """OCR fallback settings.

    Scanned PDF pages are rendered at a fixed resolution and page size before
    recognition. Embedded PDF text with fewer than min_text_chars
    non-whitespace characters is treated as missing.
    """

    language: str = "eng"
    dpi: int = 150
    page_width: int = 1200
    page_height: int = 1600
    min_text_chars: int = 20
    # Explicit tesseract binary (None = use PATH)
    tesseract_cmd: str | None = None


@dataclass
class ImportConfig:
    """Statement upload settings."""

    # Uploaded files and temporary OCR bitmaps
    upload_dir: Path = field(default_factory=lambda: Path("data/uploads"))
    allowed_extensions: tuple[str, ...] = SUPPORTED_EXTENSIONS

    def ensure_upload_dir(self) -> Path:
        """Create the upload directory if needed and return it."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        return self.upload_dir


@dataclass
class Config:
    """Application configuration (SSOT)."""

    ocr: OcrConfig = field(default_factory=OcrConfig)
    imports: ImportConfig = field(default_factory=ImportConfig)
    state_db_path: Path = field(default_factory=lambda: Path("data/state.db"))
    auth_db_path: Path = field(default_factory=lambda: Path("data/auth.db"))

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if self.ocr.dpi <= 0:
            errors.append("ocr.dpi must be positive")
        if self.ocr.page_width <= 0 or self.ocr.page_height <= 0:
            errors.append("ocr.page_width and ocr.page_height must be positive")
        if self.ocr.min_text_chars < 0:
            errors.append("ocr.min_text_chars must not be negative")
        if not self.ocr.language:
            errors.append("ocr.language is required")

        unknown = [ext for ext in self.imports.allowed_extensions if ext not in SUPPORTED_EXTENSIONS]
        if unknown:
            errors.append(f"imports.allowed_extensions has unsupported entries: {unknown}")

        if self.state_db_path == self.auth_db_path:
            errors.append("state_db_path and auth_db_path must differ")

        return errors

    def require_valid(self) -> None:
        """Raise ConfigValidationError if validate() reports problems."""
        errors = self.validate()
        if errors:
            raise ConfigValidationError("; ".join(errors))


def load_config(config_path: Path | str) -> Config:
    """
    Load configuration from YAML file.

    A missing file yields the defaults. Environment variables can override
    config values:
    - SPEND_STATE_DB_PATH
    - SPEND_AUTH_DB_PATH
    - SPEND_UPLOAD_DIR
    - SPEND_OCR_LANGUAGE
    - TESSERACT_CMD
    """
    config_path = Path(config_path)
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    # OCR config
    ocr_data = data.get("ocr", {})
    ocr = OcrConfig(
        language=os.environ.get("SPEND_OCR_LANGUAGE", ocr_data.get("language", "eng")),
        dpi=int(ocr_data.get("dpi", 150)),
        page_width=int(ocr_data.get("page_width", 1200)),
        page_height=int(ocr_data.get("page_height", 1600)),
        min_text_chars=int(ocr_data.get("min_text_chars", 20)),
        tesseract_cmd=os.environ.get("TESSERACT_CMD", ocr_data.get("tesseract_cmd")),
    )

    # Import config
    import_data = data.get("imports", {})
    extensions = import_data.get("allowed_extensions") or SUPPORTED_EXTENSIONS
    imports = ImportConfig(
        upload_dir=Path(
            os.environ.get("SPEND_UPLOAD_DIR", import_data.get("upload_dir", "data/uploads"))
        ),
        allowed_extensions=tuple(normalize_extension(str(ext)) for ext in extensions),
    )

    state_db = os.environ.get("SPEND_STATE_DB_PATH", data.get("state_db_path", "data/state.db"))
    auth_db = os.environ.get("SPEND_AUTH_DB_PATH", data.get("auth_db_path", "data/auth.db"))

    return Config(
        ocr=ocr,
        imports=imports,
        state_db_path=Path(state_db),
        auth_db_path=Path(auth_db),
    )


def create_default_config(config_path: Path | str) -> None:
    """Create a default configuration file."""
    default_config = """# Statement importer configuration
#
# Environment variables override these values:
#   SPEND_STATE_DB_PATH, SPEND_AUTH_DB_PATH, SPEND_UPLOAD_DIR,
#   SPEND_OCR_LANGUAGE, TESSERACT_CMD

# OCR fallback for scanned PDFs and photos
ocr:
  language: "eng"          # Tesseract language pack
  dpi: 150                 # Render resolution for PDF pages
  page_width: 1200         # Rendered page size in pixels
  page_height: 1600
  min_text_chars: 20       # Less embedded PDF text than this triggers OCR
  tesseract_cmd: null      # Path to tesseract binary (null = use PATH)

# Uploads
imports:
  upload_dir: "data/uploads"
  allowed_extensions: [".xls", ".xlsx", ".pdf", ".jpg", ".jpeg", ".png"]

# Transaction store
state_db_path: "data/state.db"

# Django auth/session database
auth_db_path: "data/auth.db"
"""

    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
