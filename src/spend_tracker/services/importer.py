"""Statement import service.

Runs the whole import for one uploaded file:

    extension check → extraction → line parsing → normalization → insertion

Insertion is strictly sequential so that an entry inserted earlier in a
batch is seen by the duplicate check of later entries in the same batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from spend_tracker.extractors import ExtractionResult, ExtractorRouter
from spend_tracker.parsing import normalize_entries, parse_text_lines
from spend_tracker.schemas.dedupe import compute_file_hash, day_window
from spend_tracker.schemas.transaction import (
    CanonicalEntry,
    ImportResult,
    RawRow,
    SkipReason,
)
from spend_tracker.state_store import StateStore, StateStoreError

if TYPE_CHECKING:
    from spend_tracker.config import Config

logger = logging.getLogger(__name__)


def insert_entries(
    store: StateStore,
    entries: Iterable[CanonicalEntry],
    owner_id: str,
) -> ImportResult:
    """Insert entries for an owner, skipping ones already stored.

    An entry is a duplicate when the owner already has a transaction with
    the same description and amount on the same calendar day. A failed
    save is recorded as SaveFailed and the batch continues.

    Args:
        store: State store to check and write.
        entries: Canonical entries, inserted in order.
        owner_id: Owner of the new transactions.

    Returns:
        ImportResult with counts and skipped entries.
    """
    result = ImportResult()

    for entry in entries:
        result.total_read += 1
        day_start, day_end = day_window(entry.date)

        existing = store.find_duplicate(
            owner_id=owner_id,
            description=entry.description,
            amount=entry.amount,
            day_start=day_start,
            day_end=day_end,
        )
        if existing is not None:
            logger.debug(
                "Duplicate of transaction %d: %s %s %s",
                existing.id,
                entry.date,
                entry.description,
                entry.amount,
            )
            result.skip(entry, SkipReason.DUPLICATE)
            continue

        try:
            store.save_transaction(entry, owner_id)
        except StateStoreError as e:
            logger.warning("Save failed for %s %s: %s", entry.date, entry.description, e)
            result.skip(entry, SkipReason.SAVE_FAILED)
            continue

        result.inserted += 1

    return result


def rows_from_extraction(extraction: ExtractionResult) -> list[RawRow]:
    """Table rows pass through; text goes through the line parser."""
    if extraction.rows is not None:
        return extraction.rows
    return list(parse_text_lines(extraction.text or ""))


class StatementImporter:
    """Import pipeline for statement files.

    The caller owns the file on disk: the web view deletes uploads after
    the import, the CLI leaves local files alone.
    """

    def __init__(self, store: StateStore, router: ExtractorRouter) -> None:
        """Initialize the importer.

        Args:
            store: State store receiving the transactions.
            router: Extraction strategies per file type.
        """
        self.store = store
        self.router = router

    @classmethod
    def from_config(cls, config: Config, store: StateStore | None = None) -> StatementImporter:
        """Build an importer with the default extractors."""
        config.imports.ensure_upload_dir()
        return cls(
            store=store or StateStore(config.state_db_path),
            router=ExtractorRouter.from_config(config),
        )

    def is_supported(self, extension: str) -> bool:
        """Check whether a file extension can be imported."""
        return self.router.is_supported(extension)

    def read_entries(self, file_path: Path | str, extension: str) -> tuple[list[CanonicalEntry], str]:
        """Extract, parse and normalize a statement without storing anything.

        Returns:
            (canonical entries, name of the extraction strategy used)

        Raises:
            UnsupportedFileType: Extension is not importable.
            ExtractionError: No strategy could read the file.
        """
        extraction = self.router.extract(file_path, extension)
        rows = rows_from_extraction(extraction)
        entries = normalize_entries(rows)
        logger.info(
            "Parsed %d rows into %d entries from %s (%s)",
            len(rows),
            len(entries),
            Path(file_path).name,
            extraction.strategy,
        )
        return entries, extraction.strategy

    def preview(self, file_path: Path | str, extension: str) -> list[CanonicalEntry]:
        """Return the entries an import would insert, without inserting."""
        entries, _strategy = self.read_entries(file_path, extension)
        return entries

    def import_file(
        self,
        file_path: Path | str,
        extension: str,
        owner_id: str,
        source_name: str | None = None,
    ) -> ImportResult:
        """Import one statement file for an owner.

        Args:
            file_path: Path to the file on local storage.
            extension: Declared extension of the original upload.
            owner_id: Owner of the imported transactions.
            source_name: Original file name, for the audit trail.

        Returns:
            ImportResult for the batch.
        """
        file_path = Path(file_path)
        extension = self.router.ensure_supported(extension)

        entries, strategy = self.read_entries(file_path, extension)
        result = insert_entries(self.store, entries, owner_id)

        self.store.record_import_run(
            owner_id=owner_id,
            source_name=source_name or file_path.name,
            file_hash=compute_file_hash(file_path),
            strategy=strategy,
            total_read=result.total_read,
            inserted=result.inserted,
            skipped=result.skipped,
        )
        logger.info(
            "Imported %s for owner %s: %d read, %d inserted, %d skipped",
            source_name or file_path.name,
            owner_id,
            result.total_read,
            result.inserted,
            result.skipped,
        )
        return result
