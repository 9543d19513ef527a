"""
CLI main entry point.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from ..config import Config, create_default_config, load_config
from ..extractors import ExtractionError, UnsupportedFileType
from ..services.importer import StatementImporter
from ..state_store import StateStore

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="spend-tracker",
        description="Import bank statements (spreadsheet, PDF, photo) into the spend tracker",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # import command
    import_parser = subparsers.add_parser("import", help="Import a statement file for an owner")
    import_parser.add_argument("file", type=Path, help="Statement file (.xls .xlsx .pdf .jpg .jpeg .png)")
    import_parser.add_argument(
        "--owner",
        type=str,
        required=True,
        help="Owner id the transactions belong to",
    )

    # preview command
    preview_parser = subparsers.add_parser(
        "preview", help="Show the entries a statement would produce, without storing"
    )
    preview_parser.add_argument("file", type=Path, help="Statement file")

    # status command
    status_parser = subparsers.add_parser("status", help="Show stored transactions and recent imports")
    status_parser.add_argument(
        "--owner",
        type=str,
        help="Limit to one owner id",
    )

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the upload web service")
    serve_parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the web server (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the web server (default: 8000)",
    )

    # init-config command
    subparsers.add_parser("init-config", help="Write a default config file")

    return parser


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_import(config: Config, file_path: Path, owner_id: str) -> int:
    """Import a local statement file. The file is left in place."""
    if not file_path.exists():
        print(f"❌ File not found: {file_path}")
        return 1

    importer = StatementImporter.from_config(config)
    try:
        result = importer.import_file(
            file_path,
            file_path.suffix,
            owner_id=owner_id,
            source_name=file_path.name,
        )
    except UnsupportedFileType as e:
        print(f"❌ Unsupported file type: {e.extension or '(none)'}")
        return 1
    except ExtractionError as e:
        logger.error("Extraction failed: %s", e)
        print(f"❌ Could not read {file_path.name}: {e}")
        return 1

    _print_json({"message": "Import complete", **result.to_dict()})
    return 0


def cmd_preview(config: Config, file_path: Path) -> int:
    """Print the normalized entries of a statement file as JSON."""
    if not file_path.exists():
        print(f"❌ File not found: {file_path}")
        return 1

    importer = StatementImporter.from_config(config)
    try:
        entries = importer.preview(file_path, file_path.suffix)
    except UnsupportedFileType as e:
        print(f"❌ Unsupported file type: {e.extension or '(none)'}")
        return 1
    except ExtractionError as e:
        print(f"❌ Could not read {file_path.name}: {e}")
        return 1

    _print_json([entry.to_dict() for entry in entries])
    return 0


def cmd_status(config: Config, owner_id: str | None = None) -> int:
    """Show store status."""
    store = StateStore(config.state_db_path)
    stats = store.get_stats()

    print("\n📊 Spend Tracker Status")
    print("=" * 40)
    if owner_id is not None:
        print(f"  Transactions (owner {owner_id}): {store.count_transactions(owner_id)}")
    else:
        print(f"  Transactions total:     {stats['transactions_total']}")
        print(f"  Income entries:         {stats.get('transactions_income', 0)}")
        print(f"  Expense entries:        {stats.get('transactions_expense', 0)}")
        print(f"  Owners:                 {stats['owners_total']}")
    print(f"  Import runs total:      {stats['import_runs_total']}")

    runs = store.list_import_runs(owner_id=owner_id, limit=10)
    if runs:
        print("\n  Recent imports:")
        for run in runs:
            print(
                f"    {run.created_at[:19]}  {run.source_name}  "
                f"[{run.strategy or '-'}] read={run.total_read} "
                f"inserted={run.inserted} skipped={run.skipped}"
            )
    print()

    return 0


def cmd_serve(config: Config, config_path: Path, host: str = "127.0.0.1", port: int = 8000) -> int:
    """Start the upload web service."""
    from ..web.app import run_server

    print("🌐 Starting import web service...")

    try:
        run_server(host=host, port=port, config_path=str(config_path))
    except KeyboardInterrupt:
        print("\n✓ Server stopped")

    return 0


def cmd_init_config(config_path: Path) -> int:
    """Write a default config file unless one exists."""
    if config_path.exists():
        print(f"❌ Config already exists: {config_path}")
        return 1

    create_default_config(config_path)
    print(f"✓ Wrote default config to {config_path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config)

    # Load config
    try:
        config = load_config(parsed.config)
    except Exception as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"❌ Config error: {error}")
        return 1

    # Route to command
    if parsed.command == "import":
        return cmd_import(config, parsed.file, parsed.owner)
    elif parsed.command == "preview":
        return cmd_preview(config, parsed.file)
    elif parsed.command == "status":
        return cmd_status(config, parsed.owner)
    elif parsed.command == "serve":
        return cmd_serve(config, parsed.config, parsed.host, parsed.port)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
