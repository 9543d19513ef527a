"""Tests for CLI commands."""

import json
from unittest.mock import patch

import pytest

from spend_tracker.runner.main import create_cli, main
from spend_tracker.state_store import StateStore


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Config pointing all paths into tmp_path."""
    for name in ("SPEND_STATE_DB_PATH", "SPEND_AUTH_DB_PATH", "SPEND_UPLOAD_DIR"):
        monkeypatch.delenv(name, raising=False)

    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
imports:
  upload_dir: "{tmp_path / 'uploads'}"
state_db_path: "{tmp_path / 'state.db'}"
auth_db_path: "{tmp_path / 'auth.db'}"
"""
    )
    return path


class TestCLICommandRegistry:
    """Tests for CLI command registration."""

    def test_all_commands_registered(self):
        parser = create_cli()

        subparsers_action = None
        for action in parser._actions:
            if action.dest == "command":
                subparsers_action = action
                break

        assert subparsers_action is not None
        assert set(subparsers_action.choices) == {"import", "preview", "status", "serve", "init-config"}

    def test_import_requires_owner(self):
        parser = create_cli()

        with pytest.raises(SystemExit):
            parser.parse_args(["import", "statement.pdf"])

        args = parser.parse_args(["import", "statement.pdf", "--owner", "42"])
        assert args.owner == "42"
        assert args.file.name == "statement.pdf"

    def test_serve_defaults(self):
        args = create_cli().parse_args(["serve"])
        assert args.host == "127.0.0.1"
        assert args.port == 8000

    def test_no_command_prints_help(self):
        assert main([]) == 1


class TestImportCommand:
    """Tests for import and preview."""

    def test_import_spreadsheet(self, config_file, sample_xlsx, tmp_path, capsys):
        exit_code = main(["-c", str(config_file), "import", str(sample_xlsx), "--owner", "1"])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert output["message"] == "Import complete"
        assert output["inserted"] == 3
        assert sample_xlsx.exists()
        assert StateStore(tmp_path / "state.db").count_transactions("1") == 3

    def test_import_twice_reports_duplicates(self, config_file, sample_xlsx, capsys):
        main(["-c", str(config_file), "import", str(sample_xlsx), "--owner", "1"])
        capsys.readouterr()

        main(["-c", str(config_file), "import", str(sample_xlsx), "--owner", "1"])

        output = json.loads(capsys.readouterr().out)
        assert output["inserted"] == 0
        assert output["skipped"] == 3
        assert {d["reason"] for d in output["skippedDetails"]} == {"Duplicate"}

    def test_import_unsupported_type(self, config_file, tmp_path, capsys):
        path = tmp_path / "notes.txt"
        path.write_text("2024-01-05 Groceries Food expense 450")

        assert main(["-c", str(config_file), "import", str(path), "--owner", "1"]) == 1
        assert "Unsupported file type" in capsys.readouterr().out

    def test_import_missing_file(self, config_file, tmp_path):
        assert main(["-c", str(config_file), "import", str(tmp_path / "nope.pdf"), "--owner", "1"]) == 1

    def test_import_unreadable_file(self, config_file, tmp_path, capsys):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"garbage")

        # Spreadsheets have no fallback strategy
        exit_code = main(["-c", str(config_file), "import", str(path), "--owner", "1"])

        assert exit_code == 1
        assert "Could not read" in capsys.readouterr().out

    def test_preview(self, config_file, sample_xlsx, tmp_path, capsys):
        exit_code = main(["-c", str(config_file), "preview", str(sample_xlsx)])

        entries = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert [e["description"] for e in entries] == ["Salary", "Groceries", "Electricity"]
        assert entries[2]["amount"] == "1200.50"
        assert StateStore(tmp_path / "state.db").count_transactions() == 0


class TestOtherCommands:
    def test_status(self, config_file, sample_xlsx, capsys):
        main(["-c", str(config_file), "import", str(sample_xlsx), "--owner", "1"])
        capsys.readouterr()

        assert main(["-c", str(config_file), "status"]) == 0
        out = capsys.readouterr().out
        assert "Transactions total:     3" in out
        assert "statement.xlsx" in out

        assert main(["-c", str(config_file), "status", "--owner", "2"]) == 0
        assert "Transactions (owner 2): 0" in capsys.readouterr().out

    def test_init_config(self, tmp_path):
        path = tmp_path / "new.yaml"

        assert main(["-c", str(path), "init-config"]) == 0
        assert path.exists()
        assert main(["-c", str(path), "init-config"]) == 1

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("ocr:\n  dpi: 0\n")

        assert main(["-c", str(path), "status"]) == 1
        assert "ocr.dpi" in capsys.readouterr().out

    def test_serve_delegates_to_run_server(self, config_file):
        with patch("spend_tracker.web.app.run_server") as run_server:
            assert main(["-c", str(config_file), "serve", "--port", "9000"]) == 0

        run_server.assert_called_once_with(host="127.0.0.1", port=9000, config_path=str(config_file))

    def test_extensions_without_dot_accepted(self, config_file, sample_xlsx, capsys):
        config_file.write_text(
            config_file.read_text().replace("imports:\n", "imports:\n  allowed_extensions: [xlsx, PDF]\n")
        )

        assert main(["-c", str(config_file), "import", str(sample_xlsx), "--owner", "1"]) == 0
        assert "Config error" not in capsys.readouterr().out
