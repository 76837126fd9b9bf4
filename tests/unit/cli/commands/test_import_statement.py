"""Unit tests for import-statement command."""

from decimal import Decimal

import pytest
from click.testing import CliRunner

from invoice_engine.cli import cli
from invoice_engine.models import EntryType
from invoice_engine.readers.snapshot_reader import SnapshotReader

REPLY = """I found these charges:
[{"date": "2024-05-03", "description": "Adobe", "amount": 54.99},
 {"date": "2024-05-08", "description": "Fonts", "amount": "-20"}]"""


class TestImportStatementCommand:
    """Test suite for import-statement command."""

    @pytest.fixture
    def runner(self):
        """Create a Click CLI test runner."""
        return CliRunner()

    @pytest.fixture
    def reply_file(self, tmp_path):
        path = tmp_path / "reply.txt"
        path.write_text(REPLY, encoding="utf-8")
        return path

    def test_imports_expenses(self, runner, mock_env, snapshot_file, reply_file):
        result = runner.invoke(
            cli, ["import-statement", "--reply", str(reply_file), "--project", "p1"]
        )

        assert result.exit_code == 0, result.output
        assert "Imported 2 expense(s) into project p1" in result.output

        entries = SnapshotReader(snapshot_file).read().entries
        assert len(entries) == 4
        imported = entries[2:]
        assert all(e.type == EntryType.EXPENSE for e in imported)
        assert [e.cost for e in imported] == [Decimal("54.99"), Decimal("20")]
        assert all(e.markup_percent == Decimal("20") for e in imported)

    def test_markup_option(self, runner, mock_env, snapshot_file, reply_file):
        result = runner.invoke(
            cli,
            [
                "import-statement",
                "--reply",
                str(reply_file),
                "--project",
                "p1",
                "--markup",
                "15",
            ],
        )

        assert result.exit_code == 0, result.output
        entries = SnapshotReader(snapshot_file).read().entries
        assert entries[-1].markup_percent == Decimal("15")

    def test_dry_run(self, runner, mock_env, snapshot_file, reply_file):
        before = snapshot_file.read_text(encoding="utf-8")
        result = runner.invoke(
            cli,
            ["import-statement", "--reply", str(reply_file), "--project", "p1",
             "--dry-run"],
        )

        assert result.exit_code == 0
        assert "Dry run: 2 transaction(s) parsed" in result.output
        assert snapshot_file.read_text(encoding="utf-8") == before

    def test_unknown_project(self, runner, mock_env, snapshot_file, reply_file):
        result = runner.invoke(
            cli, ["import-statement", "--reply", str(reply_file), "--project", "p9"]
        )
        assert result.exit_code == 3
        assert "Unknown project: p9" in result.output

    def test_negative_markup(self, runner, mock_env, snapshot_file, reply_file):
        result = runner.invoke(
            cli,
            ["import-statement", "--reply", str(reply_file), "--project", "p1",
             "--markup=-5"],
        )
        assert result.exit_code == 3

    def test_reply_without_array(self, runner, mock_env, snapshot_file, tmp_path):
        reply = tmp_path / "reply.txt"
        reply.write_text("Sorry, I could not read that statement.", encoding="utf-8")

        result = runner.invoke(
            cli, ["import-statement", "--reply", str(reply), "--project", "p1"]
        )

        assert result.exit_code == 3
        assert "no JSON array" in result.output
