"""
Tests for the CLI interface.
"""
import os
import tempfile

import pytest
import yaml
from typer.testing import CliRunner

from wordcount_tracker.cli.main import app, EXIT_CODE_PASS, EXIT_CODE_FAIL
from wordcount_tracker.storage.db import get_connection
from wordcount_tracker.storage.repository import WordCountRepository
from wordcount_tracker.storage.schema import MIGRATIONS

runner = CliRunner()


@pytest.fixture
def project():
    """A project directory with two documents and a database path."""
    with tempfile.TemporaryDirectory() as temp_dir:
        docs = os.path.join(temp_dir, "docs")
        os.makedirs(docs)
        with open(os.path.join(docs, "a.txt"), 'w', encoding='utf-8') as f:
            f.write("one two three # not counted\n")
        with open(os.path.join(docs, "b.txt"), 'w', encoding='utf-8') as f:
            f.write("four five\n")
        yield temp_dir


def _db(project):
    return os.path.join(project, "wc.db")


class TestCountCommand:
    """Test the count command."""

    def test_count_reports_totals(self, project):
        """Header and items cover every document."""
        result = runner.invoke(app, [
            "count", os.path.join(project, "docs"), "--database", _db(project)
        ])

        assert result.exit_code == EXIT_CODE_PASS
        assert "Total: 5 Today: 5" in result.output
        assert "docs/a.txt: 3 (3)" in result.output
        assert "docs/b.txt: 2 (2)" in result.output

    def test_count_records_ledger_entries(self, project):
        """Each new document is appended to the ledger."""
        runner.invoke(app, [
            "count", os.path.join(project, "docs"), "--database", _db(project)
        ])

        conn = get_connection(_db(project))
        try:
            repo = WordCountRepository(conn)
            assert repo.count_entries() == 2
            assert repo.history("docs/a.txt")[0].words == 3
        finally:
            conn.close()

    def test_count_with_goal(self, project):
        """The goal segment appears when a goal is set."""
        result = runner.invoke(app, [
            "count", os.path.join(project, "docs"),
            "--database", _db(project), "--goal", "100"
        ])

        assert result.exit_code == EXIT_CODE_PASS
        assert "Goal: 100(95)" in result.output

    def test_custom_formats(self, project):
        """Header and item formats can be overridden."""
        result = runner.invoke(app, [
            "count", os.path.join(project, "docs"),
            "--database", _db(project),
            "--format-header", "",
            "--format-item", "#{path}=#{total}",
            "--annotation-pattern", ""
        ])

        assert result.exit_code == EXIT_CODE_PASS
        assert "Total:" not in result.output
        assert "docs/a.txt=6" in result.output

    def test_config_file(self, project):
        """Options can come from a YAML config file."""
        config_path = os.path.join(project, "tracker.yaml")
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump({
                "database": _db(project),
                "accept_file_pattern": r"b\.txt$",
                "format_header": "Words: #{total}",
            }, f)

        result = runner.invoke(app, [
            "count", os.path.join(project, "docs"), "--config", config_path
        ])

        assert result.exit_code == EXIT_CODE_PASS
        assert "Words: 2" in result.output
        assert "docs/a.txt" not in result.output

    def test_conflicting_file_patterns_fail(self, project):
        """Accept and ignore patterns together are a configuration error."""
        result = runner.invoke(app, [
            "count", os.path.join(project, "docs"),
            "--database", _db(project),
            "--accept-file-pattern", "a",
            "--ignore-file-pattern", "b"
        ])

        assert result.exit_code == EXIT_CODE_FAIL

    def test_corrupt_database_fails_before_counting(self, project):
        """An unreadable database aborts the run with a non-zero exit."""
        with open(_db(project), 'wb') as f:
            f.write(b"garbage " * 200)

        result = runner.invoke(app, [
            "count", os.path.join(project, "docs"), "--database", _db(project)
        ])

        assert result.exit_code == EXIT_CODE_FAIL
        assert "Total:" not in result.output


class TestLedgerCommands:
    """Test init, status and history commands."""

    def test_init(self, project):
        """Init migrates a new database."""
        result = runner.invoke(app, ["init", "--database", _db(project)])

        assert result.exit_code == EXIT_CODE_PASS
        assert f"schema version {len(MIGRATIONS)}" in result.output

    def test_status(self, project):
        """Status reports version and entry count."""
        runner.invoke(app, [
            "count", os.path.join(project, "docs"), "--database", _db(project)
        ])
        result = runner.invoke(app, ["status", "--database", _db(project)])

        assert result.exit_code == EXIT_CODE_PASS
        assert f"Schema version: {len(MIGRATIONS)}" in result.output
        assert "Recorded word counts: 2" in result.output

    def test_history(self, project):
        """History lists recorded counts for one document."""
        runner.invoke(app, [
            "count", os.path.join(project, "docs"), "--database", _db(project)
        ])
        result = runner.invoke(app, ["history", "docs/a.txt", "--database", _db(project)])

        assert result.exit_code == EXIT_CODE_PASS
        assert "Words" in result.output
        assert "3" in result.output

    def test_history_unknown_document(self, project):
        """Unknown documents produce a friendly message."""
        result = runner.invoke(app, ["history", "nope.txt", "--database", _db(project)])

        assert result.exit_code == EXIT_CODE_PASS
        assert "No word counts recorded" in result.output
