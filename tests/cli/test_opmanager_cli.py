"""
Tests for the opmanager CLI.

Covers:
- --version
- events (table and JSON)
- demo trace
- invalid OPMANAGER_* settings exit with code 2
"""

import json

from typer.testing import CliRunner

from opmanager import __version__
from opmanager.cli import app
from opmanager.cli.demo import run_demo

runner = CliRunner()


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("op-manager ")

    def test_fallback_version_is_package_version(self):
        assert __version__ == "0.1.0"


class TestEvents:
    def test_table_lists_all_events(self):
        result = runner.invoke(app, ["events"])
        assert result.exit_code == 0, result.output
        for name in ("accept", "refuse", "run", "done", "release"):
            assert name in result.output

    def test_json(self):
        result = runner.invoke(app, ["events", "--json"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.output)
        assert [row["event"] for row in rows] == ["accept", "refuse", "run", "done", "release"]
        refuse = rows[1]
        assert refuse["manager_payload"] == "op, reason"
        assert refuse["operation_payload"] == "(reason)"
        assert all(row["meaning"] for row in rows)


class TestDemo:
    def test_run_demo_trace(self):
        rows = run_demo()
        assert [(row["event"], row["operation"]) for row in rows] == [
            ("accept", "A1"),
            ("run", "A1"),
            ("done", "A1"),
            ("release", "A1"),
            ("accept", "B1"),
            ("run", "B1"),
            ("refuse", "A2"),
        ]
        assert [row["step"] for row in rows] == list(range(1, 8))
        assert rows[-1]["detail"] == "The operation is not processable."
        assert rows[-1]["kind"] == "immediate"

    def test_demo_json(self):
        result = runner.invoke(app, ["demo", "--json"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.output)
        assert rows == run_demo()

    def test_demo_table(self):
        result = runner.invoke(app, ["demo"])
        assert result.exit_code == 0, result.output
        assert "A2" in result.output
        assert "refused" in result.output


class TestSettings:
    def test_invalid_log_level_exits_with_code_2(self):
        result = runner.invoke(app, ["events"], env={"OPMANAGER_LOG_LEVEL": "verbose"})
        assert result.exit_code == 2
