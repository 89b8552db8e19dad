# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Unit tests for the digdb CLI: up, down, reset, status and seed."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from digdb.cli.app import app
from digdb.core.exceptions import QueryExecutionError
from digdb.drivers.mock import MockConnection

runner = CliRunner()


@pytest.fixture(autouse=True)
def _mock_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DIG_DB_TYPE", "mock")


class _RejectingMock(MockConnection):
    def execute(self, statement: str) -> None:
        if statement.startswith("CREATE INDEX"):
            raise QueryExecutionError("rejected")
        super().execute(statement)


# ---------------------------------------------------------------------------
# up
# ---------------------------------------------------------------------------


class TestUp:
    def test_applies_all_on_fresh_database(self, migrations_dir: Path) -> None:
        result = runner.invoke(app, ["up", "--dir", str(migrations_dir)])
        assert result.exit_code == 0, result.output
        assert "20251122" in result.output
        assert "Migrated 2 migration(s)." in result.output

    def test_dir_from_environment(self, migrations_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DIG_MIGRATIONS_DIR", str(migrations_dir))
        result = runner.invoke(app, ["up"])
        assert result.exit_code == 0, result.output
        assert "Migrated 2 migration(s)." in result.output

    def test_failure_exits_1(self, migrations_dir: Path) -> None:
        with patch("digdb.database.create_connection", return_value=_RejectingMock()):
            result = runner.invoke(app, ["up", "--dir", str(migrations_dir)])
        assert result.exit_code == 1
        assert "Error: Failed to apply migration 20251123" in result.output

    def test_missing_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["up", "--dir", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "Migrations directory not found" in result.output

    def test_incomplete_settings(self, migrations_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DIG_DB_TYPE", "postgresql")
        result = runner.invoke(app, ["up", "--dir", str(migrations_dir)])
        assert result.exit_code == 1
        assert "DIG_DB_DATABASE" in result.output


# ---------------------------------------------------------------------------
# down / reset
# ---------------------------------------------------------------------------


class TestDown:
    def test_nothing_to_roll_back(self, migrations_dir: Path) -> None:
        result = runner.invoke(app, ["down", "--dir", str(migrations_dir)])
        assert result.exit_code == 0, result.output
        assert "Nothing to roll back." in result.output

    def test_rolls_back_latest_batch(self, migrations_dir: Path) -> None:
        conn = MockConnection()
        conn.add_mock_result(["exists"], [[True]])
        conn.add_mock_result(["max_batch"], [[1]])
        conn.add_mock_result(["id"], [["20251123"]])
        with patch("digdb.database.create_connection", return_value=conn):
            result = runner.invoke(app, ["down", "--dir", str(migrations_dir)])
        assert result.exit_code == 0, result.output
        assert "Rolled back 1 migration(s)." in result.output
        assert "DROP TABLE IF EXISTS posts" in conn.executed_queries
        assert not conn.is_connected


class TestReset:
    def test_requires_confirmation(self, migrations_dir: Path) -> None:
        result = runner.invoke(app, ["reset", "--dir", str(migrations_dir)], input="n\n")
        assert result.exit_code == 1
        assert "Aborted" in result.output

    def test_yes_skips_prompt(self, migrations_dir: Path) -> None:
        result = runner.invoke(app, ["reset", "--yes", "--dir", str(migrations_dir)])
        assert result.exit_code == 0, result.output
        assert "Nothing to roll back." in result.output


# ---------------------------------------------------------------------------
# seed
# ---------------------------------------------------------------------------


class TestSeed:
    def test_runs_all_seed_files(self, seeders_dir: Path) -> None:
        conn = MockConnection()
        with patch("digdb.database.create_connection", return_value=conn):
            result = runner.invoke(app, ["seed", "--dir", str(seeders_dir)])
        assert result.exit_code == 0, result.output
        assert "Seeded 01_users.sql" in result.output
        assert "Executed 2 seed file(s)." in result.output
        assert len(conn.executed_queries) == 3
        assert not conn.is_connected

    def test_subdirectory(self, seeders_dir: Path) -> None:
        conn = MockConnection()
        with patch("digdb.database.create_connection", return_value=conn):
            result = runner.invoke(app, ["seed", "development", "-d", str(seeders_dir)])
        assert result.exit_code == 0, result.output
        assert conn.executed_queries == ("INSERT INTO users (id, name) VALUES (99, 'Demo')",)

    def test_dir_from_environment(self, seeders_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DIG_SEEDERS_DIR", str(seeders_dir))
        result = runner.invoke(app, ["seed"])
        assert result.exit_code == 0, result.output
        assert "Executed 2 seed file(s)." in result.output

    def test_empty_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["seed", "--dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "No seed files found." in result.output

    def test_missing_subdirectory(self, seeders_dir: Path) -> None:
        result = runner.invoke(app, ["seed", "production", "--dir", str(seeders_dir)])
        assert result.exit_code == 1
        assert "Seeders directory not found" in result.output

    def test_failure_exits_1(self, seeders_dir: Path) -> None:
        conn = MockConnection()
        conn.set_should_fail_execute(True)
        with patch("digdb.database.create_connection", return_value=conn):
            result = runner.invoke(app, ["seed", "--dir", str(seeders_dir)])
        assert result.exit_code == 1
        assert "Error: Failed to execute seed file 01_users.sql" in result.output


# ---------------------------------------------------------------------------
# status / version
# ---------------------------------------------------------------------------


class TestStatus:
    def test_all_pending(self, migrations_dir: Path) -> None:
        result = runner.invoke(app, ["status", "--dir", str(migrations_dir)])
        assert result.exit_code == 0, result.output
        assert "create users" in result.output
        assert "0 applied, 2 pending" in result.output

    def test_mixed(self, migrations_dir: Path) -> None:
        conn = MockConnection()
        conn.add_mock_result(["exists"], [[True]])
        conn.add_mock_result(["count"], [[1]])
        conn.add_mock_result(["count"], [[0]])
        with patch("digdb.database.create_connection", return_value=conn):
            result = runner.invoke(app, ["status", "--dir", str(migrations_dir)])
        assert result.exit_code == 0, result.output
        assert "Applied" in result.output
        assert "1 applied, 1 pending" in result.output

    def test_empty_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["status", "--dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "No migrations found." in result.output


class TestVersion:
    def test_version(self) -> None:
        from digdb import __version__

        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"digdb v{__version__}" in result.output
