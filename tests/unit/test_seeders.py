# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for SQL seed files and the Seeder."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from digdb.config import ConnectionConfig
from digdb.core.exceptions import SeedError
from digdb.database import Database
from digdb.drivers.mock import MockConnection
from digdb.seeders import Seeder, SeedFile


def _seeder(conn: MockConnection, mock_config: ConnectionConfig) -> Seeder:
    return Seeder(Database.connect(mock_config, connection=conn))


# ---------------------------------------------------------------------------
# Seed files
# ---------------------------------------------------------------------------


class TestSeedFile:
    def test_statements_split_on_semicolon(self) -> None:
        seed_file = SeedFile("01.sql", "INSERT INTO t VALUES (1);\n  INSERT INTO t VALUES (2)  ")
        assert seed_file.statements == ["INSERT INTO t VALUES (1)", "INSERT INTO t VALUES (2)"]

    def test_comment_only_pieces_are_skipped(self) -> None:
        seed_file = SeedFile("01.sql", "-- nothing here;\n;\n-- still nothing\n")
        assert seed_file.statements == []

    def test_leading_comment_lines_are_dropped(self) -> None:
        seed_file = SeedFile("01.sql", "-- Seed users\n\nINSERT INTO users VALUES (1);")
        assert seed_file.statements == ["INSERT INTO users VALUES (1)"]

    def test_from_file_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(SeedError, match="Cannot read seed file"):
            SeedFile.from_file(tmp_path / "missing.sql")


class TestLoadFromDirectory:
    def test_sql_files_sorted_by_name(self, seeders_dir: Path) -> None:
        seed_files = Seeder.load_from_directory(seeders_dir)
        assert [seed_file.name for seed_file in seed_files] == ["01_users.sql", "02_posts.sql"]

    def test_subdirectory(self, seeders_dir: Path) -> None:
        seed_files = Seeder.load_from_directory(seeders_dir, "development")
        assert [seed_file.name for seed_file in seed_files] == ["01_demo.sql"]

    def test_missing_directory(self, seeders_dir: Path) -> None:
        with pytest.raises(SeedError, match="Seeders directory not found"):
            Seeder.load_from_directory(seeders_dir, "production")


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------


class TestRun:
    def test_executes_statements_in_order(
        self, seeders_dir: Path, mock_config: ConnectionConfig
    ) -> None:
        conn = MockConnection()
        seeded = _seeder(conn, mock_config).run(Seeder.load_from_directory(seeders_dir))

        assert [seed_file.name for seed_file in seeded] == ["01_users.sql", "02_posts.sql"]
        assert conn.executed_queries == (
            "INSERT INTO users (id, name) VALUES (1, 'Alice')",
            "INSERT INTO users (id, name) VALUES (2, 'Bob')",
            "INSERT INTO posts (id, user_id) VALUES (1, 1)",
        )
        assert not conn.in_transaction

    def test_nothing_to_run(self, mock_config: ConnectionConfig) -> None:
        conn = MockConnection()
        assert _seeder(conn, mock_config).run([]) == []
        assert conn.executed_queries == ()

    def test_failure_stops_and_raises(
        self, seeders_dir: Path, mock_config: ConnectionConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        conn = MockConnection()
        seeder = _seeder(conn, mock_config)
        conn.set_should_fail_execute(True)

        with caplog.at_level(logging.ERROR, logger="digdb.seeders"):
            with pytest.raises(SeedError, match="01_users.sql") as excinfo:
                seeder.run(Seeder.load_from_directory(seeders_dir))

        assert excinfo.value.__cause__ is not None
        assert "Failed to seed 01_users.sql" in caplog.text
        assert conn.executed_queries == ()

    def test_logs_progress(
        self, seeders_dir: Path, mock_config: ConnectionConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="digdb.seeders"):
            _seeder(MockConnection(), mock_config).run(Seeder.load_from_directory(seeders_dir))
        assert "Seeding: 01_users.sql" in caplog.text
        assert "Executed 2 seed file(s)" in caplog.text
