# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

import logging
import os
from pathlib import Path

import pytest

from digdb.config import ConnectionConfig
from digdb.core.constants import DatabaseType
from digdb.drivers.mock import MockConnection

MIGRATIONS = {
    "20251122_create_users.sql": (
        "-- Create users table\n"
        "\n"
        "-- up\n"
        "CREATE TABLE users (\n"
        "    id INTEGER PRIMARY KEY,\n"
        "    name VARCHAR(255) NOT NULL\n"
        ");\n"
        "\n"
        "-- down\n"
        "DROP TABLE IF EXISTS users;\n"
    ),
    "20251123_create_posts.sql": (
        "-- up\n"
        "CREATE TABLE posts (id INTEGER PRIMARY KEY, user_id INTEGER NOT NULL);\n"
        "CREATE INDEX posts_user_id ON posts (user_id);\n"
        "-- down\n"
        "DROP INDEX posts_user_id;\n"
        "DROP TABLE IF EXISTS posts;\n"
    ),
}


@pytest.fixture
def mock_config() -> ConnectionConfig:
    return ConnectionConfig(database_type=DatabaseType.MOCK, database="test")


@pytest.fixture
def mock_conn(mock_config: ConnectionConfig) -> MockConnection:
    """A connected MockConnection."""
    conn = MockConnection()
    conn.connect(mock_config)
    return conn


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "migrations"
    directory.mkdir()
    for filename, content in MIGRATIONS.items():
        (directory / filename).write_text(content, encoding="utf-8")
    (directory / "README.txt").write_text("not a migration", encoding="utf-8")
    return directory


@pytest.fixture(autouse=True)
def _reset_digdb_logger():
    """Undo setup_logging() calls made by CLI tests."""
    logger = logging.getLogger("digdb")
    level = logger.level
    yield
    logger.handlers.clear()
    logger.setLevel(level)


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep DIG_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("DIG_"):
            monkeypatch.delenv(key, raising=False)


SEEDS = {
    "01_users.sql": (
        "-- Seed users\n"
        "INSERT INTO users (id, name) VALUES (1, 'Alice');\n"
        "INSERT INTO users (id, name) VALUES (2, 'Bob');\n"
    ),
    "02_posts.sql": (
        "INSERT INTO posts (id, user_id) VALUES (1, 1);\n"
        "-- trailing note;\n"
    ),
}


@pytest.fixture
def seeders_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "seeders"
    directory.mkdir()
    for filename, content in SEEDS.items():
        (directory / filename).write_text(content, encoding="utf-8")
    (directory / "notes.md").write_text("not a seed", encoding="utf-8")
    development = directory / "development"
    development.mkdir()
    (development / "01_demo.sql").write_text(
        "INSERT INTO users (id, name) VALUES (99, 'Demo');", encoding="utf-8"
    )
    return directory
