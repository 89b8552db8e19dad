# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""SQL-file migrations tracked in a bookkeeping table.

Migration files are named ``<id>_<name>.sql`` and hold an ``-- up`` and a
``-- down`` section::

    -- up
    CREATE TABLE users (id INTEGER PRIMARY KEY);

    -- down
    DROP TABLE users;

Applied migrations are recorded with the batch they were applied in, so
:meth:`MigrationManager.rollback` can revert the most recent ``migrate`` run
as a unit.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from digdb.core.constants import DEFAULT_MIGRATIONS_TABLE, DatabaseType, ValueKind
from digdb.core.exceptions import DigError, MigrationError
from digdb.database import Database
from digdb.types import SqlValue

logger = logging.getLogger(__name__)

_UP_MARKER = "-- up"
_DOWN_MARKER = "-- down"
_TABLE_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


# ---------------------------------------------------------------------------
# Migration definitions
# ---------------------------------------------------------------------------


def split_sql_statements(sql: str) -> list[str]:
    """Split *sql* on ``;`` into trimmed, non-empty statements.

    Semicolons inside string literals or dollar-quoted bodies are not
    recognised; keep such statements in a file of their own.
    """
    return [piece.strip() for piece in sql.split(";") if piece.strip()]


def _parse_sections(content: str) -> tuple[str, str]:
    up: list[str] = []
    down: list[str] = []
    section: list[str] | None = None
    for line in content.splitlines():
        marker = line.strip()
        if marker == _UP_MARKER:
            section = up
            continue
        if marker == _DOWN_MARKER:
            section = down
            continue
        if section is not None:
            section.append(line)
    return "\n".join(up), "\n".join(down)


@dataclass(frozen=True, slots=True)
class SqlMigration:
    """One migration loaded from a ``.sql`` file."""

    id: str
    name: str
    up_sql: str
    down_sql: str

    @classmethod
    def from_text(cls, filename: str, content: str) -> SqlMigration:
        """Build a migration from a file name and its contents.

        ``20251122_create_users.sql`` yields id ``20251122`` and name
        ``create users``.  A stem without ``_`` is used as both.
        """
        stem = Path(filename).name
        if stem.endswith(".sql"):
            stem = stem[: -len(".sql")]
        migration_id, sep, rest = stem.partition("_")
        name = rest.replace("_", " ") if sep else stem
        up_sql, down_sql = _parse_sections(content)
        return cls(id=migration_id, name=name, up_sql=up_sql, down_sql=down_sql)

    @classmethod
    def from_file(cls, path: Path | str) -> SqlMigration:
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read migration file {path}: {exc}"
            raise MigrationError(msg) from exc
        return cls.from_text(path.name, content)

    @property
    def up_statements(self) -> list[str]:
        return split_sql_statements(self.up_sql)

    @property
    def down_statements(self) -> list[str]:
        return split_sql_statements(self.down_sql)


@dataclass(frozen=True, slots=True)
class MigrationState:
    """A migration and whether the bookkeeping table lists it as applied."""

    migration: SqlMigration
    applied: bool

    @property
    def status(self) -> str:
        return "Applied" if self.applied else "Pending"


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------


class MigrationManager:
    """Apply and revert :class:`SqlMigration` sets against a :class:`Database`.

    Each migration runs in its own transaction together with its bookkeeping
    row, so a failed migration leaves neither schema changes (where the
    backend has transactional DDL) nor a record behind.
    """

    def __init__(self, database: Database, table: str = DEFAULT_MIGRATIONS_TABLE) -> None:
        if not _TABLE_NAME_RE.fullmatch(table):
            msg = f"Invalid migrations table name: {table!r}"
            raise MigrationError(msg)
        self._db = database
        self._table = table
        self._log_extra = {"database_type": database.database_type.value}

    @property
    def table(self) -> str:
        return self._table

    @staticmethod
    def load_from_directory(path: Path | str) -> list[SqlMigration]:
        """Load every ``*.sql`` file in *path*, sorted by migration id."""
        directory = Path(path)
        if not directory.is_dir():
            msg = f"Migrations directory not found: {directory}"
            raise MigrationError(msg)
        migrations = [
            SqlMigration.from_file(file)
            for file in directory.iterdir()
            if file.is_file() and file.suffix == ".sql"
        ]
        migrations.sort(key=lambda migration: migration.id)
        return migrations

    # ------------------------------------------------------------------
    # Bookkeeping table
    # ------------------------------------------------------------------

    def ensure_migrations_table(self) -> None:
        if self._table_exists():
            return
        batch_type = "INT" if self._db.database_type is DatabaseType.MYSQL else "INTEGER"
        self._db.execute(
            f"CREATE TABLE {self._table} (\n"
            "    id VARCHAR(255) PRIMARY KEY,\n"
            "    name VARCHAR(255) NOT NULL,\n"
            "    applied_at BIGINT NOT NULL,\n"
            f"    batch {batch_type} NOT NULL\n"
            ")"
        )
        logger.info("Created migrations table %s", self._table)

    def _table_exists(self) -> bool:
        table = self._literal(SqlValue.text(self._table))
        db_type = self._db.database_type
        if db_type is DatabaseType.POSTGRESQL:
            sql = (
                "SELECT EXISTS (SELECT FROM information_schema.tables "
                f"WHERE table_schema = 'public' AND table_name = {table})"
            )
        elif db_type is DatabaseType.MYSQL:
            sql = (
                "SELECT COUNT(*) > 0 FROM information_schema.tables "
                f"WHERE table_schema = DATABASE() AND table_name = {table}"
            )
        else:
            sql = "SELECT 0"
        return _truthy(self._scalar(sql))

    def _literal(self, value: SqlValue) -> str:
        return value.to_sql_literal(self._db.database_type)

    def _scalar(self, sql: str) -> SqlValue:
        with self._db.query(sql) as result:
            row = result.first()
            if row is None or not row.values:
                return SqlValue.null()
            return row.values[0]

    def _current_batch(self) -> int:
        value = self._scalar(f"SELECT COALESCE(MAX(batch), 0) AS max_batch FROM {self._table}")
        return value.value if value.kind is ValueKind.INTEGER else 0

    def _is_applied(self, migration_id: str) -> bool:
        literal = self._literal(SqlValue.text(migration_id))
        value = self._scalar(f"SELECT COUNT(*) FROM {self._table} WHERE id = {literal}")
        return value.kind is ValueKind.INTEGER and value.value > 0

    def _latest_batch_ids(self) -> list[str]:
        batch = self._current_batch()
        if batch == 0:
            return []
        with self._db.query(
            f"SELECT id FROM {self._table} WHERE batch = {batch} "
            "ORDER BY applied_at DESC, id DESC"
        ) as result:
            return [
                row.values[0].value
                for row in result
                if row.values and row.values[0].kind is ValueKind.TEXT
            ]

    def _record_sql(self, migration: SqlMigration, batch: int) -> str:
        values = ", ".join(
            [
                self._literal(SqlValue.text(migration.id)),
                self._literal(SqlValue.text(migration.name)),
                self._literal(SqlValue.integer(int(time.time()))),
                self._literal(SqlValue.integer(batch)),
            ]
        )
        return f"INSERT INTO {self._table} (id, name, applied_at, batch) VALUES ({values})"

    def _forget_sql(self, migration_id: str) -> str:
        literal = self._literal(SqlValue.text(migration_id))
        return f"DELETE FROM {self._table} WHERE id = {literal}"

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def migrate(self, migrations: Iterable[SqlMigration]) -> list[SqlMigration]:
        """Apply every pending migration as one new batch, in order."""
        self.ensure_migrations_table()
        batch = self._current_batch() + 1
        applied: list[SqlMigration] = []

        for migration in migrations:
            if self._is_applied(migration.id):
                continue
            logger.info("Migrating: %s", migration.name, extra=self._log_extra)
            statements = [*migration.up_statements, self._record_sql(migration, batch)]
            self._run(migration, statements, "apply")
            applied.append(migration)
            logger.info("Migrated: %s", migration.name, extra=self._log_extra)

        if applied:
            logger.info("Migrated %d migration(s) in batch %d", len(applied), batch)
        else:
            logger.info("Nothing to migrate")
        return applied

    def rollback(self, migrations: Sequence[SqlMigration]) -> list[SqlMigration]:
        """Revert the latest batch, newest first."""
        self.ensure_migrations_table()
        ids = self._latest_batch_ids()
        if not ids:
            logger.info("Nothing to roll back")
            return []

        by_id = {migration.id: migration for migration in migrations}
        reverted: list[SqlMigration] = []
        for migration_id in ids:
            migration = by_id.get(migration_id)
            if migration is None:
                logger.warning("Migration %s not found in migration list; skipping", migration_id)
                continue
            logger.info("Rolling back: %s", migration.name, extra=self._log_extra)
            statements = [*migration.down_statements, self._forget_sql(migration.id)]
            self._run(migration, statements, "roll back")
            reverted.append(migration)
            logger.info("Rolled back: %s", migration.name, extra=self._log_extra)

        logger.info("Rolled back %d migration(s)", len(reverted))
        return reverted

    def reset(self, migrations: Sequence[SqlMigration]) -> list[SqlMigration]:
        """Roll back every batch, latest first."""
        self.ensure_migrations_table()
        reverted: list[SqlMigration] = []
        for _ in range(self._current_batch()):
            reverted.extend(self.rollback(migrations))
        return reverted

    def status(self, migrations: Iterable[SqlMigration]) -> list[MigrationState]:
        self.ensure_migrations_table()
        return [
            MigrationState(migration=migration, applied=self._is_applied(migration.id))
            for migration in migrations
        ]

    # ------------------------------------------------------------------
    # Transaction plumbing
    # ------------------------------------------------------------------

    def _run(self, migration: SqlMigration, statements: list[str], action: str) -> None:
        """Execute *statements* in one transaction, rolling back on failure."""
        try:
            self._db.begin_transaction()
            for statement in statements:
                self._db.execute(statement)
            self._db.commit()
        except DigError as exc:
            self._abort()
            logger.error(
                "Failed to %s migration %s: %s", action, migration.id, exc, extra=self._log_extra
            )
            msg = f"Failed to {action} migration {migration.id} ({migration.name})"
            raise MigrationError(msg) from exc
        except BaseException:
            self._abort()
            raise

    def _abort(self) -> None:
        if not self._db.in_transaction:
            return
        try:
            self._db.rollback()
        except DigError as exc:
            logger.error("Rollback after failed migration also failed: %s", exc)


def _truthy(value: SqlValue) -> bool:
    if value.kind is ValueKind.BOOLEAN:
        return value.value
    if value.kind is ValueKind.INTEGER:
        return value.value > 0
    return False
