# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Migration commands: up, down, reset and status."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from digdb.core.exceptions import DigError

if TYPE_CHECKING:
    from digdb.migrations import MigrationManager, SqlMigration

DirOption = Annotated[
    Path | None,
    typer.Option("--dir", "-d", help="Migrations directory (default: DIG_MIGRATIONS_DIR)"),
]


@contextmanager
def _manager(migrations_dir: Path | None) -> Iterator[tuple[MigrationManager, list[SqlMigration]]]:
    """Yield ``(manager, migrations)`` for a freshly opened session.

    Any :class:`DigError` is reported on stderr and turned into exit code 1.
    """
    from digdb.core.config import get_settings
    from digdb.database import Database
    from digdb.migrations import MigrationManager

    try:
        settings = get_settings()
        directory = migrations_dir or settings.migrations_dir
        migrations = MigrationManager.load_from_directory(directory)
        with Database.connect(settings.to_connection_config()) as db:
            yield MigrationManager(db, table=settings.migrations_table), migrations
    except DigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def up(migrations_dir: DirOption = None) -> None:
    """Apply all pending migrations as a new batch."""
    from digdb.cli.formatters.console import format_migrations

    with _manager(migrations_dir) as (manager, migrations):
        applied = manager.migrate(migrations)
    format_migrations("Migrated", applied, empty="Nothing to migrate.")


def down(migrations_dir: DirOption = None) -> None:
    """Roll back the most recent batch of migrations."""
    from digdb.cli.formatters.console import format_migrations

    with _manager(migrations_dir) as (manager, migrations):
        reverted = manager.rollback(migrations)
    format_migrations("Rolled back", reverted, empty="Nothing to roll back.")


def reset(
    migrations_dir: DirOption = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt")] = False,
) -> None:
    """Roll back every applied migration."""
    from digdb.cli.formatters.console import format_migrations

    if not yes:
        typer.confirm("Roll back ALL migrations?", abort=True)
    with _manager(migrations_dir) as (manager, migrations):
        reverted = manager.reset(migrations)
    format_migrations("Rolled back", reverted, empty="Nothing to roll back.")


def status(migrations_dir: DirOption = None) -> None:
    """Show which migrations are applied and which are pending."""
    from digdb.cli.formatters.console import format_status

    with _manager(migrations_dir) as (manager, migrations):
        states = manager.status(migrations)
        table = manager.table
    format_status(states, table_name=table)
