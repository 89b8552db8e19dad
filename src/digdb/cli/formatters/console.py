# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Rich console output for migration and seed commands."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from digdb.migrations import MigrationState, SqlMigration
from digdb.seeders import SeedFile

console = Console()

STATUS_COLORS = {
    "Applied": "bold green",
    "Pending": "yellow",
}


def format_status(states: Sequence[MigrationState], *, table_name: str) -> None:
    """Print one row per migration with its applied/pending status."""
    if not states:
        console.print("[dim]No migrations found.[/dim]")
        return

    table = Table(title=f"Migrations ({table_name})", show_lines=False)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Migration")
    table.add_column("Status", justify="center")

    for state in states:
        color = STATUS_COLORS.get(state.status, "white")
        table.add_row(
            state.migration.id,
            state.migration.name,
            f"[{color}]{state.status}[/{color}]",
        )

    console.print(table)
    applied = sum(1 for state in states if state.applied)
    console.print(f"{applied} applied, {len(states) - applied} pending")


def format_migrations(verb: str, migrations: Sequence[SqlMigration], *, empty: str) -> None:
    if not migrations:
        console.print(f"[dim]{empty}[/dim]")
        return
    for migration in migrations:
        console.print(f"  [green]{verb}[/green] {migration.id}  {migration.name}")
    console.print(f"{verb} {len(migrations)} migration(s).")


def format_seeds(seed_files: Sequence[SeedFile]) -> None:
    if not seed_files:
        console.print("[dim]No seed files found.[/dim]")
        return
    for seed_file in seed_files:
        console.print(f"  [green]Seeded[/green] {seed_file.name}")
    console.print(f"Executed {len(seed_files)} seed file(s).")
