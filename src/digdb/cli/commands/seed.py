# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Seed command: run the ``.sql`` files of a seeders directory."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from digdb.core.exceptions import DigError


def seed(
    subdirectory: Annotated[
        str | None,
        typer.Argument(help="Subdirectory of the seeders directory, e.g. 'development'"),
    ] = None,
    seeders_dir: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Seeders directory (default: DIG_SEEDERS_DIR)"),
    ] = None,
) -> None:
    """Execute every seed file, in file-name order."""
    from digdb.cli.formatters.console import format_seeds
    from digdb.core.config import get_settings
    from digdb.database import Database
    from digdb.seeders import Seeder

    try:
        settings = get_settings()
        seed_files = Seeder.load_from_directory(seeders_dir or settings.seeders_dir, subdirectory)
        if not seed_files:
            format_seeds([])
            return
        with Database.connect(settings.to_connection_config()) as db:
            seeded = Seeder(db).run(seed_files)
    except DigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc
    format_seeds(seeded)
