# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root."""

from __future__ import annotations

from typing import Annotated

import typer

from digdb.cli.commands import migrate, seed

app = typer.Typer(
    name="digdb",
    help="SQL migrations and seeders for PostgreSQL and MySQL",
    no_args_is_help=True,
)

app.command(name="up")(migrate.up)
app.command(name="down")(migrate.down)
app.command(name="reset")(migrate.reset)
app.command(name="status")(migrate.status)
app.command(name="seed")(seed.seed)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log at DEBUG level")
    ] = False,
) -> None:
    """Configure logging from DIG_LOG_LEVEL / DIG_LOG_FORMAT before any command runs."""
    from digdb.core.config import get_settings
    from digdb.core.logging import setup_logging

    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level, settings.log_format)


@app.command()
def version() -> None:
    """Show version."""
    from digdb import __version__

    typer.echo(f"digdb v{__version__}")
