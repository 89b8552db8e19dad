# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Seed data loaded from plain ``.sql`` files.

Seed files carry no ``-- up``/``-- down`` sections and are not tracked: every
:meth:`Seeder.run` executes them again, in file-name order.  Keep seed
statements idempotent (``INSERT ... ON CONFLICT DO NOTHING``, ``INSERT
IGNORE``) when a directory is meant to be re-run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from digdb.core.exceptions import DigError, SeedError
from digdb.database import Database
from digdb.migrations import split_sql_statements

logger = logging.getLogger(__name__)

_COMMENT_PREFIX = "--"


def _strip_leading_comments(statement: str) -> str:
    lines = statement.splitlines()
    while lines and (not lines[0].strip() or lines[0].lstrip().startswith(_COMMENT_PREFIX)):
        lines.pop(0)
    return "\n".join(lines).strip()


@dataclass(frozen=True, slots=True)
class SeedFile:
    """One ``.sql`` seed file."""

    name: str
    content: str

    @classmethod
    def from_file(cls, path: Path | str) -> SeedFile:
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read seed file {path}: {exc}"
            raise SeedError(msg) from exc
        return cls(name=path.name, content=content)

    @property
    def statements(self) -> list[str]:
        """Statements to execute, with ``--`` comment lines in front removed.

        Pieces that hold nothing but comments are dropped.
        """
        statements = (_strip_leading_comments(piece) for piece in split_sql_statements(self.content))
        return [statement for statement in statements if statement]


class Seeder:
    """Execute :class:`SeedFile` sets against a :class:`Database`."""

    def __init__(self, database: Database) -> None:
        self._db = database

    @staticmethod
    def load_from_directory(path: Path | str, subdirectory: str | None = None) -> list[SeedFile]:
        """Load every ``*.sql`` file in *path* (or ``path/subdirectory``), sorted by name."""
        directory = Path(path)
        if subdirectory:
            directory = directory / subdirectory
        if not directory.is_dir():
            msg = f"Seeders directory not found: {directory}"
            raise SeedError(msg)
        seed_files = [
            SeedFile.from_file(file)
            for file in directory.iterdir()
            if file.is_file() and file.suffix == ".sql"
        ]
        seed_files.sort(key=lambda seed_file: seed_file.name)
        return seed_files

    def run(self, seed_files: Iterable[SeedFile]) -> list[SeedFile]:
        """Execute each file's statements in order and return the files seeded.

        Stops at the first rejected statement.  Files seeded before it stay
        applied; seed files do not run inside a transaction.
        """
        seeded: list[SeedFile] = []
        for seed_file in seed_files:
            logger.info("Seeding: %s", seed_file.name)
            for statement in seed_file.statements:
                try:
                    self._db.execute(statement)
                except DigError as exc:
                    logger.error("Failed to seed %s: %s", seed_file.name, exc)
                    msg = f"Failed to execute seed file {seed_file.name}"
                    raise SeedError(msg) from exc
            seeded.append(seed_file)
            logger.info("Seeded: %s", seed_file.name)

        logger.info("Executed %d seed file(s)", len(seeded))
        return seeded
