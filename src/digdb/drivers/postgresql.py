# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""PostgreSQL implementation of the abstract :class:`Connection`.

Wraps a :mod:`psycopg2` connection running in autocommit mode.  A
pass-through typecaster is registered on every session so that cells reach
:func:`~digdb.coercion.coerce_postgres_cell` in libpq's text format instead
of psycopg2's own Python conversions.  Install with
``pip install digdb[postgresql]``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import closing
from typing import Any

from digdb.coercion import PG_TYPE_KINDS, coerce_postgres_cell
from digdb.config import ConnectionConfig
from digdb.core.constants import DatabaseType
from digdb.core.exceptions import (
    ConnectionFailedError,
    QueryExecutionError,
    TransactionError,
    UnsupportedDatabaseError,
)
from digdb.drivers.base import NativeConnection
from digdb.result import QueryResult

try:
    import psycopg2  # type: ignore[import-untyped]
    import psycopg2.extensions  # type: ignore[import-untyped]
except ImportError:  # pragma: no cover
    psycopg2 = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def _require_psycopg2() -> None:
    """Raise a helpful error when psycopg2 is not installed."""
    if psycopg2 is None:
        msg = (
            "PostgreSQL driver requires the 'psycopg2' package. "
            "Install it with:  pip install digdb[postgresql]"
        )
        raise UnsupportedDatabaseError(msg)


def _error_message(exc: Exception) -> str:
    message = getattr(exc, "pgerror", None) or str(exc)
    return message.strip()


def _raw_text(value: str | None, cursor: Any) -> str | None:
    return value


def _raw_typecaster() -> Any:
    oids = set(PG_TYPE_KINDS)
    oids.update(psycopg2.extensions.string_types)
    return psycopg2.extensions.new_type(tuple(sorted(oids)), "DIGDB_RAW", _raw_text)


def _build_result(description: Sequence[Any], records: Sequence[Sequence[Any]]) -> QueryResult:
    columns = [str(column[0]) for column in description]
    oids = [int(column[1]) for column in description]
    rows = [
        [coerce_postgres_cell(cell, oid) for cell, oid in zip(record, oids)]
        for record in records
    ]
    return QueryResult(columns, rows)


class PostgreSQLConnection(NativeConnection):
    """Synchronous PostgreSQL driver backed by one :mod:`psycopg2` session."""

    backend = DatabaseType.POSTGRESQL

    def __init__(self) -> None:
        _require_psycopg2()
        super().__init__()
        self._handle: Any = None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def connect(self, config: ConnectionConfig) -> None:
        self.disconnect()

        params: dict[str, Any] = {
            "host": config.host,
            "port": config.port,
            "dbname": config.database,
            "user": config.username,
            "password": config.password.get_secret_value(),
        }
        params = {key: value for key, value in params.items() if value}
        if config.ssl:
            params["sslmode"] = "require"
        params.update(config.extras)

        try:
            handle = psycopg2.connect(**params)
        except psycopg2.Error as exc:
            logger.error(
                "PostgreSQL connection to %s failed: %s",
                config.redacted_connection_string(),
                _error_message(exc),
            )
            msg = "Failed to connect to PostgreSQL"
            raise ConnectionFailedError(msg) from exc

        try:
            handle.autocommit = True
            psycopg2.extensions.register_type(_raw_typecaster(), handle)
        except psycopg2.Error as exc:
            handle.close()
            logger.error("PostgreSQL session setup failed: %s", _error_message(exc))
            msg = "Failed to initialise PostgreSQL session"
            raise ConnectionFailedError(msg) from exc

        self._handle = handle
        self._connected = True
        logger.debug("Connected to %s", config.redacted_connection_string())

    def disconnect(self) -> None:
        handle, self._handle = self._handle, None
        self._connected = False
        self._in_transaction = False
        if handle is None:
            return
        try:
            handle.close()
        except psycopg2.Error as exc:
            logger.warning("Error while closing PostgreSQL session: %s", _error_message(exc))

    # ------------------------------------------------------------------
    # Statement execution
    # ------------------------------------------------------------------

    def execute(self, statement: str) -> None:
        self._require_connected("execute")
        self._record(statement)
        try:
            with closing(self._handle.cursor()) as cursor:
                cursor.execute(statement)
        except psycopg2.Error as exc:
            logger.error("PostgreSQL execute failed: %s", _error_message(exc))
            msg = "PostgreSQL rejected the statement"
            raise QueryExecutionError(msg) from exc

    def query(self, statement: str) -> QueryResult:
        self._require_connected("query")
        self._record(statement)
        try:
            with closing(self._handle.cursor()) as cursor:
                cursor.execute(statement)
                if cursor.description is None:
                    logger.error(
                        "PostgreSQL query returned no row set (status %r)",
                        cursor.statusmessage,
                    )
                    msg = "Statement did not return a row set"
                    raise QueryExecutionError(msg)
                return _build_result(cursor.description, cursor.fetchall())
        except psycopg2.Error as exc:
            logger.error("PostgreSQL query failed: %s", _error_message(exc))
            msg = "PostgreSQL rejected the query"
            raise QueryExecutionError(msg) from exc

    def _run_control(self, statement: str) -> None:
        try:
            with closing(self._handle.cursor()) as cursor:
                cursor.execute(statement)
        except psycopg2.Error as exc:
            logger.error("PostgreSQL %s failed: %s", statement, _error_message(exc))
            msg = f"PostgreSQL {statement} failed"
            raise TransactionError(msg) from exc
