# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""MySQL implementation of the abstract :class:`Connection`.

Wraps a :mod:`mysql.connector` connection running in autocommit mode and
reads rows through raw cursors, so cells reach
:func:`~digdb.coercion.coerce_mysql_cell` exactly as the server sent them.
Install with ``pip install digdb[mysql]``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import closing
from typing import Any

from digdb.coercion import coerce_mysql_cell
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
    import mysql.connector  # type: ignore[import-untyped]
except ImportError:  # pragma: no cover
    mysql = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

# Position of the column character set number in a mysql.connector cursor
# description.
_CHARSET_INDEX = 8


def _require_mysql_connector() -> None:
    """Raise a helpful error when mysql-connector-python is not installed."""
    if mysql is None:
        msg = (
            "MySQL driver requires the 'mysql-connector-python' package. "
            "Install it with:  pip install digdb[mysql]"
        )
        raise UnsupportedDatabaseError(msg)


def _error_message(exc: Exception) -> str:
    message = getattr(exc, "msg", None) or str(exc)
    return str(message).strip()


def _column_name(name: Any) -> str:
    if isinstance(name, (bytes, bytearray)):
        return bytes(name).decode("utf-8", errors="replace")
    return str(name)


def _column_charset(column: Sequence[Any]) -> int | None:
    if len(column) <= _CHARSET_INDEX or column[_CHARSET_INDEX] is None:
        return None
    return int(column[_CHARSET_INDEX])


def _build_result(description: Sequence[Any], records: Sequence[Sequence[Any]]) -> QueryResult:
    columns = [_column_name(column[0]) for column in description]
    types = [(int(column[1]), _column_charset(column)) for column in description]
    rows = [
        [
            coerce_mysql_cell(cell, field_type, charset)
            for cell, (field_type, charset) in zip(record, types)
        ]
        for record in records
    ]
    return QueryResult(columns, rows)


class MySQLConnection(NativeConnection):
    """Synchronous MySQL driver backed by one :mod:`mysql.connector` session."""

    backend = DatabaseType.MYSQL
    BEGIN_STATEMENT = "START TRANSACTION"

    def __init__(self) -> None:
        _require_mysql_connector()
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
            "database": config.database,
            "user": config.username,
            "password": config.password.get_secret_value(),
        }
        params = {key: value for key, value in params.items() if value}
        params["autocommit"] = True
        if config.ssl:
            params["ssl_disabled"] = False
        params.update(config.extras)

        try:
            handle = mysql.connector.connect(**params)
        except mysql.connector.Error as exc:
            logger.error(
                "MySQL connection to %s failed: %s",
                config.redacted_connection_string(),
                _error_message(exc),
            )
            msg = "Failed to connect to MySQL"
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
        except mysql.connector.Error as exc:
            logger.warning("Error while closing MySQL session: %s", _error_message(exc))

    # ------------------------------------------------------------------
    # Statement execution
    # ------------------------------------------------------------------

    def execute(self, statement: str) -> None:
        self._require_connected("execute")
        self._record(statement)
        try:
            with closing(self._handle.cursor(raw=True)) as cursor:
                cursor.execute(statement)
                if cursor.with_rows:
                    cursor.fetchall()
        except mysql.connector.Error as exc:
            logger.error("MySQL execute failed: %s", _error_message(exc))
            msg = "MySQL rejected the statement"
            raise QueryExecutionError(msg) from exc

    def query(self, statement: str) -> QueryResult:
        self._require_connected("query")
        self._record(statement)
        try:
            with closing(self._handle.cursor(raw=True)) as cursor:
                cursor.execute(statement)
                if not cursor.with_rows or cursor.description is None:
                    logger.error("MySQL query returned no result set")
                    msg = "Statement did not return a row set"
                    raise QueryExecutionError(msg)
                return _build_result(cursor.description, cursor.fetchall())
        except mysql.connector.Error as exc:
            logger.error("MySQL query failed: %s", _error_message(exc))
            msg = "MySQL rejected the query"
            raise QueryExecutionError(msg) from exc

    def _run_control(self, statement: str) -> None:
        try:
            with closing(self._handle.cursor(raw=True)) as cursor:
                cursor.execute(statement)
        except mysql.connector.Error as exc:
            logger.error("MySQL %s failed: %s", statement, _error_message(exc))
            msg = f"MySQL {statement} failed"
            raise TransactionError(msg) from exc
