# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""In-memory driver for tests.

:class:`MockConnection` talks to no backend.  It records statements, replays
registered result fixtures in order and fails on demand through its
``should_fail_*`` flags.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from digdb.config import ConnectionConfig
from digdb.connection import Connection
from digdb.core.constants import DatabaseType
from digdb.core.exceptions import ConnectionFailedError, QueryExecutionError, TransactionError
from digdb.result import QueryResult
from digdb.types import SqlValue

logger = logging.getLogger(__name__)

_Fixture = tuple[tuple[str, ...], tuple[tuple[SqlValue, ...], ...]]


class MockConnection(Connection):
    """Scriptable :class:`Connection` with no backend behind it.

    Example::

        conn = MockConnection()
        conn.add_mock_result(["id", "name"], [[1, "Alice"]])
        conn.connect(ConnectionConfig(database_type="mock"))
        result = conn.query("SELECT id, name FROM users")
    """

    backend = DatabaseType.MOCK

    def __init__(self) -> None:
        super().__init__()
        self.should_fail_connect = False
        self.should_fail_execute = False
        self.should_fail_query = False
        self.should_fail_transaction = False
        self._fixtures: list[_Fixture] = []
        self._next_fixture = 0

    # ------------------------------------------------------------------
    # Fixtures and failure injection
    # ------------------------------------------------------------------

    def add_mock_result(
        self,
        columns: Iterable[str],
        rows: Iterable[Sequence[object]] = (),
    ) -> None:
        """Queue a result for a later :meth:`query` call.

        The fixture is copied, so the caller may reuse or mutate its inputs.
        Plain Python values in *rows* are wrapped with
        :meth:`SqlValue.from_python`.

        Raises:
            ValueError: If a row's width does not match *columns*.
        """
        names = tuple(str(name) for name in columns)
        copied: list[tuple[SqlValue, ...]] = []
        for index, row in enumerate(rows):
            values = tuple(SqlValue.from_python(cell) for cell in row)
            if len(values) != len(names):
                msg = f"Row {index} has {len(values)} values, expected {len(names)}"
                raise ValueError(msg)
            copied.append(values)
        self._fixtures.append((names, tuple(copied)))

    @property
    def pending_results(self) -> int:
        """Number of queued fixtures not yet consumed by :meth:`query`."""
        return len(self._fixtures) - self._next_fixture

    def set_should_fail_connect(self, fail: bool) -> None:
        self.should_fail_connect = fail

    def set_should_fail_execute(self, fail: bool) -> None:
        self.should_fail_execute = fail

    def set_should_fail_query(self, fail: bool) -> None:
        self.should_fail_query = fail

    def set_should_fail_transaction(self, fail: bool) -> None:
        self.should_fail_transaction = fail

    def reset(self) -> None:
        """Disconnect and forget fixtures, flags and the statement log."""
        self.disconnect()
        self.should_fail_connect = False
        self.should_fail_execute = False
        self.should_fail_query = False
        self.should_fail_transaction = False
        self._fixtures.clear()
        self._next_fixture = 0
        self.clear_executed_queries()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def connect(self, config: ConnectionConfig) -> None:
        self.disconnect()
        if self.should_fail_connect:
            logger.debug("Injected connect failure for %s", config.redacted_connection_string())
            msg = "Mock connection configured to fail"
            raise ConnectionFailedError(msg)
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False
        self._in_transaction = False

    # ------------------------------------------------------------------
    # Statement execution
    # ------------------------------------------------------------------

    def execute(self, statement: str) -> None:
        self._require_connected("execute")
        if self.should_fail_execute:
            logger.debug("Injected execute failure")
            msg = "Mock execute configured to fail"
            raise QueryExecutionError(msg)
        self._record(statement)

    def query(self, statement: str) -> QueryResult:
        self._require_connected("query")
        if self.should_fail_query:
            logger.debug("Injected query failure")
            msg = "Mock query configured to fail"
            raise QueryExecutionError(msg)
        self._record(statement)

        if self._next_fixture >= len(self._fixtures):
            return QueryResult.empty()
        columns, rows = self._fixtures[self._next_fixture]
        self._next_fixture += 1
        return QueryResult(columns, rows)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin_transaction(self) -> None:
        self._require_connected("begin a transaction")
        self._check_transaction_failure("begin")
        self._require_transaction(False, "begin a transaction")
        self._in_transaction = True

    def commit(self) -> None:
        self._require_connected("commit")
        self._check_transaction_failure("commit")
        self._require_transaction(True, "commit")
        self._in_transaction = False

    def rollback(self) -> None:
        self._require_connected("roll back")
        self._check_transaction_failure("rollback")
        self._require_transaction(True, "roll back")
        self._in_transaction = False

    def _check_transaction_failure(self, operation: str) -> None:
        if self.should_fail_transaction:
            logger.debug("Injected %s failure", operation)
            msg = f"Mock {operation} configured to fail"
            raise TransactionError(msg)
