# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract connection interface implemented by every backend driver.

PostgreSQL, MySQL and the in-memory mock all implement this interface so
that callers can stay backend-agnostic and swap drivers freely.
"""

from __future__ import annotations

import abc
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType
from typing import ClassVar

from digdb.config import ConnectionConfig
from digdb.core.constants import DatabaseType
from digdb.core.exceptions import ConnectionFailedError, TransactionError
from digdb.result import QueryResult


class Connection(abc.ABC):
    """Abstract base class for synchronous database connections.

    One instance maps to exactly one backend session.  Instances hold
    unsynchronized mutable state (the session handle, the transaction flag
    and the execution log) and must not be shared between threads without
    external locking.  They cannot be copied.
    """

    backend: ClassVar[DatabaseType]

    def __init__(self) -> None:
        self._connected = False
        self._in_transaction = False
        self._executed_queries: list[str] = []

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def connect(self, config: ConnectionConfig) -> None:
        """Open (or re-open) the backend session.

        Raises:
            ConnectionFailedError: If the session cannot be established.  The
                driver is left fully disconnected.
        """

    @abc.abstractmethod
    def disconnect(self) -> None:
        """Close the session if one is open.  Never raises; idempotent."""

    # ------------------------------------------------------------------
    # Statement execution
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def execute(self, statement: str) -> None:
        """Run a statement that produces no row set (DDL/DML).

        Raises:
            ConnectionFailedError: If not connected.
            QueryExecutionError: If the backend rejects the statement.
        """

    @abc.abstractmethod
    def query(self, statement: str) -> QueryResult:
        """Run a statement that produces a row set and return it.

        Raises:
            ConnectionFailedError: If not connected.
            QueryExecutionError: If the backend rejects the statement or the
                statement does not produce a row set.
        """

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def begin_transaction(self) -> None:
        """Start a transaction.  Nested transactions raise TransactionError."""

    @abc.abstractmethod
    def commit(self) -> None:
        """Commit the active transaction."""

    @abc.abstractmethod
    def rollback(self) -> None:
        """Roll back the active transaction."""

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Run a block in a transaction: commit on success, roll back on error.

        Interrupts such as :class:`KeyboardInterrupt` roll back too.
        """
        self.begin_transaction()
        try:
            yield self
        except BaseException:
            if self._in_transaction:
                self.rollback()
            raise
        self.commit()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    @property
    def executed_queries(self) -> tuple[str, ...]:
        """Statements passed to :meth:`execute` / :meth:`query`, oldest first."""
        return tuple(self._executed_queries)

    def clear_executed_queries(self) -> None:
        self._executed_queries.clear()

    # ------------------------------------------------------------------
    # Helpers for implementations
    # ------------------------------------------------------------------

    def _require_connected(self, operation: str) -> None:
        if not self._connected:
            msg = f"Cannot {operation}: not connected"
            raise ConnectionFailedError(msg)

    def _require_transaction(self, active: bool, operation: str) -> None:
        if self._in_transaction != active:
            state = "already in a transaction" if self._in_transaction else "no active transaction"
            msg = f"Cannot {operation}: {state}"
            raise TransactionError(msg)

    def _record(self, statement: str) -> None:
        self._executed_queries.append(statement)

    # ------------------------------------------------------------------
    # Protocol support
    # ------------------------------------------------------------------

    def __enter__(self) -> Connection:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.disconnect()

    def __copy__(self) -> Connection:
        msg = f"{type(self).__name__} owns a native session and cannot be copied"
        raise TypeError(msg)

    def __deepcopy__(self, memo: dict[int, object]) -> Connection:
        return self.__copy__()

    def __repr__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"<{type(self).__name__} {state}>"
