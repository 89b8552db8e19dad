# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""High-level database handle.

:class:`Database` picks the driver for a :class:`ConnectionConfig`, opens
the session and forwards the :class:`Connection` operations to it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType

from digdb.config import ConnectionConfig
from digdb.connection import Connection
from digdb.core.constants import DatabaseType
from digdb.drivers import create_connection
from digdb.result import QueryResult

logger = logging.getLogger(__name__)


class Database:
    """A connected session plus the backend type it talks to."""

    def __init__(self, connection: Connection, database_type: DatabaseType) -> None:
        self._connection = connection
        self._database_type = database_type

    @classmethod
    def connect(
        cls,
        config: ConnectionConfig,
        *,
        connection: Connection | None = None,
    ) -> Database:
        """Open a session for *config* and wrap it.

        Args:
            config: Where and how to connect.
            connection: A prepared driver to use instead of a fresh one from
                the registry (for example a scripted ``MockConnection``).

        Raises:
            ConfigurationError: Unknown backend or missing client library.
            ConnectionFailedError: The backend refused the session.
        """
        conn = connection if connection is not None else create_connection(config.database_type)
        conn.connect(config)
        logger.info("Opened %s session", config.database_type.value)
        return cls(conn, config.database_type)

    # ------------------------------------------------------------------
    # Delegated operations
    # ------------------------------------------------------------------

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def database_type(self) -> DatabaseType:
        return self._database_type

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    @property
    def in_transaction(self) -> bool:
        return self._connection.in_transaction

    def execute(self, statement: str) -> None:
        self._connection.execute(statement)

    def query(self, statement: str) -> QueryResult:
        return self._connection.query(statement)

    def begin_transaction(self) -> None:
        self._connection.begin_transaction()

    def commit(self) -> None:
        self._connection.commit()

    def rollback(self) -> None:
        self._connection.rollback()

    @contextmanager
    def transaction(self) -> Iterator[Database]:
        with self._connection.transaction():
            yield self

    def disconnect(self) -> None:
        self._connection.disconnect()

    def __enter__(self) -> Database:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.disconnect()

    def __repr__(self) -> str:
        return f"<Database {self._database_type.value} {self._connection!r}>"
