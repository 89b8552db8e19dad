# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Backend drivers and the registry that maps database types to them."""

from __future__ import annotations

from digdb.connection import Connection
from digdb.core.constants import DatabaseType
from digdb.core.exceptions import ConfigurationError


def get_driver_class(database_type: DatabaseType | str) -> type[Connection]:
    """Return the :class:`Connection` subclass for *database_type*.

    Driver modules are imported lazily so that a missing client library only
    matters for the backend that needs it.

    Raises:
        ConfigurationError: If *database_type* names no known backend.
    """
    try:
        db_type = DatabaseType(database_type)
    except ValueError:
        msg = f"Unknown database type: {database_type!r}. Use 'postgresql', 'mysql' or 'mock'."
        raise ConfigurationError(msg) from None

    if db_type is DatabaseType.POSTGRESQL:
        from digdb.drivers.postgresql import PostgreSQLConnection

        return PostgreSQLConnection
    if db_type is DatabaseType.MYSQL:
        from digdb.drivers.mysql import MySQLConnection

        return MySQLConnection

    from digdb.drivers.mock import MockConnection

    return MockConnection


def create_connection(database_type: DatabaseType | str) -> Connection:
    """Instantiate an unconnected driver for *database_type*.

    Raises:
        ConfigurationError: For an unknown type.
        UnsupportedDatabaseError: If the backend's client library is missing.
    """
    return get_driver_class(database_type)()


__all__ = ["create_connection", "get_driver_class"]
