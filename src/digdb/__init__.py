# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""digdb - synchronous PostgreSQL/MySQL access with a backend-neutral value model."""

__version__ = "0.1.0"

from digdb.config import ConnectionConfig
from digdb.connection import Connection
from digdb.core.constants import DatabaseType, ErrorKind, ValueKind
from digdb.core.exceptions import (
    ConfigurationError,
    ConnectionFailedError,
    DigError,
    MigrationError,
    SeedError,
    QueryExecutionError,
    TransactionError,
    UnsupportedDatabaseError,
)
from digdb.database import Database
from digdb.drivers import create_connection, get_driver_class
from digdb.drivers.mock import MockConnection
from digdb.migrations import MigrationManager, MigrationState, SqlMigration
from digdb.result import QueryResult, Row
from digdb.seeders import Seeder, SeedFile
from digdb.types import SqlValue

__all__ = [
    "ConfigurationError",
    "Connection",
    "ConnectionConfig",
    "ConnectionFailedError",
    "Database",
    "DatabaseType",
    "DigError",
    "ErrorKind",
    "MigrationError",
    "MigrationManager",
    "MigrationState",
    "MockConnection",
    "QueryExecutionError",
    "QueryResult",
    "Row",
    "SeedError",
    "SeedFile",
    "Seeder",
    "SqlMigration",
    "SqlValue",
    "TransactionError",
    "UnsupportedDatabaseError",
    "ValueKind",
    "__version__",
    "create_connection",
    "get_driver_class",
]
