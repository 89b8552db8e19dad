# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations and defaults shared by every driver."""

from enum import StrEnum


class DatabaseType(StrEnum):
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    MOCK = "mock"


class ValueKind(StrEnum):
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    BLOB = "blob"


class ErrorKind(StrEnum):
    CONNECTION_FAILED = "connection_failed"
    QUERY_EXECUTION_FAILED = "query_execution_failed"
    TRANSACTION_FAILED = "transaction_failed"


DEFAULT_PORTS: dict[DatabaseType, int] = {
    DatabaseType.POSTGRESQL: 5432,
    DatabaseType.MYSQL: 3306,
    DatabaseType.MOCK: 0,
}

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

DEFAULT_MIGRATIONS_TABLE = "_dig_migrations"
DEFAULT_MIGRATIONS_DIR = "migrations"
DEFAULT_SEEDERS_DIR = "database/seeders"
