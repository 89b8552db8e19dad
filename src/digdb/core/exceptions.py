# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for digdb.

Connection operations only ever raise one of the three kinds tagged with an
:class:`~digdb.core.constants.ErrorKind`.  Native error codes and messages
stay in the log; the exception carries a short description and chains the
library error as ``__cause__``.
"""

from __future__ import annotations

from typing import ClassVar

from digdb.core.constants import ErrorKind


class DigError(Exception):
    """Base exception for all digdb errors."""

    kind: ClassVar[ErrorKind | None] = None


class ConnectionFailedError(DigError):
    """No usable session: failed connect or operation while disconnected."""

    kind = ErrorKind.CONNECTION_FAILED


class QueryExecutionError(DigError):
    """The backend rejected a statement or returned the wrong result shape."""

    kind = ErrorKind.QUERY_EXECUTION_FAILED


class TransactionError(DigError):
    """Transaction state-machine violation or rejected control statement."""

    kind = ErrorKind.TRANSACTION_FAILED


class ConfigurationError(DigError):
    """Invalid or missing configuration."""


class UnsupportedDatabaseError(ConfigurationError):
    """The client library for the requested backend is not installed."""


class MigrationError(DigError):
    """A migration file could not be loaded or applied."""


class SeedError(DigError):
    """A seed file could not be loaded or executed."""
