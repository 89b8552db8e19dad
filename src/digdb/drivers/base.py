# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Transaction handling shared by drivers that wrap a native session."""

from __future__ import annotations

import abc
from typing import ClassVar

from digdb.connection import Connection


class NativeConnection(Connection):
    """Base for drivers that own a native client session.

    Transaction control is issued as plain statements on the session, which
    runs in autocommit mode otherwise.  ``in_transaction`` only changes once
    the backend accepted the statement.
    """

    BEGIN_STATEMENT: ClassVar[str] = "BEGIN"
    COMMIT_STATEMENT: ClassVar[str] = "COMMIT"
    ROLLBACK_STATEMENT: ClassVar[str] = "ROLLBACK"

    def begin_transaction(self) -> None:
        self._require_connected("begin a transaction")
        self._require_transaction(False, "begin a transaction")
        self._run_control(self.BEGIN_STATEMENT)
        self._in_transaction = True

    def commit(self) -> None:
        self._require_connected("commit")
        self._require_transaction(True, "commit")
        self._run_control(self.COMMIT_STATEMENT)
        self._in_transaction = False

    def rollback(self) -> None:
        self._require_connected("roll back")
        self._require_transaction(True, "roll back")
        self._run_control(self.ROLLBACK_STATEMENT)
        self._in_transaction = False

    @abc.abstractmethod
    def _run_control(self, statement: str) -> None:
        """Issue a transaction-control statement.

        Raises:
            TransactionError: If the backend rejects the statement.
        """
