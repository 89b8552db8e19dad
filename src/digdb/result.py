# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Driver-independent query result container.

A :class:`QueryResult` owns one column-name tuple that every :class:`Row`
references.  Rows never release the shared columns; only
:meth:`QueryResult.release` does, exactly once.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from types import TracebackType
from typing import Any

from digdb.types import SqlValue


class Row:
    """One result row: values in column order plus a shared column reference."""

    __slots__ = ("_columns", "_released", "_values")

    def __init__(self, values: Sequence[SqlValue], columns: tuple[str, ...]) -> None:
        self._values: tuple[SqlValue, ...] = tuple(values)
        self._columns = columns
        self._released = False

    @property
    def values(self) -> tuple[SqlValue, ...]:
        return self._values

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    @property
    def released(self) -> bool:
        return self._released

    def get(self, column_name: str) -> SqlValue | None:
        """Return the value for *column_name*, or ``None`` if it is absent."""
        for i, col in enumerate(self._columns):
            if col == column_name:
                if i >= len(self._values):
                    return None
                return self._values[i]
        return None

    def release(self) -> None:
        """Drop this row's values.  The shared column tuple is left alone."""
        self._values = ()
        self._released = True

    def to_dict(self) -> dict[str, Any]:
        return {col: value.to_python() for col, value in zip(self._columns, self._values)}

    def __getitem__(self, key: int | str) -> SqlValue:
        if isinstance(key, str):
            value = self.get(key)
            if value is None:
                raise KeyError(key)
            return value
        return self._values[key]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[SqlValue]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._columns == other._columns and self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Row({dict(zip(self._columns, self._values))!r})"


class QueryResult:
    """Columns and rows returned by :meth:`Connection.query`.

    Parameters:
        columns: Column names in projection order.
        rows: One sequence of :class:`SqlValue` per row; each must have
            exactly ``len(columns)`` entries.
    """

    def __init__(
        self,
        columns: Iterable[str] = (),
        rows: Iterable[Sequence[SqlValue]] = (),
    ) -> None:
        self._columns: tuple[str, ...] = tuple(columns)
        self._rows: list[Row] = []
        width = len(self._columns)
        for index, values in enumerate(rows):
            if len(values) != width:
                msg = f"Row {index} has {len(values)} values, expected {width}"
                raise ValueError(msg)
            self._rows.append(Row(values, self._columns))
        self._released = False
        self.release_count = 0

    @classmethod
    def empty(cls) -> QueryResult:
        return cls()

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    @property
    def rows(self) -> list[Row]:
        return self._rows

    @property
    def is_empty(self) -> bool:
        return not self._rows

    @property
    def released(self) -> bool:
        return self._released

    def column_index(self, column_name: str) -> int | None:
        for i, col in enumerate(self._columns):
            if col == column_name:
                return i
        return None

    def first(self) -> Row | None:
        return self._rows[0] if self._rows else None

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> Row:
        return self._rows[index]

    # ------------------------------------------------------------------
    # Release
    # ------------------------------------------------------------------

    def release(self) -> None:
        """Release columns, then each row's values, then the row list.

        Safe to call more than once; later calls do nothing.
        """
        if self._released:
            return
        self._released = True
        if not self._columns and not self._rows:
            return
        self._columns = ()
        self.release_count += 1
        for row in self._rows:
            row.release()
        self._rows = []

    def __enter__(self) -> QueryResult:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"QueryResult(columns={self._columns!r}, rows={len(self._rows)})"
