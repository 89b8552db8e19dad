# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Canonical SQL value model.

Every cell a driver reads is normalized into exactly one :class:`SqlValue`
kind, regardless of the backend that produced it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from digdb.core.constants import INT64_MAX, INT64_MIN, DatabaseType, ValueKind

_PAYLOAD_TYPES: dict[ValueKind, type | tuple[type, ...]] = {
    ValueKind.NULL: type(None),
    ValueKind.BOOLEAN: bool,
    ValueKind.INTEGER: int,
    ValueKind.FLOAT: float,
    ValueKind.TEXT: str,
    ValueKind.BLOB: bytes,
}


@dataclass(frozen=True, slots=True)
class SqlValue:
    """An immutable, backend-independent SQL value.

    Use the named constructors (:meth:`integer`, :meth:`text`, ...) rather
    than building instances directly; they normalize and validate payloads.
    """

    kind: ValueKind
    value: Any = None

    def __post_init__(self) -> None:
        expected = _PAYLOAD_TYPES[self.kind]
        if not isinstance(self.value, expected):
            msg = f"{self.kind} value must be {expected}, got {type(self.value).__name__}"
            raise TypeError(msg)
        if self.kind is ValueKind.INTEGER and isinstance(self.value, bool):
            raise TypeError("integer value must not be a bool")

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def null(cls) -> SqlValue:
        return _NULL

    @classmethod
    def boolean(cls, value: bool) -> SqlValue:
        return cls(ValueKind.BOOLEAN, bool(value))

    @classmethod
    def integer(cls, value: int) -> SqlValue:
        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"integer value must be an int, got {type(value).__name__}"
            raise TypeError(msg)
        if not INT64_MIN <= value <= INT64_MAX:
            msg = f"integer value {value} is outside the signed 64-bit range"
            raise ValueError(msg)
        return cls(ValueKind.INTEGER, value)

    @classmethod
    def float(cls, value: float) -> SqlValue:
        return cls(ValueKind.FLOAT, float(value))

    @classmethod
    def text(cls, value: str | bytes) -> SqlValue:
        if isinstance(value, (bytes, bytearray, memoryview)):
            value = bytes(value).decode("utf-8", errors="replace")
        return cls(ValueKind.TEXT, str(value))

    @classmethod
    def blob(cls, value: bytes | bytearray | memoryview) -> SqlValue:
        return cls(ValueKind.BLOB, bytes(value))

    @classmethod
    def from_python(cls, obj: object) -> SqlValue:
        """Wrap a plain Python object in the matching kind."""
        if isinstance(obj, SqlValue):
            return obj
        if obj is None:
            return _NULL
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.float(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.blob(obj)
        msg = f"Cannot convert {type(obj).__name__} to SqlValue"
        raise TypeError(msg)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def to_python(self) -> Any:
        return self.value

    def to_sql_literal(self, database_type: DatabaseType | None = None) -> str:
        """Render the value as a SQL literal suitable for inlining.

        Text and blob literals depend on the backend.  MySQL treats a
        backslash inside a string as an escape under its default
        ``sql_mode``, so backslashes are doubled for it.  PostgreSQL reads
        ``x'..'`` as a bit string, so blobs are rendered as a ``bytea``
        hex literal there.  Without *database_type* the ANSI forms are used.
        """
        kind = self.kind
        if kind is ValueKind.NULL:
            return "NULL"
        if kind is ValueKind.BOOLEAN:
            return "TRUE" if self.value else "FALSE"
        if kind is ValueKind.INTEGER:
            return str(self.value)
        if kind is ValueKind.FLOAT:
            if math.isnan(self.value):
                return "'NaN'"
            if math.isinf(self.value):
                return "'Infinity'" if self.value > 0 else "'-Infinity'"
            return repr(self.value)
        if kind is ValueKind.TEXT:
            text = self.value
            if database_type is DatabaseType.MYSQL:
                text = text.replace("\\", "\\\\")
            return "'" + text.replace("'", "''") + "'"
        if database_type is DatabaseType.POSTGRESQL:
            return "'\\x" + self.value.hex() + "'::bytea"
        return "x'" + self.value.hex() + "'"

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "SqlValue.null()"
        return f"SqlValue.{self.kind.value}({self.value!r})"


_NULL = SqlValue(ValueKind.NULL)
