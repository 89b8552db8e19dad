# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Native cell -> :class:`SqlValue` coercion tables.

Drivers hand every cell over in its raw textual form together with the
backend's type code (a PostgreSQL OID or a MySQL field type).  Each cell is
classified on its own through a fixed table:

* integer family  -> ``integer`` (base 10, signed 64-bit)
* float/decimal   -> ``float``
* boolean         -> ``boolean`` (``t``, ``true`` or ``1`` are true)
* character/JSON  -> ``text``
* binary/blob     -> ``blob``
* date/time       -> ``text``, verbatim
* anything else   -> ``text``

A value that fails to parse in a numeric column becomes ``null`` instead of
raising.  Backend NULLs skip classification entirely.
"""

from __future__ import annotations

import re
from enum import IntEnum

from digdb.core.constants import INT64_MAX, INT64_MIN, ValueKind
from digdb.types import SqlValue

RawCell = bytes | bytearray | memoryview | str | None


class PgType(IntEnum):
    """PostgreSQL type OIDs (``pg_type.oid``) the coercion table knows about."""

    BOOL = 16
    BYTEA = 17
    CHAR = 18
    NAME = 19
    INT8 = 20
    INT2 = 21
    INT4 = 23
    TEXT = 25
    JSON = 114
    XML = 142
    FLOAT4 = 700
    FLOAT8 = 701
    BPCHAR = 1042
    VARCHAR = 1043
    DATE = 1082
    TIME = 1083
    TIMESTAMP = 1114
    TIMESTAMPTZ = 1184
    INTERVAL = 1186
    TIMETZ = 1266
    NUMERIC = 1700
    UUID = 2950
    JSONB = 3802


class MySQLFieldType(IntEnum):
    """MySQL ``enum_field_types`` codes."""

    DECIMAL = 0
    TINY = 1
    SHORT = 2
    LONG = 3
    FLOAT = 4
    DOUBLE = 5
    NULL = 6
    TIMESTAMP = 7
    LONGLONG = 8
    INT24 = 9
    DATE = 10
    TIME = 11
    DATETIME = 12
    YEAR = 13
    NEWDATE = 14
    VARCHAR = 15
    BIT = 16
    JSON = 245
    NEWDECIMAL = 246
    ENUM = 247
    SET = 248
    TINY_BLOB = 249
    MEDIUM_BLOB = 250
    LONG_BLOB = 251
    BLOB = 252
    VAR_STRING = 253
    STRING = 254
    GEOMETRY = 255


# Character set number MySQL reports for binary (not character) data.
MYSQL_BINARY_CHARSET = 63

# Field types whose payload is either character or binary data, depending on
# the column's character set.
MYSQL_CHARSET_DEPENDENT_TYPES: frozenset[int] = frozenset(
    {
        MySQLFieldType.VARCHAR,
        MySQLFieldType.VAR_STRING,
        MySQLFieldType.STRING,
        MySQLFieldType.TINY_BLOB,
        MySQLFieldType.MEDIUM_BLOB,
        MySQLFieldType.LONG_BLOB,
        MySQLFieldType.BLOB,
    }
)

PG_TYPE_KINDS: dict[int, ValueKind] = {
    PgType.BOOL: ValueKind.BOOLEAN,
    PgType.INT2: ValueKind.INTEGER,
    PgType.INT4: ValueKind.INTEGER,
    PgType.INT8: ValueKind.INTEGER,
    PgType.FLOAT4: ValueKind.FLOAT,
    PgType.FLOAT8: ValueKind.FLOAT,
    PgType.NUMERIC: ValueKind.FLOAT,
    PgType.BYTEA: ValueKind.BLOB,
    PgType.CHAR: ValueKind.TEXT,
    PgType.NAME: ValueKind.TEXT,
    PgType.TEXT: ValueKind.TEXT,
    PgType.BPCHAR: ValueKind.TEXT,
    PgType.VARCHAR: ValueKind.TEXT,
    PgType.JSON: ValueKind.TEXT,
    PgType.JSONB: ValueKind.TEXT,
    PgType.XML: ValueKind.TEXT,
    PgType.UUID: ValueKind.TEXT,
    PgType.DATE: ValueKind.TEXT,
    PgType.TIME: ValueKind.TEXT,
    PgType.TIMETZ: ValueKind.TEXT,
    PgType.TIMESTAMP: ValueKind.TEXT,
    PgType.TIMESTAMPTZ: ValueKind.TEXT,
    PgType.INTERVAL: ValueKind.TEXT,
}

MYSQL_TYPE_KINDS: dict[int, ValueKind] = {
    MySQLFieldType.TINY: ValueKind.INTEGER,
    MySQLFieldType.SHORT: ValueKind.INTEGER,
    MySQLFieldType.LONG: ValueKind.INTEGER,
    MySQLFieldType.LONGLONG: ValueKind.INTEGER,
    MySQLFieldType.INT24: ValueKind.INTEGER,
    MySQLFieldType.FLOAT: ValueKind.FLOAT,
    MySQLFieldType.DOUBLE: ValueKind.FLOAT,
    MySQLFieldType.DECIMAL: ValueKind.FLOAT,
    MySQLFieldType.NEWDECIMAL: ValueKind.FLOAT,
    MySQLFieldType.VARCHAR: ValueKind.TEXT,
    MySQLFieldType.VAR_STRING: ValueKind.TEXT,
    MySQLFieldType.STRING: ValueKind.TEXT,
    MySQLFieldType.JSON: ValueKind.TEXT,
    MySQLFieldType.ENUM: ValueKind.TEXT,
    MySQLFieldType.SET: ValueKind.TEXT,
    MySQLFieldType.TINY_BLOB: ValueKind.BLOB,
    MySQLFieldType.MEDIUM_BLOB: ValueKind.BLOB,
    MySQLFieldType.LONG_BLOB: ValueKind.BLOB,
    MySQLFieldType.BLOB: ValueKind.BLOB,
    MySQLFieldType.TIMESTAMP: ValueKind.TEXT,
    MySQLFieldType.DATETIME: ValueKind.TEXT,
    MySQLFieldType.DATE: ValueKind.TEXT,
    MySQLFieldType.NEWDATE: ValueKind.TEXT,
    MySQLFieldType.TIME: ValueKind.TEXT,
}

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_BYTEA_ESCAPE_RE = re.compile(rb"\\(\\|[0-3][0-7]{2})")
_TRUE_LITERALS = frozenset({"t", "true", "1"})


# ---------------------------------------------------------------------------
# Raw cell helpers
# ---------------------------------------------------------------------------


def cell_bytes(cell: bytes | bytearray | memoryview | str) -> bytes:
    """Return an owned ``bytes`` copy of *cell*."""
    if isinstance(cell, str):
        return cell.encode("utf-8")
    return bytes(cell)


def cell_text(cell: bytes | bytearray | memoryview | str) -> str:
    if isinstance(cell, str):
        return cell
    return bytes(cell).decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def parse_integer(text: str) -> SqlValue:
    if not _INTEGER_RE.fullmatch(text):
        return SqlValue.null()
    number = int(text)
    if not INT64_MIN <= number <= INT64_MAX:
        return SqlValue.null()
    return SqlValue.integer(number)


def parse_float(text: str) -> SqlValue:
    # float() tolerates surrounding whitespace and digit underscores; the
    # backends never emit either, so treat them as malformed.
    if not text or text != text.strip() or "_" in text:
        return SqlValue.null()
    try:
        return SqlValue.float(float(text))
    except ValueError:
        return SqlValue.null()


def parse_boolean(text: str) -> SqlValue:
    return SqlValue.boolean(text in _TRUE_LITERALS)


def decode_bytea(cell: bytes | bytearray | memoryview | str) -> bytes:
    """Decode PostgreSQL's textual ``bytea`` output (hex or escape format)."""
    data = cell_bytes(cell)
    if data.startswith(b"\\x"):
        try:
            return bytes.fromhex(data[2:].decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            return data
    if b"\\" not in data:
        return data
    return _BYTEA_ESCAPE_RE.sub(_unescape_octet, data)


def _unescape_octet(match: re.Match[bytes]) -> bytes:
    token = match.group(1)
    if token == b"\\":
        return b"\\"
    return bytes([int(token, 8)])


def _convert(kind: ValueKind, cell: bytes | bytearray | memoryview | str) -> SqlValue:
    if kind is ValueKind.INTEGER:
        return parse_integer(cell_text(cell))
    if kind is ValueKind.FLOAT:
        return parse_float(cell_text(cell))
    if kind is ValueKind.BOOLEAN:
        return parse_boolean(cell_text(cell))
    if kind is ValueKind.BLOB:
        return SqlValue.blob(cell_bytes(cell))
    return SqlValue.text(cell_text(cell))


# ---------------------------------------------------------------------------
# Per-backend entry points
# ---------------------------------------------------------------------------


def postgres_kind(oid: int) -> ValueKind:
    return PG_TYPE_KINDS.get(oid, ValueKind.TEXT)


def mysql_kind(field_type: int, charset: int | None = None) -> ValueKind:
    """Map a MySQL field type and column character set to a value kind.

    TEXT and BLOB columns share type codes, as do CHAR/VARCHAR and
    BINARY/VARBINARY.  Only the binary character set tells them apart; the
    BINARY column flag is also set by ``_bin`` collations and is not used.
    When the character set is unknown the type table decides.
    """
    kind = MYSQL_TYPE_KINDS.get(field_type, ValueKind.TEXT)
    if charset is None or field_type not in MYSQL_CHARSET_DEPENDENT_TYPES:
        return kind
    return ValueKind.BLOB if charset == MYSQL_BINARY_CHARSET else ValueKind.TEXT


def coerce_postgres_cell(cell: RawCell, oid: int) -> SqlValue:
    """Coerce one PostgreSQL text-format cell tagged with its type OID."""
    if cell is None:
        return SqlValue.null()
    kind = postgres_kind(oid)
    if kind is ValueKind.BLOB:
        return SqlValue.blob(decode_bytea(cell))
    return _convert(kind, cell)


def coerce_mysql_cell(cell: RawCell, field_type: int, charset: int | None = None) -> SqlValue:
    """Coerce one MySQL text-protocol cell tagged with its field type and charset."""
    if cell is None:
        return SqlValue.null()
    return _convert(mysql_kind(field_type, charset), cell)
