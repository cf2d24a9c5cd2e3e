#!/usr/bin/env python3
"""nGQL type names and identifier rules shared by schema and statement generation."""

import re
from enum import Enum

from ....core.errors import SchemaError

MAX_STRING_LENGTH = 65535
MAX_IDENTIFIER_LENGTH = 128

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

RESERVED_KEYWORDS = frozenset(
    {"SPACE", "TAG", "EDGE", "VERTEX", "INDEX", "INSERT", "UPDATE", "DELETE", "WHERE", "YIELD"}
)


class NebulaType(Enum):
    BOOL = "BOOL"
    INT8 = "INT8"
    INT16 = "INT16"
    INT32 = "INT32"
    INT64 = "INT64"
    DOUBLE = "DOUBLE"
    STRING = "STRING"
    FIXED_STRING = "FIXED_STRING"
    VARCHAR = "VARCHAR"
    TIMESTAMP = "TIMESTAMP"
    DATE = "DATE"
    TIME = "TIME"
    DATETIME = "DATETIME"

    @property
    def is_integer(self) -> bool:
        return self in INTEGER_TYPES

    @property
    def is_string(self) -> bool:
        return self in DEFAULT_STRING_LENGTHS


TYPE_ALIASES = {
    "INT": NebulaType.INT64,
    "INTEGER": NebulaType.INT64,
    "FLOAT": NebulaType.DOUBLE,
    "BOOLEAN": NebulaType.BOOL,
}

INTEGER_TYPES = frozenset({NebulaType.INT8, NebulaType.INT16, NebulaType.INT32, NebulaType.INT64})

DEFAULT_STRING_LENGTHS = {
    NebulaType.STRING: 256,
    NebulaType.FIXED_STRING: 32,
    NebulaType.VARCHAR: 256,
}

NUMERIC_TYPE_NAMES = frozenset({"INT", "INT8", "INT16", "INT32", "INT64", "FLOAT", "DOUBLE"})


def resolve_nebula_type(type_name: str) -> NebulaType:
    """Resolve a declared type name (case-insensitive, aliases allowed).

    Raises:
        SchemaError: the name is not a known nGQL type or alias
    """
    upper = (type_name or "").upper()
    if upper in TYPE_ALIASES:
        return TYPE_ALIASES[upper]
    try:
        return NebulaType(upper)
    except ValueError:
        raise SchemaError(f"Unsupported type: {type_name}") from None


def convert_to_nebula_type(type_name: str, string_length: int | None = 0) -> str:
    """Return the DDL spelling of a declared type.

    String types get a length suffix: `string_length` when positive, else the
    per-type default (STRING/VARCHAR 256, FIXED_STRING 32).

    >>> convert_to_nebula_type("string", 300)
    'STRING(300)'
    >>> convert_to_nebula_type("int")
    'INT64'

    Raises:
        SchemaError: unsupported type or a length above 65535
    """
    nebula_type = resolve_nebula_type(type_name)
    if not nebula_type.is_string:
        return nebula_type.value

    length = string_length if string_length and string_length > 0 else DEFAULT_STRING_LENGTHS[nebula_type]
    if length > MAX_STRING_LENGTH:
        raise SchemaError(f"String length exceeds maximum allowed: {length}", context=type_name)
    return f"{nebula_type.value}({length})"


def is_valid_identifier(name: str) -> bool:
    if not name or len(name) > MAX_IDENTIFIER_LENGTH:
        return False
    if name in RESERVED_KEYWORDS:
        return False
    return IDENTIFIER_PATTERN.fullmatch(name) is not None


def quote_identifier(name: str) -> str:
    """Back-tick quote a tag, edge or property name unless it is a plain identifier."""
    if not name or IDENTIFIER_PATTERN.fullmatch(name):
        return name
    return f"`{name}`"


def get_index_name(element_name: str, property_name: str) -> str:
    return f"{element_name}_{property_name}_idx"


def _base_type(ddl_type: str) -> str:
    return ddl_type.split("(", 1)[0].upper()


def is_numeric_type(ddl_type: str) -> bool:
    return _base_type(ddl_type) in NUMERIC_TYPE_NAMES


def is_string_type(ddl_type: str) -> bool:
    base = _base_type(ddl_type)
    return "STRING" in base or "VARCHAR" in base
