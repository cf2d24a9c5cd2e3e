"""
Graph Statement Domain

Turns a GraphMapping into nGQL text:
- Schema DDL (CREATE TAG / CREATE EDGE, indexes, cleanup)
- Batched INSERT VERTEX / INSERT EDGE and per-record UPSERT VERTEX statements
- Shared type-name conversion and identifier quoting rules
"""

from .schema_manager import SchemaElement, SchemaManager, SchemaProperty, get_schema_manager
from .statement_generator import JsonKind, StatementGenerator, Value, format_value, infer_type
from .types import (
    NebulaType,
    convert_to_nebula_type,
    get_index_name,
    is_valid_identifier,
    quote_identifier,
    resolve_nebula_type,
)

__all__ = [
    'SchemaElement',
    'SchemaManager',
    'SchemaProperty',
    'get_schema_manager',
    'JsonKind',
    'StatementGenerator',
    'Value',
    'format_value',
    'infer_type',
    'NebulaType',
    'convert_to_nebula_type',
    'get_index_name',
    'is_valid_identifier',
    'quote_identifier',
    'resolve_nebula_type',
]
