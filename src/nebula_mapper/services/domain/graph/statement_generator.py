#!/usr/bin/env python3
"""Mapping-driven nGQL data statement generation.

For every vertex mapping (in declaration order) the records under its source
path are turned into batched statements:

    INSERT VERTEX Place (cid, name) VALUES "1":(1, "Cafe"), "2":(2, "Bar");

Vertex mappings with dynamic fields enabled emit one UPSERT per record instead
and skip records whose id was already seen for that tag:

    UPSERT VERTEX User "u1" (username, badge) VALUES ("kim", "gold");

Edge mappings follow, batched the same way:

    INSERT EDGE Comment (date) VALUES "u1" -> "1":("2024-01-01 00:00:00");

String values are wrapped in double quotes as-is; embedded quotes and
backslashes are not escaped.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from ....core.config import DEFAULT_BATCH_SIZE
from ....core.errors import ConfigError, DataError, TransformError
from ..json_path import PathNavigator
from ..mapping.model import EdgeMapping, GraphMapping, Property, VertexMapping
from ..transform import TransformEngine, TransformValue
from .types import NebulaType, quote_identifier, resolve_nebula_type

logger = logging.getLogger(__name__)


class JsonKind(Enum):
    NULL = "null"
    BOOL = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"

    @classmethod
    def of(cls, value: Any) -> "JsonKind":
        # bool is checked before int: True is an int in Python
        if value is None:
            return cls.NULL
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, float):
            return cls.FLOAT
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, dict):
            return cls.OBJECT
        if isinstance(value, list):
            return cls.ARRAY
        raise DataError(f"Unsupported JSON value: {type(value).__name__}")


# Type tag handed to transforms for each scalar kind
SOURCE_TYPES = {
    JsonKind.BOOL: NebulaType.BOOL,
    JsonKind.INTEGER: NebulaType.INT64,
    JsonKind.FLOAT: NebulaType.DOUBLE,
    JsonKind.STRING: NebulaType.STRING,
}


@dataclass
class Value:
    """One extracted property value, formatted right after extraction."""

    nebula_type: NebulaType
    value: Union[str, int, float, bool, None] = None
    is_null: bool = False


def format_value(value: Value) -> str:
    """Render a Value as an nGQL literal.

    NULL for nulls, bare true/false for booleans, double-quoted text for
    strings and decimal text for numbers.
    """
    if value.is_null:
        return "NULL"
    payload = value.value
    if isinstance(payload, bool):
        return "true" if payload else "false"
    if isinstance(payload, str):
        return f'"{payload}"'
    if isinstance(payload, float):
        return repr(payload)
    return str(payload)


def infer_type(raw: Any) -> NebulaType:
    kind = JsonKind.of(raw)
    return SOURCE_TYPES.get(kind, NebulaType.STRING)


def join_values(values: list[str], delimiter: str = ", ") -> str:
    return delimiter.join(values)


class StatementGenerator:
    """Turns a GraphMapping plus a JSON document into INSERT/UPSERT statements.

    The navigator (and its path cache) and the transform engine are injected so
    that one pair can be shared across many generation runs.
    """

    def __init__(
        self,
        navigator: Optional[PathNavigator] = None,
        transform_engine: Optional[TransformEngine] = None,
    ):
        self.navigator = navigator or PathNavigator()
        self.transform_engine = transform_engine or TransformEngine()

    def generate_batch_statements(
        self,
        mapping: GraphMapping,
        data: Any,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> list[str]:
        """Generate all vertex statements, then all edge statements.

        Args:
            mapping: Built GraphMapping
            data: Parsed JSON document
            batch_size: Maximum VALUES tuples per INSERT statement

        Returns:
            Statements in mapping declaration order

        Raises:
            ConfigError: batch_size is not positive
            DataError: path resolution, null/invalid key or value conversion failure
            TransformError: unknown transform or transform failure
            SchemaError: a property type is not a known nGQL type
        """
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
            raise ConfigError(f"Batch size must be a positive integer, got {batch_size!r}")

        statements = []
        processed_vertices: dict[str, set[str]] = {}

        for vertex_mapping in mapping.vertices:
            seen = processed_vertices.setdefault(vertex_mapping.tag_name, set())
            statements.extend(self.generate_vertex_statements(vertex_mapping, data, batch_size, seen))

        for edge_mapping in mapping.edges:
            statements.extend(self.generate_edge_statements(edge_mapping, data, batch_size))

        logger.info(
            f"Generated {len(statements)} data statements for {len(mapping.vertices)} tags "
            f"and {len(mapping.edges)} edges"
        )
        return statements

    def generate_vertex_statements(
        self,
        vertex_mapping: VertexMapping,
        data: Any,
        batch_size: int,
        processed: Optional[set[str]] = None,
    ) -> list[str]:
        processed = processed if processed is not None else set()
        records = self.get_array_or_single(data, vertex_mapping.source_path)
        prop_names = [quote_identifier(prop.name) for prop in vertex_mapping.properties]
        dynamic = vertex_mapping.dynamic_fields.enabled

        statements = []
        batch = []
        skipped = 0

        for record in records:
            vertex_id = self.get_vertex_id(record, vertex_mapping.key_path)

            if dynamic:
                if vertex_id in processed:
                    skipped += 1
                    continue
                processed.add(vertex_id)

            prop_values = self.extract_properties(record, vertex_mapping.properties)

            if dynamic:
                names = list(prop_names)
                self.process_dynamic_properties(record, vertex_mapping, names, prop_values)
                statements.append(
                    f"UPSERT VERTEX {quote_identifier(vertex_mapping.tag_name)} {vertex_id} "
                    f"({join_values(names)}) VALUES ({join_values(prop_values)});"
                )
                continue

            batch.append(f"{vertex_id}:({join_values(prop_values)})")
            if len(batch) >= batch_size:
                statements.append(self._insert_statement("VERTEX", vertex_mapping.tag_name, prop_names, batch))
                batch = []

        if batch:
            statements.append(self._insert_statement("VERTEX", vertex_mapping.tag_name, prop_names, batch))

        if skipped:
            logger.debug(f"Skipped {skipped} duplicate records for tag {vertex_mapping.tag_name}")
        logger.debug(
            f"Tag {vertex_mapping.tag_name}: {len(records)} records, {len(statements)} statements"
        )
        return statements

    def generate_edge_statements(self, edge_mapping: EdgeMapping, data: Any, batch_size: int) -> list[str]:
        records = self.get_array_or_single(data, edge_mapping.source_path)
        prop_names = [quote_identifier(prop.name) for prop in edge_mapping.properties]

        statements = []
        batch = []

        for record in records:
            src_id = self.get_vertex_id(record, edge_mapping.from_endpoint.key_path)
            dst_id = self.get_vertex_id(record, edge_mapping.to_endpoint.key_path)
            prop_values = self.extract_properties(record, edge_mapping.properties)

            batch.append(f"{src_id} -> {dst_id}:({join_values(prop_values)})")
            if len(batch) >= batch_size:
                statements.append(self._insert_statement("EDGE", edge_mapping.edge_name, prop_names, batch))
                batch = []

        if batch:
            statements.append(self._insert_statement("EDGE", edge_mapping.edge_name, prop_names, batch))

        logger.debug(f"Edge {edge_mapping.edge_name}: {len(records)} records, {len(statements)} statements")
        return statements

    def _insert_statement(self, keyword: str, name: str, prop_names: list[str], batch: list[str]) -> str:
        return f"INSERT {keyword} {quote_identifier(name)} ({join_values(prop_names)}) VALUES {join_values(batch)};"

    def get_array_or_single(self, data: Any, path: str) -> list[Any]:
        """Records under a source path: every element of an array, else the value itself."""
        try:
            value = self.navigator.resolve(data, path)
        except DataError as e:
            raise DataError(f"Failed to extract data: {e.message}", context=path, json_path=path) from e

        if isinstance(value, list):
            return list(value)
        return [value]

    def get_vertex_id(self, data: Any, key_path: str) -> str:
        """Resolve a record key into a double-quoted vertex id.

        Strings are used verbatim; numbers are rendered as integers.
        """
        try:
            raw = self.navigator.resolve(data, key_path)
        except DataError as e:
            raise DataError(f"Failed to extract vertex ID: {e.message}", json_path=key_path) from e

        kind = JsonKind.of(raw)
        if kind is JsonKind.NULL:
            raise DataError("Vertex ID cannot be null", context=key_path, json_path=key_path)
        if kind is JsonKind.STRING:
            id_str = raw
        elif kind in (JsonKind.INTEGER, JsonKind.FLOAT):
            if kind is JsonKind.FLOAT and not math.isfinite(raw):
                raise DataError(f"Vertex ID is not a finite number: {raw}", context=key_path, json_path=key_path)
            id_str = str(int(raw))
        else:
            raise DataError("Invalid vertex ID type", context=key_path, json_path=key_path)

        return f'"{id_str}"'

    def extract_properties(self, record: Any, properties: tuple[Property, ...]) -> list[str]:
        return [format_value(self.extract_value(record, prop)) for prop in properties]

    def extract_value(self, data: Any, prop: Property) -> Value:
        """Extract one property from a record.

        JSON null yields a null Value without running the transform or any
        conversion. Otherwise the property's transform is applied when present,
        else the raw value is converted to the declared type.
        """
        nebula_type = resolve_nebula_type(prop.nebula_type)

        try:
            raw = self.navigator.resolve(data, prop.json_path)
        except DataError as e:
            raise DataError(
                f"Failed to extract value: {e.message}", context=prop.name, json_path=prop.json_path
            ) from e

        kind = JsonKind.of(raw)
        if kind is JsonKind.NULL:
            return Value(nebula_type=nebula_type, is_null=True)

        if prop.transform is not None:
            return Value(nebula_type=nebula_type, value=self._apply_transform(raw, kind, nebula_type, prop))

        return Value(nebula_type=nebula_type, value=self._convert(raw, kind, nebula_type, prop.json_path))

    def _apply_transform(self, raw: Any, kind: JsonKind, nebula_type: NebulaType, prop: Property):
        if kind not in SOURCE_TYPES:
            raise DataError(
                "Unsupported value type for transformation", context=prop.json_path, json_path=prop.json_path
            )

        transform = prop.transform
        name = transform.registry_name()
        if name is None:
            raise TransformError(f"Transform not found: {transform.describe()}", context=prop.json_path)

        transform_input = TransformValue(
            value=raw, source_type=SOURCE_TYPES[kind].value, target_type=nebula_type.value
        )
        try:
            result = self.transform_engine.apply(name, transform_input, transform.params)
        except TransformError as e:
            raise TransformError(
                e.message, context=e.context or prop.json_path, source_value=e.source_value
            ) from e
        return result.value

    def _convert(self, raw: Any, kind: JsonKind, nebula_type: NebulaType, json_path: str):
        if kind is JsonKind.FLOAT and not math.isfinite(raw):
            raise DataError(
                f"Value conversion error: {raw} is not a finite number", context=json_path, json_path=json_path
            )

        # Booleans read as 1 / 0 for numeric types
        if nebula_type.is_integer:
            if kind in (JsonKind.INTEGER, JsonKind.FLOAT, JsonKind.BOOL):
                return int(raw)
        elif nebula_type is NebulaType.DOUBLE:
            if kind in (JsonKind.INTEGER, JsonKind.FLOAT, JsonKind.BOOL):
                return float(raw)
        elif nebula_type is NebulaType.BOOL:
            if kind is JsonKind.BOOL:
                return raw
        elif kind is JsonKind.STRING:
            return raw

        raise DataError(
            f"Value conversion error: cannot read {kind.value} as {nebula_type.value}",
            context=json_path,
            json_path=json_path,
        )

    def process_dynamic_properties(
        self,
        record: Any,
        vertex_mapping: VertexMapping,
        prop_names: list[str],
        prop_values: list[str],
    ):
        """Append unmapped scalar keys of a record as inferred-type properties."""
        if not vertex_mapping.dynamic_fields.enabled or not isinstance(record, dict):
            return

        config = vertex_mapping.dynamic_fields
        defined = {prop.name for prop in vertex_mapping.properties}
        key_segments = self.navigator.segments(vertex_mapping.key_path)
        if key_segments:
            defined.add(key_segments[0])
        for prop in vertex_mapping.properties:
            segments = self.navigator.segments(prop.json_path)
            if segments:
                defined.add(segments[0])

        for key, raw in record.items():
            if key in defined or key in config.excluded_properties:
                continue
            kind = JsonKind.of(raw)
            if kind not in SOURCE_TYPES:
                continue

            nebula_type = infer_type(raw)
            if config.allowed_types and nebula_type.value not in config.allowed_types:
                continue

            prop_names.append(quote_identifier(key))
            prop_values.append(format_value(Value(nebula_type=nebula_type, value=raw)))
