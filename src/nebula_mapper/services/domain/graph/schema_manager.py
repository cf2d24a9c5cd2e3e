#!/usr/bin/env python3

import copy
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from ....core.errors import SchemaError
from ..mapping.model import EdgeMapping, GraphMapping, Settings, VertexMapping
from .types import (
    convert_to_nebula_type,
    get_index_name,
    is_numeric_type,
    is_string_type,
    is_valid_identifier,
    quote_identifier,
)

logger = logging.getLogger(__name__)

TTL_CLAUSE = 'ttl_duration = 0, ttl_col = ""'


@dataclass
class SchemaProperty:
    name: str
    type: str  # DDL spelling, e.g. INT64 or STRING(256)
    nullable: bool = False
    indexable: bool = False
    default_value: Optional[str] = None
    fixed_length: Optional[int] = None


@dataclass
class SchemaElement:
    """A tag or edge type as it will be declared in the graph space."""

    name: str
    properties: list[SchemaProperty] = field(default_factory=list)
    is_edge: bool = False
    # Edges only: vertex tags allowed at each end
    from_types: set[str] = field(default_factory=set)
    to_types: set[str] = field(default_factory=set)

    @property
    def keyword(self) -> str:
        return "EDGE" if self.is_edge else "TAG"


class SchemaManager:
    """Generates nGQL schema DDL (tags, edges, indexes) from a GraphMapping"""

    def build_schema_element(
        self,
        element: Union[VertexMapping, EdgeMapping],
        settings: Optional[Settings] = None,
    ) -> SchemaElement:
        """Convert a vertex or edge mapping into a SchemaElement with DDL types."""
        settings = settings or Settings()
        is_edge = isinstance(element, EdgeMapping)
        schema = SchemaElement(
            name=element.edge_name if is_edge else element.tag_name,
            is_edge=is_edge,
        )
        if is_edge:
            schema.from_types.add(element.from_endpoint.tag)
            schema.to_types.add(element.to_endpoint.tag)

        for prop in element.properties:
            length = prop.max_length or settings.string_length
            schema.properties.append(
                SchemaProperty(
                    name=prop.name,
                    type=convert_to_nebula_type(prop.nebula_type, length),
                    nullable=prop.optional,
                    indexable=prop.indexable,
                    default_value=prop.default_value,
                    fixed_length=prop.max_length,
                )
            )
        return schema

    def validate_schema_element(self, element: SchemaElement):
        if not is_valid_identifier(element.name):
            raise SchemaError(f"Invalid schema element name: {element.name}")
        for prop in element.properties:
            if not is_valid_identifier(prop.name):
                raise SchemaError(f"Invalid property name: {prop.name}", context=element.name)

    def render_create_statement(self, element: SchemaElement) -> str:
        columns = []
        for prop in element.properties:
            column = f"    {quote_identifier(prop.name)} {prop.type}"
            if not prop.nullable:
                column += " NOT NULL"
            if prop.default_value is not None:
                column += f" DEFAULT {prop.default_value}"
            columns.append(column)

        body = ",\n".join(columns)
        return (
            f"CREATE {element.keyword} IF NOT EXISTS {quote_identifier(element.name)} (\n"
            f"{body}\n) {TTL_CLAUSE};"
        )

    def schema_elements(self, mapping: GraphMapping) -> list[SchemaElement]:
        """All tag elements in declaration order, then all edge elements."""
        elements = []
        for element in (*mapping.vertices, *mapping.edges):
            schema = self.build_schema_element(element, mapping.settings)
            self.validate_schema_element(schema)
            elements.append(schema)
        return elements

    def generate_schema_statements(self, mapping: GraphMapping, include_indexes: bool = False) -> list[str]:
        """CREATE TAG statements, then CREATE EDGE statements, then (optionally) indexes.

        Raises:
            SchemaError: unsupported type, oversized string length or invalid identifier
        """
        elements = self.schema_elements(mapping)
        statements = [self.render_create_statement(element) for element in elements]

        if include_indexes:
            for element in elements:
                statements.extend(self.generate_property_indexes(element))

        logger.info(
            f"Generated schema for {len(mapping.vertices)} tags and {len(mapping.edges)} edges "
            f"({len(statements)} statements)"
        )
        return statements

    def generate_property_indexes(self, element: SchemaElement) -> list[str]:
        statements = []
        for prop in element.properties:
            if not prop.indexable:
                continue
            # Only numeric and string properties can be indexed
            if not (is_numeric_type(prop.type) or is_string_type(prop.type)):
                logger.debug(f"Skipping index on {element.name}.{prop.name}: type {prop.type} is not indexable")
                continue

            column = quote_identifier(prop.name)
            if is_string_type(prop.type) and prop.fixed_length:
                column += f"({prop.fixed_length})"

            index_name = quote_identifier(get_index_name(element.name, prop.name))
            statements.append(
                f"CREATE {element.keyword} INDEX IF NOT EXISTS {index_name} "
                f"ON {quote_identifier(element.name)}({column});"
            )
        return statements

    def generate_index_statements(self, mapping: GraphMapping) -> list[str]:
        statements = []
        for element in self.schema_elements(mapping):
            statements.extend(self.generate_property_indexes(element))
        return statements

    def generate_cleanup_statements(self, mapping: GraphMapping) -> list[str]:
        """DROP statements for every index a mapping may have created, then its tags and edges."""
        statements = []
        for vertex in mapping.vertices:
            for prop in vertex.properties:
                index_name = quote_identifier(get_index_name(vertex.tag_name, prop.name))
                statements.append(f"DROP TAG INDEX IF EXISTS {index_name};")
        for edge in mapping.edges:
            for prop in edge.properties:
                index_name = quote_identifier(get_index_name(edge.edge_name, prop.name))
                statements.append(f"DROP EDGE INDEX IF EXISTS {index_name};")

        statements.extend(f"DROP TAG IF EXISTS {quote_identifier(v.tag_name)};" for v in mapping.vertices)
        statements.extend(f"DROP EDGE IF EXISTS {quote_identifier(e.edge_name)};" for e in mapping.edges)
        return statements

    def merge_schema_properties(self, existing: SchemaElement, new_schema: SchemaElement) -> SchemaElement:
        """Merge a second declaration of the same tag or edge into the first.

        New properties are appended; for shared properties nullability is OR-ed,
        a given default replaces the old one and the larger fixed length wins.

        Raises:
            SchemaError: the elements differ in name or kind
        """
        if existing.name != new_schema.name or existing.is_edge != new_schema.is_edge:
            raise SchemaError(
                "Schema elements do not match", context=f"{existing.name} vs {new_schema.name}"
            )

        merged = copy.deepcopy(existing)
        by_name = {prop.name: prop for prop in merged.properties}

        for new_prop in new_schema.properties:
            current = by_name.get(new_prop.name)
            if current is None:
                added = copy.deepcopy(new_prop)
                merged.properties.append(added)
                by_name[added.name] = added
                continue

            current.nullable = current.nullable or new_prop.nullable
            if new_prop.default_value is not None:
                current.default_value = new_prop.default_value
            if new_prop.fixed_length:
                current.fixed_length = max(current.fixed_length or 0, new_prop.fixed_length)

        if merged.is_edge:
            merged.from_types |= new_schema.from_types
            merged.to_types |= new_schema.to_types

        return merged


def get_schema_manager() -> SchemaManager:
    """Get a SchemaManager instance"""
    return SchemaManager()
