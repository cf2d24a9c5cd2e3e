#!/usr/bin/env python3
"""Resolved, immutable graph mapping used by schema and statement generation."""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TransformKind(Enum):
    NONE = "NONE"
    ARRAY_TO_BOOL = "ARRAY_TO_BOOL"
    ARRAY_JOIN = "ARRAY_JOIN"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class TransformRule:
    name: str = ""
    type: str = ""
    condition: str = ""
    value: str = ""
    field: str = ""
    # `field` is shadowed by the attribute above
    mappings: dict[str, str] = dataclasses.field(default_factory=dict)


@dataclass(frozen=True)
class Transform:
    """Transform attached to a property.

    `name` is the Transform Engine registry name; ARRAY_JOIN transforms without
    an explicit name resolve to 'array_join'.
    """

    kind: TransformKind = TransformKind.NONE
    name: Optional[str] = None
    params: dict[str, str] = field(default_factory=dict)
    rules: tuple[TransformRule, ...] = ()

    def registry_name(self) -> Optional[str]:
        if self.name:
            return self.name
        if self.kind is TransformKind.ARRAY_JOIN:
            return "array_join"
        return None

    def describe(self) -> str:
        return self.registry_name() or self.kind.value


@dataclass(frozen=True)
class DynamicFieldsConfig:
    enabled: bool = False
    allowed_types: frozenset[str] = frozenset()  # Empty = every inferred type allowed
    excluded_properties: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Property:
    name: str
    json_path: str
    nebula_type: str  # As declared; resolved case-insensitively at generation time
    optional: bool = False
    indexable: bool = False
    max_length: Optional[int] = None
    default_value: Optional[str] = None
    transform: Optional[Transform] = None


@dataclass(frozen=True)
class VertexMapping:
    tag_name: str
    source_path: str
    key_path: str
    properties: tuple[Property, ...] = ()
    dynamic_fields: DynamicFieldsConfig = DynamicFieldsConfig()


@dataclass(frozen=True)
class EdgeEndpoint:
    tag: str
    key_path: str


@dataclass(frozen=True)
class EdgeMapping:
    edge_name: str
    source_path: str
    from_endpoint: EdgeEndpoint
    to_endpoint: EdgeEndpoint
    properties: tuple[Property, ...] = ()


@dataclass(frozen=True)
class Settings:
    string_length: Optional[int] = None  # None = per-type default lengths
    array_delimiter: str = ","
    allow_dynamic_tags: bool = False


@dataclass(frozen=True)
class GraphMapping:
    vertices: tuple[VertexMapping, ...] = ()
    edges: tuple[EdgeMapping, ...] = ()
    transforms: dict[str, Transform] = field(default_factory=dict)
    settings: Settings = Settings()
