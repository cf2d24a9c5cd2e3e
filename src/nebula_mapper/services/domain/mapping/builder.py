#!/usr/bin/env python3
"""Build a GraphMapping from a parsed mapping definition.

The definition is the YAML mapping file after `yaml.safe_load`:

    settings:
      array_delimiter: ","
    tags:
      Place:
        from: basicInfo
        key: cid
        properties:
          - json: cid
            type: INT
            index: true
    edges:
      Comment:
        from: comments
        source_tag: User
        target_tag: Place
        source_key: userId
        target_key: placeId
        properties:
          - json: date
            type: STRING
            transform:
              name: time_format
              format: "%Y.%m.%d."

Tags and edges keep their declaration order.
"""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ....core.errors import ConfigError
from ....models.models import (
    EdgeDefinition,
    MappingDefinition,
    PropertyDefinition,
    SettingsDefinition,
    TagDefinition,
    TransformDefinition,
)
from .model import (
    DynamicFieldsConfig,
    EdgeEndpoint,
    EdgeMapping,
    GraphMapping,
    Property,
    Settings,
    Transform,
    TransformKind,
    TransformRule,
    VertexMapping,
)
from .validation import (
    validate_edge_endpoints,
    validate_key_path,
    validate_properties,
    validate_source_path,
)

logger = logging.getLogger(__name__)


def parse_mapping_definition(raw: Any) -> MappingDefinition:
    """Validate a raw configuration tree into a MappingDefinition.

    Raises:
        ConfigError: the tree is not a mapping or fails validation; the
            context names the offending location (e.g. 'tags.User.from')
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Mapping definition must be a mapping at the top level")

    try:
        return MappingDefinition.model_validate(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigError(f"Invalid mapping definition: {first.get('msg')}", context=location) from e


def default_property_name(json_path: str) -> str:
    """Derive a property name from its json path ('level.nowLevel' -> 'level_nowLevel')."""
    return json_path.lstrip("/").replace(".", "_").replace("/", "_")


def _transform_kind(type_name: str | None) -> TransformKind:
    if not type_name:
        return TransformKind.NONE
    try:
        return TransformKind(type_name.upper())
    except ValueError:
        return TransformKind.CUSTOM


def build_transform(
    definition: TransformDefinition,
    settings: Settings,
    named: dict[str, Transform] | None = None,
) -> Transform:
    """Convert a transform definition into a Transform.

    A bare name that matches an entry of the mapping's `transforms` section
    refers to that entry.
    """
    if named and definition.name in named and not definition.type:
        return named[definition.name]

    kind = _transform_kind(definition.type)

    params = dict(definition.params)
    if definition.format is not None:
        params["format"] = definition.format
    if definition.delimiter is not None:
        params["delimiter"] = definition.delimiter
    elif kind is TransformKind.ARRAY_JOIN or definition.name == "array_join":
        params.setdefault("delimiter", settings.array_delimiter)

    rules = [
        TransformRule(
            name=rule.name,
            type=rule.type,
            condition=rule.condition,
            value=rule.value,
            field=rule.field,
            mappings=dict(rule.mappings),
        )
        for rule in definition.rules
    ]
    if definition.mappings:
        rules.append(
            TransformRule(
                field=definition.field or "",
                condition=definition.condition or "",
                mappings=dict(definition.mappings),
            )
        )

    return Transform(kind=kind, name=definition.name, params=params, rules=tuple(rules))


def create_property_mapping(
    prop_def: PropertyDefinition,
    settings: Settings,
    named_transforms: dict[str, Transform] | None = None,
) -> Property:
    name = prop_def.name or default_property_name(prop_def.json_path)

    transform = None
    if prop_def.transform is not None:
        transform = build_transform(prop_def.transform, settings, named_transforms)

    # Rule-list transforms may carry the type on their first rule
    nebula_type = prop_def.type
    if not nebula_type and transform is not None and transform.rules:
        nebula_type = transform.rules[0].type
    if not nebula_type:
        raise ConfigError("Missing 'type' field in property", context=name)

    indexable = prop_def.index if prop_def.index is not None else bool(prop_def.indexable)

    return Property(
        name=name,
        json_path=prop_def.json_path,
        nebula_type=nebula_type,
        optional=prop_def.optional,
        indexable=indexable,
        max_length=prop_def.max_length,
        default_value=prop_def.default,
        transform=transform,
    )


def create_vertex_mapping(
    tag_def: TagDefinition,
    tag_name: str,
    settings: Settings,
    named_transforms: dict[str, Transform] | None = None,
) -> VertexMapping:
    validate_source_path(tag_def.source, tag_name)
    validate_key_path(tag_def.key, tag_name)

    properties = tuple(
        create_property_mapping(p, settings, named_transforms) for p in tag_def.properties
    )
    validate_properties(properties, tag_name)

    dynamic = tag_def.dynamic_fields
    return VertexMapping(
        tag_name=tag_name,
        source_path=tag_def.source,
        key_path=tag_def.key,
        properties=properties,
        dynamic_fields=DynamicFieldsConfig(
            enabled=dynamic.enabled,
            allowed_types=frozenset(t.upper() for t in dynamic.allowed_types),
            excluded_properties=frozenset(dynamic.excluded_properties),
        ),
    )


def create_edge_mapping(
    edge_def: EdgeDefinition,
    edge_name: str,
    settings: Settings,
    named_transforms: dict[str, Transform] | None = None,
) -> EdgeMapping:
    validate_source_path(edge_def.source, edge_name)

    from_endpoint = EdgeEndpoint(tag=edge_def.source_tag, key_path=edge_def.source_key)
    to_endpoint = EdgeEndpoint(tag=edge_def.target_tag, key_path=edge_def.target_key)
    validate_edge_endpoints(from_endpoint, to_endpoint, edge_name)

    properties = tuple(
        create_property_mapping(p, settings, named_transforms) for p in edge_def.properties
    )
    validate_properties(properties, edge_name)

    return EdgeMapping(
        edge_name=edge_name,
        source_path=edge_def.source,
        from_endpoint=from_endpoint,
        to_endpoint=to_endpoint,
        properties=properties,
    )


def _build_settings(settings_def: SettingsDefinition) -> Settings:
    return Settings(
        string_length=settings_def.string_length or None,
        array_delimiter=settings_def.array_delimiter,
        allow_dynamic_tags=settings_def.dynamic_tags,
    )


def create_mapping(definition: MappingDefinition | dict[str, Any] | None) -> GraphMapping:
    """Build the immutable GraphMapping for one generation run.

    Args:
        definition: MappingDefinition or the raw dict produced by yaml.safe_load

    Returns:
        GraphMapping with vertices and edges in declaration order

    Raises:
        ConfigError: missing/invalid fields, empty paths or duplicate property names
    """
    if not isinstance(definition, MappingDefinition):
        definition = parse_mapping_definition(definition)

    settings = _build_settings(definition.settings)

    transforms: dict[str, Transform] = {}
    for name, transform_def in definition.transforms.items():
        transform = build_transform(transform_def, settings)
        if transform.name is None and transform.kind is TransformKind.NONE:
            transform = Transform(kind=transform.kind, name=name, params=transform.params, rules=transform.rules)
        transforms[name] = transform

    vertices = tuple(
        create_vertex_mapping(tag_def, tag_name, settings, transforms)
        for tag_name, tag_def in definition.tags.items()
    )
    edges = tuple(
        create_edge_mapping(edge_def, edge_name, settings, transforms)
        for edge_name, edge_def in definition.edges.items()
    )

    logger.info(f"Built mapping with {len(vertices)} tags and {len(edges)} edges")
    return GraphMapping(vertices=vertices, edges=edges, transforms=transforms, settings=settings)
