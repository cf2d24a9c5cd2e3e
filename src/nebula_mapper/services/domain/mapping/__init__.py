"""
Mapping Domain

Builds the validated, immutable GraphMapping (tags, edges, properties,
transforms, settings) from a parsed mapping definition.
"""

from .builder import create_mapping, default_property_name, parse_mapping_definition
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

__all__ = [
    "create_mapping",
    "default_property_name",
    "parse_mapping_definition",
    "DynamicFieldsConfig",
    "EdgeEndpoint",
    "EdgeMapping",
    "GraphMapping",
    "Property",
    "Settings",
    "Transform",
    "TransformKind",
    "TransformRule",
    "VertexMapping",
]
