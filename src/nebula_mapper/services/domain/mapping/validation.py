#!/usr/bin/env python3
"""Structural checks applied while building a GraphMapping.

Target types and identifiers are not checked here; schema and statement
generation check them.
"""

import logging
from collections.abc import Iterable

from ....core.errors import ConfigError
from .model import EdgeEndpoint, Property

logger = logging.getLogger(__name__)


def _brackets_balanced(path: str) -> bool:
    depth = 0
    for char in path:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        if depth < 0:
            return False
    return depth == 0


def validate_source_path(path: str, element_name: str):
    if not path:
        raise ConfigError("Source path cannot be empty", context=element_name)
    if not _brackets_balanced(path):
        raise ConfigError(f"Invalid source path: {path}", context=element_name)


def validate_key_path(key_path: str, element_name: str):
    if not key_path:
        raise ConfigError("Key field cannot be empty", context=element_name)


def validate_edge_endpoints(from_endpoint: EdgeEndpoint, to_endpoint: EdgeEndpoint, edge_name: str):
    for role, endpoint in (("source", from_endpoint), ("target", to_endpoint)):
        if not endpoint.tag:
            raise ConfigError(f"Edge {role} tag cannot be empty", context=edge_name)
        validate_key_path(endpoint.key_path, f"{edge_name}.{role}")


def validate_properties(properties: Iterable[Property], element_name: str):
    """Reject empty json paths and duplicate property names within one element."""
    seen = set()
    for prop in properties:
        if prop.name in seen:
            raise ConfigError(f"Duplicate property name: {prop.name}", context=element_name)
        seen.add(prop.name)

        if not prop.json_path:
            raise ConfigError("Property path cannot be empty", context=f"{element_name}.{prop.name}")
        if not _brackets_balanced(prop.json_path):
            raise ConfigError(
                f"Invalid property path: {prop.json_path}", context=f"{element_name}.{prop.name}"
            )
