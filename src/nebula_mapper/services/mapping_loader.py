#!/usr/bin/env python3
"""Load mapping definitions (YAML) and input documents (JSON) from text or files.

Syntax errors are reported as ParseError with 1-based line and column.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..core.errors import ConfigError, ParseError
from ..models.models import MappingDefinition
from .domain.mapping import GraphMapping, create_mapping, parse_mapping_definition

logger = logging.getLogger(__name__)


def load_yaml_text(text: str, source: str | None = None) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        problem = getattr(e, "problem", None) or str(e)
        raise ParseError(
            f"Invalid YAML: {problem}",
            source_format="YAML",
            line=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
            context=source,
        ) from e


def _reject_constant(name: str):
    # json.loads accepts NaN and Infinity, which are not JSON
    raise ValueError(f"non-standard constant {name}")


def load_json_text(text: str, source: str | None = None) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON: {e.msg}",
            source_format="JSON",
            line=e.lineno,
            column=e.colno,
            context=source,
        ) from e
    except ValueError as e:
        raise ParseError(f"Invalid JSON: {e}", source_format="JSON", context=source) from e


def load_mapping_definition(text: str, source: str | None = None) -> MappingDefinition:
    """Parse mapping YAML text into a validated MappingDefinition."""
    raw = load_yaml_text(text, source)
    return parse_mapping_definition(raw)


def load_mapping_yaml(text: str, source: str | None = None) -> GraphMapping:
    """Parse mapping YAML text and build the GraphMapping."""
    definition = load_mapping_definition(text, source)
    return create_mapping(definition)


def read_text_file(path: str | Path) -> str:
    """Read a UTF-8 text file, reporting unreadable files as ConfigError."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read file: {e}", context=str(path)) from e


def load_mapping_file(path: str | Path) -> GraphMapping:
    logger.debug(f"Loading mapping from {path}")
    return load_mapping_yaml(read_text_file(path), source=str(path))


def load_json_file(path: str | Path) -> Any:
    logger.debug(f"Loading JSON document from {path}")
    return load_json_text(read_text_file(path), source=str(path))
