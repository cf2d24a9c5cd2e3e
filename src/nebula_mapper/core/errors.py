#!/usr/bin/env python3
"""
Error types raised while turning a mapping definition and a JSON document into
nGQL statements.

Every error carries a message plus optional context and, for errors that come
from parsing JSON or YAML text, the line and column of the problem. The first
error raised aborts the whole generation pass.
"""

from typing import Optional


class MapperError(Exception):
    """Base class for all mapping/generation failures."""

    kind = "Error"

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.line = line
        self.column = column

    def describe(self) -> str:
        """One-line diagnostic used by the CLI and the HTTP handlers."""
        text = f"{self.kind}: {self.message}"
        if self.line is not None:
            text += f" at line {self.line}"
            if self.column is not None:
                text += f", column {self.column}"
        if self.context:
            text += f" ({self.context})"
        return text

    def __str__(self) -> str:
        return self.describe()


class ConfigError(MapperError):
    """Malformed mapping definition (missing fields, duplicate names, bad values)."""

    kind = "Mapping Error"


class DataError(MapperError):
    """JSON path resolution failure, null key or extraction conversion failure."""

    kind = "Data Error"

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        json_path: Optional[str] = None,
    ):
        super().__init__(message, context)
        self.json_path = json_path

    def describe(self) -> str:
        text = super().describe()
        if self.json_path is not None and self.json_path != self.context:
            text += f" [path: {self.json_path}]"
        return text


class PathNotFoundError(DataError):
    """A key segment of a path does not exist in the current object."""


class PathTypeMismatchError(DataError):
    """A path segment was applied to a node of the wrong kind, or an index is out of range."""


class TransformError(MapperError):
    """Unknown transform name or a transform-specific parse failure."""

    kind = "Transform Error"

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        source_value: Optional[str] = None,
    ):
        super().__init__(message, context)
        self.source_value = source_value


class SchemaError(MapperError):
    """Invalid identifier, unsupported type or oversized string length."""

    kind = "Schema Error"


class ParseError(MapperError):
    """Malformed JSON or YAML input text."""

    def __init__(
        self,
        message: str,
        source_format: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        context: Optional[str] = None,
    ):
        super().__init__(message, context, line, column)
        self.source_format = source_format
        self.kind = f"{source_format} Error"
