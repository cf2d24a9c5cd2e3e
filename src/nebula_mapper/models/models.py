#!/usr/bin/env python3

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Mapping definition models (the parsed YAML mapping file)


def _none_to_empty(value: Any, empty: Any) -> Any:
    return empty if value is None else value


class TransformRuleDefinition(BaseModel):
    """One rule of a rule-list transform (e.g. array element -> boolean property)."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = ""
    type: str = ""
    condition: str = ""
    value: str = ""
    field: str = ""
    mappings: dict[str, str] = {}  # value -> property name


class TransformDefinition(BaseModel):
    """Property transform.

    Accepts three shapes: a plain string (registry name), a map, or a list of
    rules (treated as a CUSTOM transform).
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str | None = None  # Registry name, e.g. 'time_format'
    type: str | None = None  # NONE, ARRAY_TO_BOOL, ARRAY_JOIN, CUSTOM
    delimiter: str | None = None
    format: str | None = None  # strptime pattern for time_format
    field: str | None = None
    condition: str | None = None
    mappings: dict[str, str] = {}
    rules: list[TransformRuleDefinition] = []
    params: dict[str, str] = {}

    @model_validator(mode="before")
    @classmethod
    def expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        if isinstance(data, list):
            return {"type": "CUSTOM", "rules": data}
        return data


class DynamicFieldsDefinition(BaseModel):
    enabled: bool = False
    allowed_types: list[str] = []
    excluded_properties: list[str] = []

    @model_validator(mode="before")
    @classmethod
    def expand_bool(cls, data: Any) -> Any:
        if isinstance(data, bool):
            return {"enabled": data}
        if data is None:
            return {}
        return data


class PropertyDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    json_path: str = Field(alias="json")
    name: str | None = None  # Defaults to json path with '.' and '/' replaced by '_'
    type: str | None = None
    optional: bool = False
    index: bool | None = None
    indexable: bool | None = None
    max_length: int | None = None
    default: str | None = None  # Literal text emitted verbatim in DDL
    transform: TransformDefinition | None = None

    @field_validator("default", mode="before")
    @classmethod
    def stringify_default(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            return repr(value)
        return value


class TagDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    source: str = Field(alias="from")
    key: str = "id"
    dynamic_fields: DynamicFieldsDefinition = DynamicFieldsDefinition()
    properties: list[PropertyDefinition] = []

    @field_validator("properties", mode="before")
    @classmethod
    def properties_default(cls, value: Any) -> Any:
        return _none_to_empty(value, [])


class EdgeDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    source: str = Field(alias="from")
    source_tag: str
    target_tag: str
    source_key: str = "id"
    target_key: str = "id"
    properties: list[PropertyDefinition] = []

    @field_validator("properties", mode="before")
    @classmethod
    def properties_default(cls, value: Any) -> Any:
        return _none_to_empty(value, [])


class SettingsDefinition(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    string_length: int | None = None
    array_delimiter: str = ","
    dynamic_tags: bool = False


class MappingDefinition(BaseModel):
    """Root of a mapping file: settings, tags, edges and named transforms."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    settings: SettingsDefinition = SettingsDefinition()
    tags: dict[str, TagDefinition] = {}
    edges: dict[str, EdgeDefinition] = {}
    transforms: dict[str, TransformDefinition] = {}

    @field_validator("settings", mode="before")
    @classmethod
    def settings_default(cls, value: Any) -> Any:
        return _none_to_empty(value, {})

    @field_validator("tags", "edges", "transforms", mode="before")
    @classmethod
    def sections_default(cls, value: Any) -> Any:
        return _none_to_empty(value, {})


# API models


class GenerateRequest(BaseModel):
    mapping_yaml: str
    json_content: str
    schema_only: bool = False
    batch_size: int | None = None  # Falls back to NEBULA_MAPPER_BATCH_SIZE
    include_indexes: bool | None = None  # Falls back to NEBULA_MAPPER_INCLUDE_INDEXES


class SchemaRequest(BaseModel):
    mapping_yaml: str
    include_indexes: bool | None = None


class GenerateResponse(BaseModel):
    status: str  # 'success'
    statements: list[str] = []
    schema_count: int = 0  # CREATE TAG / EDGE / INDEX statements
    data_count: int = 0  # INSERT / UPSERT statements
