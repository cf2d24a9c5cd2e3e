#!/usr/bin/env python3
"""Tests for nGQL type conversion and identifier rules."""

import pytest

from nebula_mapper.core.errors import SchemaError
from nebula_mapper.services.domain.graph.types import (
    NebulaType,
    convert_to_nebula_type,
    get_index_name,
    is_numeric_type,
    is_string_type,
    is_valid_identifier,
    quote_identifier,
    resolve_nebula_type,
)


@pytest.mark.unit
class TestConvertToNebulaType:
    """Test suite for type-name conversion"""

    @pytest.mark.parametrize("declared,expected", [
        ("INT", "INT64"),
        ("integer", "INT64"),
        ("Float", "DOUBLE"),
        ("double", "DOUBLE"),
        ("bool", "BOOL"),
        ("BOOLEAN", "BOOL"),
        ("timestamp", "TIMESTAMP"),
        ("DATE", "DATE"),
        ("time", "TIME"),
        ("datetime", "DATETIME"),
        ("int32", "INT32"),
        ("INT64", "INT64"),
    ])
    def test_table(self, declared, expected):
        assert convert_to_nebula_type(declared) == expected

    def test_string_with_length(self):
        assert convert_to_nebula_type("string", 300) == "STRING(300)"

    def test_string_default_lengths(self):
        assert convert_to_nebula_type("STRING") == "STRING(256)"
        assert convert_to_nebula_type("varchar") == "VARCHAR(256)"
        assert convert_to_nebula_type("fixed_string") == "FIXED_STRING(32)"

    def test_non_positive_length_uses_default(self):
        assert convert_to_nebula_type("string", 0) == "STRING(256)"
        assert convert_to_nebula_type("string", None) == "STRING(256)"

    def test_maximum_length(self):
        assert convert_to_nebula_type("string", 65535) == "STRING(65535)"

    def test_length_over_maximum_fails(self):
        with pytest.raises(SchemaError, match="exceeds maximum"):
            convert_to_nebula_type("string", 100000)

    def test_unknown_type_fails(self):
        with pytest.raises(SchemaError, match="Unsupported type: unknown_type"):
            convert_to_nebula_type("unknown_type")


@pytest.mark.unit
class TestResolveNebulaType:
    """Test suite for the closed type enumeration"""

    def test_aliases(self):
        assert resolve_nebula_type("int") is NebulaType.INT64
        assert resolve_nebula_type("float") is NebulaType.DOUBLE
        assert resolve_nebula_type("boolean") is NebulaType.BOOL

    def test_categories(self):
        assert NebulaType.INT16.is_integer
        assert not NebulaType.DOUBLE.is_integer
        assert NebulaType.FIXED_STRING.is_string
        assert not NebulaType.TIMESTAMP.is_string

    def test_empty_name_fails(self):
        with pytest.raises(SchemaError):
            resolve_nebula_type("")


@pytest.mark.unit
class TestIdentifiers:
    """Test suite for identifier validation and quoting"""

    def test_quote_identifier(self):
        assert quote_identifier("valid_name") == "valid_name"
        assert quote_identifier("_private1") == "_private1"
        assert quote_identifier("123bad") == "`123bad`"
        assert quote_identifier("has space") == "`has space`"
        assert quote_identifier("level.now") == "`level.now`"

    def test_valid_identifier(self):
        assert is_valid_identifier("User")
        assert is_valid_identifier("_x9")

    @pytest.mark.parametrize("name", ["", "9lives", "a-b", "TAG", "YIELD", "x" * 129])
    def test_invalid_identifier(self, name):
        assert not is_valid_identifier(name)

    def test_identifier_length_limit(self):
        assert is_valid_identifier("x" * 128)

    def test_index_name(self):
        assert get_index_name("Place", "cid") == "Place_cid_idx"

    def test_type_categories_on_ddl_spelling(self):
        assert is_numeric_type("INT64")
        assert is_numeric_type("DOUBLE")
        assert not is_numeric_type("STRING(256)")
        assert is_string_type("STRING(256)")
        assert is_string_type("FIXED_STRING(32)")
        assert is_string_type("VARCHAR(10)")
        assert not is_string_type("TIMESTAMP")
