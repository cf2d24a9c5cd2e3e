#!/usr/bin/env python3
"""Tests for the nebula-mapper command-line interface."""

import json

import pytest

from nebula_mapper.cli import build_parser, main
from tests.utils.factories import SAMPLE_DOCUMENT, SAMPLE_MAPPING_YAML


@pytest.fixture
def files(tmp_path, monkeypatch):
    monkeypatch.delenv("NEBULA_MAPPER_BATCH_SIZE", raising=False)
    monkeypatch.delenv("NEBULA_MAPPER_INCLUDE_INDEXES", raising=False)
    mapping_file = tmp_path / "mapping.yaml"
    mapping_file.write_text(SAMPLE_MAPPING_YAML, encoding="utf-8")
    input_file = tmp_path / "input.json"
    input_file.write_text(json.dumps(SAMPLE_DOCUMENT), encoding="utf-8")
    return mapping_file, input_file


@pytest.mark.unit
class TestCli:
    """Test suite for the CLI entry point"""

    def test_prints_statements(self, files, capsys):
        mapping_file, input_file = files

        assert main([str(mapping_file), str(input_file)]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "CREATE TAG IF NOT EXISTS User ("
        assert lines[-1] == 'INSERT EDGE Visited (date) VALUES "u1" -> "101":("2024-01-15 00:00:00");'

    def test_schema_only(self, files, capsys):
        mapping_file, input_file = files

        assert main([str(mapping_file), str(input_file), "--schema-only"]) == 0

        out = capsys.readouterr().out
        assert "CREATE EDGE IF NOT EXISTS Visited (" in out
        assert "INSERT" not in out

    def test_batch_size_and_output_file(self, files, tmp_path, capsys):
        mapping_file, input_file = files
        output_file = tmp_path / "out.ngql"

        exit_code = main([str(mapping_file), str(input_file), "--batch-size", "1", "-o", str(output_file)])

        assert exit_code == 0
        assert capsys.readouterr().out == ""
        text = output_file.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert 'INSERT VERTEX User (name, score) VALUES "u1":("Kim", 4.5);' in text
        assert 'INSERT VERTEX User (name, score) VALUES "u2":("Lee", 3.0);' in text

    def test_with_indexes_and_drop_schema(self, files, capsys):
        mapping_file, input_file = files

        assert main([str(mapping_file), str(input_file), "--with-indexes", "--drop-schema"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "DROP TAG INDEX IF EXISTS User_name_idx;"
        assert "CREATE TAG INDEX IF NOT EXISTS Place_cid_idx ON Place(cid);" in lines

    def test_missing_input_file(self, files, tmp_path, capsys):
        mapping_file, _ = files

        assert main([str(mapping_file), str(tmp_path / "missing.json")]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Mapping Error: Cannot read file")

    def test_malformed_json_reports_location(self, files, capsys):
        mapping_file, input_file = files
        input_file.write_text('{\n  "users": [\n}', encoding="utf-8")

        assert main([str(mapping_file), str(input_file)]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("JSON Error: Invalid JSON")
        assert "at line 3" in captured.err

    def test_data_error_prints_nothing(self, files, capsys):
        mapping_file, input_file = files
        input_file.write_text(json.dumps({"users": [{"id": None, "name": "x", "score": 1.0}]}), encoding="utf-8")

        assert main([str(mapping_file), str(input_file)]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Vertex ID cannot be null" in captured.err

    def test_non_standard_json_constant(self, files, capsys):
        mapping_file, input_file = files
        input_file.write_text('{"users": [{"id": Infinity, "name": "x", "score": 1.0}]}', encoding="utf-8")

        assert main([str(mapping_file), str(input_file)]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("JSON Error: Invalid JSON: non-standard constant Infinity")

    def test_missing_arguments(self, capsys):
        assert main([]) == 1

    def test_help(self, capsys):
        assert main(["--help"]) == 0
        assert "--schema-only" in capsys.readouterr().out

    def test_parser_defaults(self):
        args = build_parser().parse_args(["m.yaml", "in.json"])

        assert args.batch_size is None
        assert args.schema_only is False
        assert args.output is None
