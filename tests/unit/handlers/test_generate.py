"""Unit tests for the statement generation endpoints and handlers."""

import json
from unittest.mock import Mock

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from nebula_mapper.core.config import GeneratorConfig
from nebula_mapper.core.errors import SchemaError
from nebula_mapper.handlers.generate import handle_generate, handle_schema
from nebula_mapper.main import app
from nebula_mapper.models.models import SchemaRequest
from nebula_mapper.services.pipeline import MappingPipeline
from tests.utils.factories import SAMPLE_DOCUMENT, SAMPLE_MAPPING_YAML, GenerateRequestFactory


@pytest.fixture
def pipeline(monkeypatch):
    monkeypatch.delenv("NEBULA_MAPPER_BATCH_SIZE", raising=False)
    monkeypatch.delenv("NEBULA_MAPPER_INCLUDE_INDEXES", raising=False)
    return MappingPipeline(config=GeneratorConfig())


@pytest.fixture
def client(pipeline):
    """Create test client for FastAPI app with a fresh pipeline."""
    app.state.pipeline = pipeline
    return TestClient(app)


@pytest.mark.unit
class TestGenerateEndpoints:
    """Test suite for the HTTP endpoints."""

    def test_healthz(self, client):
        """Test GET /healthz reports a healthy service."""
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_generate_returns_statements(self, client):
        """Test POST /api/generate returns schema then data statements."""
        payload = {"mapping_yaml": SAMPLE_MAPPING_YAML, "json_content": json.dumps(SAMPLE_DOCUMENT)}

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert data["schema_count"] == 3
        assert data["data_count"] == 3
        assert data["statements"][0].startswith("CREATE TAG IF NOT EXISTS User (")
        assert data["statements"][-1] == 'INSERT EDGE Visited (date) VALUES "u1" -> "101":("2024-01-15 00:00:00");'

    def test_generate_schema_only_with_indexes(self, client):
        """Test POST /api/generate honours schema_only and include_indexes."""
        payload = {
            "mapping_yaml": SAMPLE_MAPPING_YAML,
            "json_content": "{}",
            "schema_only": True,
            "include_indexes": True,
        }

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["data_count"] == 0
        assert data["statements"][-1] == "CREATE TAG INDEX IF NOT EXISTS Place_cid_idx ON Place(cid);"

    def test_generate_bad_json_is_400(self, client):
        """Test malformed input JSON is reported as a client error."""
        payload = {"mapping_yaml": SAMPLE_MAPPING_YAML, "json_content": "{oops"}

        response = client.post("/api/generate", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"].startswith("JSON Error: Invalid JSON")

    def test_generate_missing_field_is_422(self, client):
        """Test request validation rejects a body without json_content."""
        response = client.post("/api/generate", json={"mapping_yaml": SAMPLE_MAPPING_YAML})

        assert response.status_code == 422

    def test_schema_endpoint(self, client):
        """Test POST /api/schema needs only the mapping."""
        response = client.post("/api/schema", json={"mapping_yaml": SAMPLE_MAPPING_YAML})

        assert response.status_code == 200
        data = response.json()
        assert data["schema_count"] == 3
        assert data["statements"][2].startswith("CREATE EDGE IF NOT EXISTS Visited (")

    def test_schema_endpoint_bad_mapping_is_400(self, client):
        """Test an invalid mapping is reported as a client error."""
        response = client.post("/api/schema", json={"mapping_yaml": "tags:\n  TAG:\n    from: t\n"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Schema Error: Invalid schema element name: TAG"


@pytest.mark.unit
class TestGenerateHandlers:
    """Test suite for the handler functions called directly."""

    @pytest.mark.asyncio
    async def test_handle_generate(self, pipeline):
        request = GenerateRequestFactory(batch_size=1)

        response = await handle_generate(request, pipeline)

        assert response.status == "success"
        assert response.data_count == 4

    @pytest.mark.asyncio
    async def test_handle_generate_invalid_batch_size(self, pipeline):
        request = GenerateRequestFactory(batch_size=0)

        with pytest.raises(HTTPException) as exc_info:
            await handle_generate(request, pipeline)

        assert exc_info.value.status_code == 400
        assert "Batch size must be a positive integer" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_handle_schema_unexpected_error_is_500(self):
        pipeline = Mock()
        pipeline.generate_schema.side_effect = RuntimeError("boom")

        with pytest.raises(HTTPException) as exc_info:
            await handle_schema(SchemaRequest(mapping_yaml=SAMPLE_MAPPING_YAML), pipeline)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Schema generation failed: boom"

    @pytest.mark.asyncio
    async def test_handle_schema_mapper_error_is_400(self):
        pipeline = Mock()
        pipeline.generate_schema.side_effect = SchemaError("Unsupported type: BLOB")

        with pytest.raises(HTTPException) as exc_info:
            await handle_schema(SchemaRequest(mapping_yaml=SAMPLE_MAPPING_YAML), pipeline)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Schema Error: Unsupported type: BLOB"
