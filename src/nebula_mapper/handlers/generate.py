#!/usr/bin/env python3
"""
Handlers for statement generation requests.

Generation is synchronous and CPU-bound; mapping and input errors are
reported as 400 with the one-line diagnostic as detail.
"""

import logging

from fastapi import HTTPException

from ..core.errors import MapperError
from ..models.models import GenerateRequest, GenerateResponse, SchemaRequest
from ..services.mapping_loader import load_mapping_yaml
from ..services.pipeline import MappingPipeline, generate_for_json_content

logger = logging.getLogger(__name__)


async def handle_generate(request: GenerateRequest, pipeline: MappingPipeline) -> GenerateResponse:
    """Generate schema and data statements for one JSON document.

    Args:
        request: Mapping YAML, JSON content and generation options
        pipeline: Shared pipeline (path cache, transform registry)

    Returns:
        GenerateResponse with all statements in output order
    """
    try:
        result = generate_for_json_content(
            request.mapping_yaml,
            request.json_content,
            pipeline=pipeline,
            schema_only=request.schema_only,
            batch_size=request.batch_size,
            include_indexes=request.include_indexes,
        )
    except MapperError as e:
        logger.warning(f"Generation failed: {e.describe()}")
        raise HTTPException(status_code=400, detail=e.describe()) from e
    except Exception as e:
        logger.error(f"Unexpected error during generation: {e}")
        raise HTTPException(status_code=500, detail=f"Generation failed: {str(e)}") from e

    return GenerateResponse(
        status="success",
        statements=result.statements,
        schema_count=len(result.schema_statements),
        data_count=len(result.data_statements),
    )


async def handle_schema(request: SchemaRequest, pipeline: MappingPipeline) -> GenerateResponse:
    """Generate schema statements only; no input document is needed."""
    try:
        mapping = load_mapping_yaml(request.mapping_yaml, source="mapping")
        statements = pipeline.generate_schema(mapping, include_indexes=request.include_indexes)
    except MapperError as e:
        logger.warning(f"Schema generation failed: {e.describe()}")
        raise HTTPException(status_code=400, detail=e.describe()) from e
    except Exception as e:
        logger.error(f"Unexpected error during schema generation: {e}")
        raise HTTPException(status_code=500, detail=f"Schema generation failed: {str(e)}") from e

    return GenerateResponse(status="success", statements=statements, schema_count=len(statements))
