#!/usr/bin/env python3

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import generator_config
from .core.dependencies import get_pipeline
from .core.logging import setup_logging
from .models.models import GenerateRequest, GenerateResponse, SchemaRequest
from .services.pipeline import MappingPipeline

logger = logging.getLogger(__name__)

# Application start time for uptime calculation
_app_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    setup_logging(generator_config.resolve_log_level("INFO"))
    logger.info("Starting nebula-mapper service")

    app.state.pipeline = MappingPipeline(config=generator_config)

    yield

    # Shutdown
    logger.info(f"Shutting down nebula-mapper service ({app.state.pipeline.navigator.cache_size()} cached paths)")


app = FastAPI(
    title="Nebula Mapper API",
    description="API for generating Nebula Graph nGQL statements from JSON documents and YAML mappings",
    version=os.getenv("APP_VERSION", "unknown"),
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=generator_config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
async def health_check():
    """Liveness probe - checks if application is alive and can serve requests"""
    current_time = time.time()
    return {
        "status": "healthy",
        "timestamp": current_time,
        "uptime": current_time - _app_start_time,
        "api_version": os.getenv("APP_VERSION", "unknown"),
    }


@app.post("/api/generate", response_model=GenerateResponse)
async def generate_statements(
    request: GenerateRequest,
    pipeline: MappingPipeline = Depends(get_pipeline)
):
    """Generate schema and data statements from a mapping and a JSON document"""
    from .handlers.generate import handle_generate
    return await handle_generate(request, pipeline)


@app.post("/api/schema", response_model=GenerateResponse)
async def generate_schema(
    request: SchemaRequest,
    pipeline: MappingPipeline = Depends(get_pipeline)
):
    """Generate schema statements from a mapping"""
    from .handlers.generate import handle_schema
    return await handle_schema(request, pipeline)
