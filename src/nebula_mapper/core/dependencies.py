#!/usr/bin/env python3

from fastapi import Request

from ..services.pipeline import MappingPipeline


def get_pipeline(request: Request) -> MappingPipeline:
    """Get the MappingPipeline created in the application lifespan"""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = MappingPipeline()
        request.app.state.pipeline = pipeline
    return pipeline
