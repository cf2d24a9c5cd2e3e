#!/usr/bin/env python3
"""Mapping pipeline: mapping YAML + JSON document -> ordered nGQL statements.

Statement order:
    1. DROP statements (only when cleanup is requested)
    2. CREATE TAG statements, then CREATE EDGE statements
    3. CREATE ... INDEX statements (only when indexes are requested)
    4. Vertex INSERT/UPSERT statements, then edge INSERT statements
       (skipped in schema-only mode)

Nothing is returned unless every step succeeds.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.config import GeneratorConfig, generator_config
from .domain.graph import SchemaManager, StatementGenerator
from .domain.json_path import PathNavigator
from .domain.mapping import GraphMapping
from .domain.transform import TransformEngine
from .mapping_loader import load_json_text, load_mapping_yaml

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    cleanup_statements: list[str] = field(default_factory=list)
    schema_statements: list[str] = field(default_factory=list)
    data_statements: list[str] = field(default_factory=list)

    @property
    def statements(self) -> list[str]:
        return [*self.cleanup_statements, *self.schema_statements, *self.data_statements]

    def to_text(self) -> str:
        return "\n".join(self.statements)


class MappingPipeline:
    """Owns the objects shared across generation runs.

    The path navigator keeps its segment cache for the life of the pipeline;
    register custom transforms on `transform_engine` before the first run.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        navigator: Optional[PathNavigator] = None,
        transform_engine: Optional[TransformEngine] = None,
        schema_manager: Optional[SchemaManager] = None,
    ):
        self.config = config or generator_config
        self.navigator = navigator or PathNavigator()
        self.transform_engine = transform_engine or TransformEngine()
        self.schema_manager = schema_manager or SchemaManager()
        self.statement_generator = StatementGenerator(self.navigator, self.transform_engine)

    def generate_schema(self, mapping: GraphMapping, include_indexes: Optional[bool] = None) -> list[str]:
        if include_indexes is None:
            include_indexes = self.config.INCLUDE_INDEXES
        return self.schema_manager.generate_schema_statements(mapping, include_indexes=include_indexes)

    def generate(
        self,
        mapping: GraphMapping,
        document: Any,
        schema_only: bool = False,
        batch_size: Optional[int] = None,
        include_indexes: Optional[bool] = None,
        drop_schema: bool = False,
    ) -> GenerationResult:
        """Run schema and data generation for one document.

        Raises:
            MapperError: the first failure of any step; no partial result is returned
        """
        batch_size = self.config.resolve_batch_size(batch_size)
        result = GenerationResult()

        if drop_schema:
            result.cleanup_statements = self.schema_manager.generate_cleanup_statements(mapping)

        result.schema_statements = self.generate_schema(mapping, include_indexes)

        if not schema_only:
            result.data_statements = self.statement_generator.generate_batch_statements(
                mapping, document, batch_size
            )

        return result


def generate_for_json_content(
    mapping_yaml: str,
    json_content: str,
    pipeline: Optional[MappingPipeline] = None,
    schema_only: bool = False,
    batch_size: Optional[int] = None,
    include_indexes: Optional[bool] = None,
    drop_schema: bool = False,
) -> GenerationResult:
    """Generate nGQL statements from mapping YAML text and JSON text.

    Args:
        mapping_yaml: Mapping definition as YAML text
        json_content: Input document as JSON text
        pipeline: Pipeline to run on; a fresh one is created if omitted
        schema_only: Skip data statements
        batch_size: VALUES tuples per INSERT (defaults to configuration)
        include_indexes: Append index DDL (defaults to configuration)
        drop_schema: Prepend DROP statements

    Returns:
        GenerationResult with statements grouped by phase

    Raises:
        ParseError: malformed YAML or JSON text
        ConfigError: invalid mapping definition or batch size
        SchemaError, DataError, TransformError: generation failures
    """
    pipeline = pipeline or MappingPipeline()
    start_time = time.time()

    mapping = load_mapping_yaml(mapping_yaml, source="mapping")
    document = load_json_text(json_content, source="input")

    result = pipeline.generate(
        mapping,
        document,
        schema_only=schema_only,
        batch_size=batch_size,
        include_indexes=include_indexes,
        drop_schema=drop_schema,
    )

    logger.info(
        f"Generated {len(result.schema_statements)} schema and {len(result.data_statements)} data "
        f"statements in {time.time() - start_time:.3f}s"
    )
    return result
