#!/usr/bin/env python3
"""
Configuration settings for statement generation.

These settings can be overridden via environment variables so the CLI and the
HTTP service pick up the same defaults.
"""

import logging

from .env_utils import getenv_bool, getenv_int, getenv_list, getenv_upper
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500


class GeneratorConfig:
    """Statement generation defaults.

    Values are read when the instance is created, so tests (and long-lived
    services) can build a fresh instance after changing the environment.
    """

    def __init__(self):
        # Number of VALUES tuples per INSERT statement
        self.BATCH_SIZE = getenv_int("NEBULA_MAPPER_BATCH_SIZE", DEFAULT_BATCH_SIZE)

        # Append CREATE ... INDEX statements after the schema statements
        self.INCLUDE_INDEXES = getenv_bool("NEBULA_MAPPER_INCLUDE_INDEXES", False)

        self.LOG_LEVEL = getenv_upper("NEBULA_MAPPER_LOG_LEVEL")

        self.CORS_ORIGINS = getenv_list("CORS_ORIGINS", ["http://localhost:3000"])

    def resolve_batch_size(self, batch_size: int | None = None) -> int:
        """Return the explicit batch size if given, else the configured default.

        Raises:
            ConfigError: if the resulting size is not a positive integer
        """
        size = self.BATCH_SIZE if batch_size is None else batch_size
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ConfigError(f"Batch size must be a positive integer, got {size!r}")
        return size

    def resolve_log_level(self, fallback: str) -> str:
        return self.LOG_LEVEL or fallback


# Singleton instance
generator_config = GeneratorConfig()
