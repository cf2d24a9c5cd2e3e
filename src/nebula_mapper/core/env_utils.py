#!/usr/bin/env python3
"""
Typed readers for the NEBULA_MAPPER_* environment variables.

Values are stripped of surrounding whitespace and CRLF endings (left behind by
.env files edited on Windows). A value that cannot be read as the requested
type is logged and replaced by the default, so a bad setting never stops the
CLI or the service from starting.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off", ""})


def getenv_clean(key: str, default: Optional[str] = None) -> Optional[str]:
    """Read a variable with whitespace and line endings removed.

    Example:
        >>> # .env file has: NEBULA_MAPPER_LOG_LEVEL=debug\r\n
        >>> getenv_clean("NEBULA_MAPPER_LOG_LEVEL")
        'debug'
    """
    raw_value = os.getenv(key)
    if raw_value is None:
        return default

    cleaned = raw_value.strip()
    if cleaned != raw_value:
        logger.warning(f"Environment variable {key} had surrounding whitespace: {raw_value!r}")
    return cleaned


def getenv_upper(key: str) -> Optional[str]:
    """Read a variable as an upper-case name (log levels); empty counts as unset."""
    value = getenv_clean(key)
    return value.upper() if value else None


def getenv_bool(key: str, default: bool = False) -> bool:
    value = getenv_clean(key)
    if value is None:
        return default

    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False

    logger.warning(f"Environment variable {key}={value!r} is not a boolean, using {default}")
    return default


def getenv_int(key: str, default: int) -> int:
    """Read an integer; range checks are left to the caller."""
    value = getenv_clean(key)
    if value is None:
        return default

    try:
        return int(value)
    except ValueError:
        logger.warning(f"Environment variable {key}={value!r} is not an integer, using {default}")
        return default


def getenv_list(key: str, default: Optional[list[str]] = None, separator: str = ",") -> list[str]:
    """Read a separated list, dropping empty items; falls back when nothing is left."""
    fallback = list(default) if default is not None else []
    value = getenv_clean(key)
    if not value:
        return fallback

    items = [item.strip() for item in value.split(separator) if item.strip()]
    return items or fallback
