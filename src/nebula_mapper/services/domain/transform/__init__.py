"""
Transform Domain

Registry of named scalar transforms (time formatting, price normalization,
string normalization, array join, boolean coercion).
"""

from .engine import BUILTIN_TRANSFORMS, TransformEngine, TransformValue, convert_value

__all__ = ["BUILTIN_TRANSFORMS", "TransformEngine", "TransformValue", "convert_value"]
