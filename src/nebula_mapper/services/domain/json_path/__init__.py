"""
JSON Path Domain

Resolves slash-delimited paths (with `[n]` array segments) against parsed
JSON documents, caching parsed paths across documents.
"""

from .navigator import PathNavigator, split_path

__all__ = ["PathNavigator", "split_path"]
