#!/usr/bin/env python3
"""Path-addressed lookup into parsed JSON documents.

Paths are slash-delimited (`/basicInfo/comments/[0]/author`); the leading `/`
is optional. A segment of the form `[n]` indexes into the current array and
may appear anywhere in the path; an index written directly after a key
(`items[0]/name`) is split off into its own segment.

Parsed segment lists are cached per literal path string for the lifetime of
the navigator. The cache is shared by every document the navigator sees, so it
allows many concurrent readers and serializes inserts.
"""

import logging
import re
import threading
from contextlib import contextmanager
from typing import Any

from ....core.errors import DataError, PathNotFoundError, PathTypeMismatchError

logger = logging.getLogger(__name__)

INDEX_SEGMENT = re.compile(r"^\[(\d+)\]$")

_MISSING = object()


class _ReadWriteLock:
    """Many concurrent readers or one writer."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


def split_path(path: str) -> tuple[str, ...]:
    """Split a path string into key and `[n]` segments.

    Args:
        path: Path like "/a/b/[0]/c" or "a/items[1]/name"

    Returns:
        Tuple of segments, e.g. ("a", "b", "[0]", "c")
    """
    segments = []
    if not path:
        return tuple(segments)

    start = 1 if path[0] == "/" else 0
    pos = start
    length = len(path)

    while pos < length:
        char = path[pos]
        if char == "[":
            end = path.find("]", pos)
            if end != -1:
                if pos > start:
                    segments.append(path[start:pos])
                segments.append(path[pos:end + 1])
                pos = end + 1
                start = pos
                if pos < length and path[pos] == "/":
                    pos += 1
                    start = pos
                continue
        if char == "/":
            if pos > start:
                segments.append(path[start:pos])
            start = pos + 1
        pos += 1

    if start < length:
        segments.append(path[start:])

    return tuple(segments)


class PathNavigator:
    """Resolves paths against JSON trees with a shared segment cache."""

    def __init__(self):
        self._cache: dict[str, tuple[str, ...]] = {}
        self._lock = _ReadWriteLock()

    def segments(self, path: str) -> tuple[str, ...]:
        """Return the cached segment list for a path, parsing it on first use."""
        with self._lock.read():
            cached = self._cache.get(path)
        if cached is not None:
            return cached

        with self._lock.write():
            # Another writer may have inserted it while we waited
            cached = self._cache.get(path)
            if cached is not None:
                return cached
            parsed = split_path(path)
            self._cache[path] = parsed
            logger.debug(f"Cached path {path!r} as {len(parsed)} segments")
            return parsed

    def resolve(self, document: Any, path: str) -> Any:
        """Resolve a path against a document.

        Args:
            document: Parsed JSON value (dict/list/scalar)
            path: Slash-delimited path

        Returns:
            The addressed JSON value (may be None for JSON null)

        Raises:
            PathNotFoundError: an object key is missing
            PathTypeMismatchError: key applied to a non-object, index applied to a
                non-array, or index out of bounds
        """
        current = document
        for segment in self.segments(path):
            match = INDEX_SEGMENT.match(segment)
            if match:
                if not isinstance(current, list):
                    raise PathTypeMismatchError(
                        f"Expected array at path segment: {segment}", json_path=path
                    )
                index = int(match.group(1))
                if index >= len(current):
                    raise PathTypeMismatchError(
                        f"Array index out of bounds: {segment}", json_path=path
                    )
                current = current[index]
                continue

            if not isinstance(current, dict):
                raise PathTypeMismatchError(
                    f"Expected object at path segment: {segment}", json_path=path
                )
            value = current.get(segment, _MISSING)
            if value is _MISSING:
                raise PathNotFoundError(f"Property not found: {segment}", json_path=path)
            current = value

        return current

    def has_path(self, document: Any, path: str) -> bool:
        try:
            self.resolve(document, path)
        except DataError:
            return False
        return True

    def get_value_or(self, document: Any, path: str, default: Any = None) -> Any:
        """Resolve a path, returning `default` on any resolution failure."""
        try:
            return self.resolve(document, path)
        except DataError:
            return default

    def clear_cache(self):
        with self._lock.write():
            self._cache.clear()

    def cache_size(self) -> int:
        with self._lock.read():
            return len(self._cache)
