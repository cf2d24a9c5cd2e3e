#!/usr/bin/env python3
"""Named value transforms applied to extracted scalars before formatting.

Each transform takes a TransformValue plus string parameters and returns a new
TransformValue tagged with the nGQL type it produces. A TransformEngine starts
with five built-ins:

- time_format:      parse with params['format'], emit 'YYYY-MM-DD HH:MM:SS' (TIMESTAMP)
- price_normalize:  keep digits only, parse as integer (INT64)
- string_normalize: trim, collapse whitespace runs to one space (STRING)
- array_join:       split on params['delimiter'] (default ','), trim parts, rejoin (STRING)
- to_boolean:       true/1/yes or false/0/no, case-insensitive (BOOL)

Engines are plain objects owned by the pipeline. Register custom transforms
before generation starts; lookups are not synchronized against registration.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from ....core.errors import TransformError

logger = logging.getLogger(__name__)

Scalar = Union[str, int, float, bool]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TRIM_CHARS = " \t\n\r"
INT64_MAX = 2**63 - 1

BOOLEAN_VALUES = {
    "true": True,
    "1": True,
    "yes": True,
    "false": False,
    "0": False,
    "no": False,
}


@dataclass(frozen=True)
class TransformValue:
    value: Scalar
    source_type: str = ""  # JSON-side type of the input (STRING, INT64, DOUBLE, BOOL)
    target_type: str = ""  # nGQL type produced by the transform


TransformFunction = Callable[[TransformValue, dict[str, str]], TransformValue]


def convert_value(value: TransformValue, expected: type) -> Scalar:
    """Coerce a TransformValue payload into the type a transform expects.

    The payload is reused when it already has the expected type; numbers and
    booleans are stringified for str; strings are parsed for numeric types.

    Raises:
        TransformError: the payload cannot be converted
    """
    raw = value.value
    if type(raw) is expected:
        return raw

    if expected is str:
        if isinstance(raw, bool):
            return "true" if raw else "false"
        if isinstance(raw, (int, float)):
            return str(raw)
    elif expected in (int, float, bool):
        try:
            if isinstance(raw, (int, float)):
                return expected(raw)
            if isinstance(raw, str):
                return expected(float(raw))
        except (ValueError, OverflowError) as e:
            raise TransformError(f"Conversion error: {e}", source_value=str(raw)) from e

    raise TransformError("Cannot convert value to requested type", source_value=str(raw))


def trim(text: str) -> str:
    return text.strip(TRIM_CHARS)


def format_time(time_str: str, fmt: str) -> str:
    try:
        parsed = datetime.strptime(time_str, fmt)
    except ValueError as e:
        raise TransformError(
            f"Failed to parse time string with format {fmt!r}: {e}",
            context=time_str,
            source_value=time_str,
        ) from e
    return parsed.strftime(TIMESTAMP_FORMAT)


def parse_price(price_str: str) -> int:
    digits = re.sub(r"[^0-9]", "", price_str)
    if not digits:
        raise TransformError(
            "Error parsing price: no digits found", context=price_str, source_value=price_str
        )
    price = int(digits)
    if price > INT64_MAX:
        raise TransformError(
            "Error parsing price: value out of INT64 range", context=price_str, source_value=price_str
        )
    return price


def normalize_string(text: str) -> str:
    return re.sub(r"\s+", " ", trim(text))


def parse_boolean(text: str) -> bool:
    try:
        return BOOLEAN_VALUES[text.lower()]
    except KeyError:
        raise TransformError("Invalid boolean value", context=text, source_value=text) from None


def time_transform(value: TransformValue, params: dict[str, str]) -> TransformValue:
    fmt = params.get("format")
    if not fmt:
        raise TransformError("Missing required parameter: format")
    formatted = format_time(convert_value(value, str), fmt)
    return TransformValue(formatted, source_type="STRING", target_type="TIMESTAMP")


def price_transform(value: TransformValue, params: dict[str, str]) -> TransformValue:
    price = parse_price(convert_value(value, str))
    return TransformValue(price, source_type="STRING", target_type="INT64")


def string_transform(value: TransformValue, params: dict[str, str]) -> TransformValue:
    normalized = normalize_string(convert_value(value, str))
    return TransformValue(normalized, source_type="STRING", target_type="STRING")


def array_join_transform(value: TransformValue, params: dict[str, str]) -> TransformValue:
    delimiter = params.get("delimiter") or ","
    parts = [trim(part) for part in convert_value(value, str).split(delimiter)]
    return TransformValue(delimiter.join(parts), source_type="STRING", target_type="STRING")


def boolean_transform(value: TransformValue, params: dict[str, str]) -> TransformValue:
    parsed = parse_boolean(convert_value(value, str))
    return TransformValue(parsed, source_type="STRING", target_type="BOOL")


BUILTIN_TRANSFORMS: dict[str, TransformFunction] = {
    "time_format": time_transform,
    "price_normalize": price_transform,
    "string_normalize": string_transform,
    "array_join": array_join_transform,
    "to_boolean": boolean_transform,
}


class TransformEngine:
    """Registry of named transform functions."""

    def __init__(self, include_builtins: bool = True):
        self._transforms: dict[str, TransformFunction] = {}
        if include_builtins:
            for name, transform in BUILTIN_TRANSFORMS.items():
                self.register(name, transform)

    def register(self, name: str, transform: TransformFunction):
        """Register (or replace) a transform under a name."""
        if name in self._transforms:
            logger.info(f"Replacing registered transform '{name}'")
        self._transforms[name] = transform

    def has_transform(self, name: str) -> bool:
        return name in self._transforms

    @property
    def names(self) -> list[str]:
        return sorted(self._transforms)

    def apply(
        self, name: str, value: TransformValue, params: dict[str, str] | None = None
    ) -> TransformValue:
        """Apply a named transform.

        Raises:
            TransformError: unknown name, or the transform itself failed
        """
        transform = self._transforms.get(name)
        if transform is None:
            raise TransformError(f"Transform not found: {name}")
        return transform(value, params or {})
