# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Value coercion for Flagtree fields.

Converts the raw strings captured during structural parsing into typed values.
Numbers follow the documented dialect: surrounding whitespace is ignored, an
empty string is zero, and exponent notation is accepted. `Infinity` and the
unsigned `0x`, `0o` and `0b` literals parse too. Integers are numbers that are
exactly integral, so `-1.2e5` is the int `-120000` while `1.2` fails.

Functions:
- coerce_bool: Convert a string to a boolean.
- coerce_number: Convert a string to a float.
- coerce_int: Convert a string to an int.
- coerce_value: Dispatch on a `FieldKind`.
- default_parser: The standard async `ParseFn` for a `FieldKind`.
- checked_parse: Apply a field's parser to a missing, single, or repeated candidate.
"""
from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any

from flagtree.exceptions import CoercionError
from flagtree.parser.field_kind import FieldKind
from flagtree.protocols import CandidateValue, ParseFn, ParseState
from flagtree.utils import ensure_async

if TYPE_CHECKING:
    from flagtree.parser.field import FieldSpec

TRUE_VALUES = frozenset({"1", "t", "true", "y", "yes"})
FALSE_VALUES = frozenset({"0", "f", "false", "n", "no"})

DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
INFINITY_PATTERN = re.compile(r"^[+-]?Infinity$")
PREFIXED_PATTERN = re.compile(r"^0([xXoObB])([0-9a-fA-F]+)$")
PREFIX_BASES = {"x": 16, "o": 8, "b": 2}


def coerce_bool(value: str) -> bool:
    """
    Convert a string to a boolean.

    Args:
        value (str): One of `1, t, true, y, yes` or `0, f, false, n, no`, any case.

    Returns:
        bool: Parsed boolean result.

    Raises:
        CoercionError: If the string is not a recognized boolean.
    """
    normalized = value.lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise CoercionError(f'cannot convert "{value}" to boolean.')


def _parse_prefixed(value: str, text: str) -> int | None:
    match = PREFIXED_PATTERN.match(text)
    if match is None:
        return None
    try:
        return int(match.group(2), PREFIX_BASES[match.group(1).lower()])
    except ValueError:
        raise CoercionError(f'cannot parse "{value}" as a number.') from None


def coerce_number(value: str) -> float:
    """
    Convert a string to a float.

    Accepts signed decimals with an optional exponent, `Infinity` with an
    optional sign, and unsigned `0x`, `0o`, `0b` literals.

    Raises:
        CoercionError: If the string is not numeric.
    """
    text = value.strip()
    if not text:
        return 0.0
    prefixed = _parse_prefixed(value, text)
    if prefixed is not None:
        return float(prefixed)
    if INFINITY_PATTERN.match(text):
        return -math.inf if text.startswith("-") else math.inf
    if not DECIMAL_PATTERN.match(text):
        raise CoercionError(f'cannot parse "{value}" as a number.')
    return float(text)


def coerce_int(value: str) -> int:
    """
    Convert a string to an int, accepting exponent forms that are whole numbers.

    Raises:
        CoercionError: If the string is not numeric or not exactly integral.
    """
    text = value.strip()
    if INTEGER_PATTERN.match(text):
        return int(text)
    prefixed = _parse_prefixed(value, text)
    if prefixed is not None:
        return prefixed
    number = coerce_number(value)
    if not math.isfinite(number) or not number.is_integer():
        raise CoercionError(f'cannot parse "{value}" as an integer.')
    return int(number)


def coerce_value(kind: FieldKind, value: str) -> Any:
    """
    Convert a raw string to the Python value for the given kind.

    Raises:
        CoercionError: If the conversion fails.
    """
    if kind in (FieldKind.STRING, FieldKind.PATH):
        return value
    if kind == FieldKind.BOOLEAN:
        return coerce_bool(value)
    if kind == FieldKind.INT:
        return coerce_int(value)
    if kind == FieldKind.FLOAT:
        return coerce_number(value)
    raise CoercionError(f"unsupported value kind {kind!r}")


def default_parser(kind: FieldKind) -> ParseFn:
    """Return the standard parser used when a field has no custom one."""

    async def parse(value: str, _state: ParseState) -> Any:
        return coerce_value(kind, value)

    return parse


def _describe(value: CandidateValue) -> str:
    if isinstance(value, list):
        return ",".join(value)
    return value


async def checked_parse(
    field: FieldSpec, value: CandidateValue | None, state: ParseState
) -> Any:
    """
    Parse a candidate with the field's parser.

    Handles the three candidate shapes: missing (`None`), a single string, or
    a list of strings for repeated fields. Repeated values are parsed one at a
    time, in order; every element is attempted and the first failure is
    reported for the whole field.

    Raises:
        CoercionError: If a required value is missing or any parse fails.
    """
    if value is None:
        if field.required:
            raise CoercionError("is required but not provided")
        return None

    parse = ensure_async(field.parser or default_parser(field.kind))
    if isinstance(value, str):
        try:
            return await parse(value, state)
        except Exception as error:
            raise CoercionError(f'(parsing "{value}"): {error}') from error

    parsed: list[Any] = []
    first_error: Exception | None = None
    for item in value:
        try:
            parsed.append(await parse(item, state))
        except Exception as error:
            if first_error is None:
                first_error = error
    if first_error is not None:
        raise CoercionError(
            f'(parsing "{_describe(value)}"): {first_error}'
        ) from first_error
    return parsed
