# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `FieldKind`, the enum of value types a flag or positional argument can
be coerced to.

The enum value doubles as the type label shown in help text, e.g. `[boolean]`.
Config-friendly aliases are accepted when a kind is given as a string:

Example:
    FieldKind("bool")     → FieldKind.BOOLEAN
    FieldKind("number")   → FieldKind.FLOAT
    FieldKind("filename") → FieldKind.PATH
"""
from __future__ import annotations

from enum import Enum


class FieldKind(Enum):
    """
    The value type of a flag or positional argument.

    Members:
        STRING: Raw string, no conversion.
        BOOLEAN: `1/t/true/y/yes` or `0/f/false/n/no`, case-insensitive.
        INT: Any numeric string whose value is exactly integral.
        FLOAT: Any numeric string.
        PATH: A filesystem path, kept as a string.
    """

    STRING = "string"
    BOOLEAN = "boolean"
    INT = "int"
    FLOAT = "float"
    PATH = "path"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "str": "string",
            "bool": "boolean",
            "integer": "int",
            "number": "float",
            "filename": "path",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> FieldKind:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value
