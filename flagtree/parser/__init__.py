# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Field declarations and value coercion for Flagtree.

`ParseSession` lives in `flagtree.parser.session` and is not re-exported here,
because it depends on `flagtree.command`, which itself imports this package.
"""
from .coercion import checked_parse, coerce_value, default_parser
from .completion import complete_file
from .field import Arg, FieldSpec, Flag
from .field_kind import FieldKind

__all__ = [
    "Arg",
    "FieldKind",
    "FieldSpec",
    "Flag",
    "checked_parse",
    "coerce_value",
    "complete_file",
    "default_parser",
]
