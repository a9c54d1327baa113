# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `Flag` and `Arg` declarations that make up a command's schema.

Both share `FieldSpec`: a value kind, a display name, help text, the result key
(`var_name`), and the optional default, environment variable, allow-list and
custom parse/complete callbacks. Defaults and environment values are only
consulted when nothing was given on the command line.

Flags add a short character, hidden/deprecated markers and a display name for
their value. Any boolean flag `x` is also matched by `--no-x`.

Example:
    Flag.integer("num", "some number", "n", required=True, default_value="5")
    Flag.boolean("opt", "some boolean option", var_name="opt_var")
    Arg.string("str-arg", "blah", allowed_values=["x", "y"])
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from flagtree.exceptions import SchemaError
from flagtree.parser.field_kind import FieldKind
from flagtree.protocols import CandidateValue, CompleteFn, ParseFn
from flagtree.utils import to_var_name


@dataclass
class FieldSpec:
    """
    The declaration shared by flags and positional arguments.

    Attributes:
        kind (FieldKind): The value type; strings are normalized to `FieldKind`.
        name (str): The command-line name, e.g. `num` for `--num`.
        help (str): Help text.
        var_name (str): Key in the parse results. Defaults to snake_case of `name`.
        required (bool): A value must be supplied or resolved.
        repeated (bool): Accumulate every value into an ordered list.
        allowed_values (list[str] | None): Allowed raw values, checked before parsing.
        default_value (str | list[str] | None): Used when no value is given.
        env_var (str | None): Environment variable consulted before the default.
        parser (ParseFn | None): Custom parse callback, sync or async.
        completer (CompleteFn | None): Custom completion callback, sync or async.
    """

    kind: FieldKind
    name: str
    help: str = ""
    var_name: str = ""
    required: bool = False
    repeated: bool = False
    allowed_values: list[str] | None = None
    default_value: str | list[str] | None = None
    env_var: str | None = None
    parser: ParseFn | None = field(default=None, compare=False, repr=False)
    completer: CompleteFn | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, FieldKind):
            try:
                self.kind = FieldKind(self.kind)
            except ValueError as error:
                raise SchemaError(str(error)) from error
        if not self.name or self.name.startswith("-"):
            raise SchemaError(
                f"Invalid name {self.name!r}: names must be non-empty and "
                "must not start with '-'"
            )
        if not self.var_name:
            self.var_name = to_var_name(self.name)
        if not self.var_name:
            raise SchemaError(f"Cannot derive a var_name from {self.name!r}")
        if isinstance(self.default_value, list) and not self.repeated:
            raise SchemaError(
                f"{self.name!r} has a list default but is not repeated"
            )
        if self.allowed_values is not None:
            self.allowed_values = [str(value) for value in self.allowed_values]

    @property
    def type_name(self) -> str:
        """Label used in help text, e.g. `boolean`."""
        return self.kind.value

    def is_allowed(self, value: CandidateValue | None) -> bool:
        """Check a raw value (or every value of a list) against the allow-list."""
        if self.allowed_values is None or value is None:
            return True
        if isinstance(value, str):
            return value in self.allowed_values
        return all(self.is_allowed(item) for item in value)

    @property
    def allowed_doc(self) -> str:
        """The allow-list as comma-separated quoted values."""
        if self.allowed_values is None:
            return "<unspecified>"
        return ", ".join(f'"{value}"' for value in self.allowed_values)

    @property
    def full_help(self) -> str:
        """The help string with the default and type suffixes."""
        text = self.help
        is_boolean_with_default_false = (
            self.kind == FieldKind.BOOLEAN and self.default_value == "false"
        )
        if self.default_value and not is_boolean_with_default_false:
            text += f" [Default: {json.dumps(self.default_value)}]"
        markers = [self.type_name]
        if self.repeated:
            markers.append("repeatable")
        if getattr(self, "hidden", False):
            markers.append("hidden")
        if getattr(self, "deprecated", False):
            markers.append("deprecated")
        return f"{text} [{', '.join(markers)}]"


@dataclass
class Arg(FieldSpec):
    """A positional argument, matched by its position within the selected command."""

    @property
    def doc_name(self) -> str:
        if self.required:
            return f"<{self.name}>"
        if self.repeated:
            return f"[{self.name}...]"
        return f"[{self.name}]"

    @classmethod
    def string(cls, name: str, help: str = "", **options: Any) -> Arg:
        return cls(FieldKind.STRING, name, help, **options)

    @classmethod
    def boolean(cls, name: str, help: str = "", **options: Any) -> Arg:
        return cls(FieldKind.BOOLEAN, name, help, **options)

    @classmethod
    def integer(cls, name: str, help: str = "", **options: Any) -> Arg:
        return cls(FieldKind.INT, name, help, **options)

    @classmethod
    def number(cls, name: str, help: str = "", **options: Any) -> Arg:
        return cls(FieldKind.FLOAT, name, help, **options)

    @classmethod
    def path(cls, name: str, help: str = "", **options: Any) -> Arg:
        return cls(FieldKind.PATH, name, help, **options)


@dataclass
class Flag(FieldSpec):
    """
    A named option, `--name` / `-c`.

    Attributes:
        char (str | None): Optional single-character short form.
        hidden (bool): Left out of help unless verbose; still parsed.
        deprecated (bool): Marked as deprecated in help; purely informational.
        arg_display_name (str): Name of the value in help, e.g. `--num <n>`.
    """

    char: str | None = None
    hidden: bool = False
    deprecated: bool = False
    arg_display_name: str = "val"

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.char is not None and (len(self.char) != 1 or self.char == "-"):
            raise SchemaError(
                f"Flag '{self.name}' short form must be a single character, "
                f"got {self.char!r}"
            )
        if self.kind == FieldKind.BOOLEAN and self.repeated:
            raise SchemaError(f"Boolean flag '{self.name}' cannot be repeated")

    @property
    def is_boolean(self) -> bool:
        return self.kind == FieldKind.BOOLEAN

    @property
    def doc_names(self) -> list[str]:
        """Every spelling that selects this flag."""
        names = [f"--{self.name}"]
        if self.char:
            names.insert(0, f"-{self.char}")
        if self.is_boolean:
            names.append(f"--no-{self.name}")
        return names

    @property
    def short_usage(self) -> str:
        names = []
        if self.char:
            names.append(f"-{self.char}")
        if self.is_boolean:
            if self.default_value == "false":
                names.append(f"--{self.name}")
            else:
                names.append(f"--[no-]{self.name}")
        else:
            names.append(f"--{self.name} <{self.arg_display_name}>")
        return ", ".join(names)

    @classmethod
    def boolean(
        cls, name: str, help: str = "", char: str | None = None, **options: Any
    ) -> Flag:
        options.setdefault("default_value", "false")
        return cls(FieldKind.BOOLEAN, name, help, char=char, **options)

    @classmethod
    def string(
        cls, name: str, help: str = "", char: str | None = None, **options: Any
    ) -> Flag:
        return cls(FieldKind.STRING, name, help, char=char, **options)

    @classmethod
    def integer(
        cls, name: str, help: str = "", char: str | None = None, **options: Any
    ) -> Flag:
        options.setdefault("arg_display_name", "n")
        return cls(FieldKind.INT, name, help, char=char, **options)

    @classmethod
    def number(
        cls, name: str, help: str = "", char: str | None = None, **options: Any
    ) -> Flag:
        options.setdefault("arg_display_name", "num")
        return cls(FieldKind.FLOAT, name, help, char=char, **options)

    @classmethod
    def path(
        cls, name: str, help: str = "", char: str | None = None, **options: Any
    ) -> Flag:
        options.setdefault("arg_display_name", "path")
        return cls(FieldKind.PATH, name, help, char=char, **options)
