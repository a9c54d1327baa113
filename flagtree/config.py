# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Declarative command trees for Flagtree, loaded from YAML or TOML.

A config file describes the root app and nests subcommands under `commands`.
Actions, parsers and completers are dotted import paths:

    name: deploy
    help: Ship things.
    flags:
      - name: verbose
        type: bool
        char: v
    commands:
      - name: push
        help: Push a build
        action: deploy.tasks.push
        args:
          - name: target
            required: true
            allowed_values: [staging, prod]
"""
from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Callable

import toml
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from flagtree.app import App
from flagtree.command import Command
from flagtree.exceptions import ConfigError
from flagtree.logger import logger
from flagtree.parser.field import Arg, Flag
from flagtree.parser.field_kind import FieldKind


def import_callable(dotted_path: str) -> Callable[..., Any]:
    """Dynamically imports a callable from a dotted path like 'my.module.func'."""
    module_path, _, attr = dotted_path.rpartition(".")
    if not module_path:
        raise ConfigError(f"Invalid import path: {dotted_path!r}")
    try:
        module = importlib.import_module(module_path)
    except ImportError as error:
        logger.error("Failed to import module '%s': %s", module_path, error)
        raise ConfigError(
            f"Could not import '{dotted_path}': {error}. Ensure the module is "
            "installed and discoverable via PYTHONPATH."
        ) from error
    try:
        target = getattr(module, attr)
    except AttributeError as error:
        logger.error(
            "Module '%s' does not have attribute '%s': %s", module_path, attr, error
        )
        raise ConfigError(
            f"Module '{module_path}' has no attribute '{attr}'"
        ) from error
    if not callable(target):
        raise ConfigError(f"'{dotted_path}' is not callable")
    return target


def _optional_callable(dotted_path: str | None) -> Callable[..., Any] | None:
    return import_callable(dotted_path) if dotted_path else None


def _to_kind(value: str) -> FieldKind:
    try:
        return FieldKind(value)
    except ValueError as error:
        raise ConfigError(str(error)) from error


def _stringify(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_stringify(item) for item in value]
    return str(value)


class RawField(BaseModel):
    """Fields shared by raw flag and arg entries."""

    name: str
    help: str = ""
    type: str = "string"
    var_name: str = ""
    required: bool = False
    repeated: bool = False
    allowed_values: list[str] | None = None
    default_value: str | list[str] | None = None
    env_var: str | None = None
    parser: str | None = None
    completer: str | None = None

    @field_validator("allowed_values", "default_value", mode="before")
    @classmethod
    def stringify_values(cls, value: Any) -> Any:
        return _stringify(value)

    def field_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "var_name": self.var_name,
            "required": self.required,
            "repeated": self.repeated,
            "allowed_values": self.allowed_values,
            "env_var": self.env_var,
            "parser": _optional_callable(self.parser),
            "completer": _optional_callable(self.completer),
        }
        if self.default_value is not None:
            options["default_value"] = self.default_value
        return options


class RawFlag(RawField):
    """Raw flag model for Flagtree configuration."""

    char: str | None = None
    hidden: bool = False
    deprecated: bool = False
    arg_display_name: str | None = None

    def to_flag(self) -> Flag:
        options = self.field_options()
        options.update(hidden=self.hidden, deprecated=self.deprecated)
        if self.arg_display_name:
            options["arg_display_name"] = self.arg_display_name
        factory = {
            FieldKind.STRING: Flag.string,
            FieldKind.BOOLEAN: Flag.boolean,
            FieldKind.INT: Flag.integer,
            FieldKind.FLOAT: Flag.number,
            FieldKind.PATH: Flag.path,
        }[_to_kind(self.type)]
        return factory(self.name, self.help, self.char, **options)


class RawArg(RawField):
    """Raw positional argument model for Flagtree configuration."""

    def to_arg(self) -> Arg:
        return Arg(_to_kind(self.type), self.name, self.help, **self.field_options())


class RawCommand(BaseModel):
    """Raw command model; `commands` nests subcommands."""

    name: str
    help: str = ""
    action: str | None = None
    flags: list[RawFlag] = Field(default_factory=list)
    args: list[RawArg] = Field(default_factory=list)
    commands: list[RawCommand] = Field(default_factory=list)

    def attach(self, parent: Command) -> Command:
        command = parent.add_command(
            self.name,
            self.help,
            flags=[flag.to_flag() for flag in self.flags],
            args=[arg.to_arg() for arg in self.args],
            action=_optional_callable(self.action),
        )
        for raw_command in self.commands:
            raw_command.attach(command)
        return command


RawCommand.model_rebuild()


class AppConfig(BaseModel):
    """Flagtree application configuration model."""

    name: str
    help: str = ""
    default_flags: bool = True
    action: str | None = None
    flags: list[RawFlag] = Field(default_factory=list)
    args: list[RawArg] = Field(default_factory=list)
    commands: list[RawCommand] = Field(default_factory=list)

    def to_app(self, **app_options: Any) -> App:
        app = App(
            self.name,
            self.help,
            flags=[flag.to_flag() for flag in self.flags],
            args=[arg.to_arg() for arg in self.args],
            action=_optional_callable(self.action),
            **app_options,
        )
        for raw_command in self.commands:
            raw_command.attach(app.root)
        if self.default_flags:
            app.with_default_flags()
        return app


def loader(file_path: Path | str, **app_options: Any) -> App:
    """
    Load a Flagtree application from a YAML or TOML file.

    Args:
        file_path (Path | str): Path to the config file (`.yaml`, `.yml`, `.toml`).
        **app_options: Passed to `App`, e.g. `stdout`, `stderr`, `terminate`.

    Returns:
        App: The application described by the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file cannot be parsed or does not describe an app.
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    if not path.is_file():
        raise FileNotFoundError(f"No such config file: {file_path}")

    suffix = path.suffix
    with path.open("r", encoding="UTF-8") as config_file:
        try:
            if suffix in (".yaml", ".yml"):
                raw_config = yaml.safe_load(config_file)
            elif suffix == ".toml":
                raw_config = toml.load(config_file)
            else:
                raise ConfigError(f"Unsupported config format: {suffix}")
        except (yaml.YAMLError, toml.TomlDecodeError) as error:
            raise ConfigError(f"Could not parse {path}: {error}") from error

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a mapping describing the app.\n"
            "Example:\n"
            "name: 'mycli'\n"
            "commands:\n"
            "  - name: 'run'\n"
            "    help: 'Example command'\n"
            "    action: 'my_module.my_function'"
        )

    try:
        config = AppConfig.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigError(f"Invalid config in {path}:\n{error}") from error

    logger.debug("Loaded config for '%s' from %s", config.name, path)
    return config.to_app(**app_options)
