# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by Flagtree.

Only programmer errors (a broken schema or config file) are raised out of the
library. Mistakes in user input are collected as strings in `Results.errors`
so that parsing always finishes with a best-effort result.

Exception Hierarchy:
- FlagtreeError
    ├── CommandAlreadyExistsError
    ├── SchemaError
    ├── CoercionError
    └── ConfigError
"""


class FlagtreeError(Exception):
    """Base exception for Flagtree."""


class CommandAlreadyExistsError(FlagtreeError):
    """Raised when a subcommand name is registered twice under the same parent."""


class SchemaError(FlagtreeError):
    """Raised when flag or argument declarations are inconsistent."""


class CoercionError(FlagtreeError):
    """Raised when a raw string cannot be converted to the declared value kind."""


class ConfigError(FlagtreeError):
    """Raised when a schema config file cannot be loaded."""
