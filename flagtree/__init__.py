"""
Flagtree CLI Parsing

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .app import App
from .command import Command
from .exceptions import FlagtreeError
from .formatting import align
from .logger import logger
from .parser import Arg, FieldKind, Flag, complete_file
from .results import Results

__all__ = [
    "App",
    "Arg",
    "Command",
    "FieldKind",
    "Flag",
    "FlagtreeError",
    "Results",
    "align",
    "complete_file",
    "logger",
]
