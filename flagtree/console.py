# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Default output sinks for Flagtree applications.

Help text and completion output are plain text, so both consoles print without
markup, highlighting, or wrapping. Applications that want different sinks pass
their own `stdout` / `stderr` callables to `App`.
"""
from rich.console import Console

console = Console(soft_wrap=True, highlight=False, emoji=False)
error_console = Console(stderr=True, soft_wrap=True, highlight=False, emoji=False)


def write_stdout(text: str) -> None:
    """Write plain text to standard output."""
    console.print(text, markup=False)


def write_stderr(text: str) -> None:
    """Write plain text to standard error."""
    error_console.print(text, markup=False)
