# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Results`, the outcome of parsing one command line.

Parsing always completes: user mistakes are collected in `errors` and the
flags/args maps hold a best-effort value (`None` when unset or invalid) for
every field from the root command down to the selected command.

`run()` provides the usual execution semantics on top of a parse:
- errors: print help and errors to stderr, terminate with 1
- `--help`: print help to stdout, terminate with 0
- no action on the selected command: print help to stderr, terminate with 1
- otherwise: await the selected command's action with `(args, flags)`
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from flagtree.logger import logger
from flagtree.utils import ensure_async

if TYPE_CHECKING:
    from flagtree.app import App
    from flagtree.command import Command


@dataclass
class Results:
    """
    Parsed values for a command line.

    Attributes:
        binary (str): The invoked binary path (`argv[0]` after interpreters).
        command (Command): The selected command.
        app (App): The app that produced these results.
        flags (dict[str, Any]): Typed flag values keyed by `var_name`.
        args (dict[str, Any]): Typed positional values keyed by `var_name`.
        errors (list[str]): Human-readable parse errors, in encounter order.
    """

    binary: str
    command: Command
    app: App = field(repr=False, compare=False)
    flags: dict[str, Any] = field(default_factory=dict)
    args: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    async def run(
        self,
        verbose_help: bool = False,
        stdout: Callable[[str], None] | None = None,
        stderr: Callable[[str], None] | None = None,
    ) -> None:
        """
        Print help or run the selected command's action.

        Args:
            verbose_help (bool): Include hidden flags in printed help.
            stdout (Callable | None): Sink for regular help output.
            stderr (Callable | None): Sink for errors and error-path help.
        """
        stdout = stdout or self.app.stdout
        stderr = stderr or self.app.stderr
        if self.errors:
            logger.debug("Parse failed with %d error(s)", len(self.errors))
            self.app.print_help(self, verbose_help, stderr, stderr)
            self.app.terminate(1)
        elif self.flags.get("help"):
            self.app.print_help(self, verbose_help, stdout)
            self.app.terminate(0)
        elif self.command.action is None:
            logger.debug("'%s' has no action, showing help", self.command.full_name)
            self.app.print_help(self, verbose_help, stderr, stderr)
            self.app.terminate(1)
        else:
            logger.debug("Running action for '%s'", self.command.full_name)
            await ensure_async(self.command.action)(self.args, self.flags)
