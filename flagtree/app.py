# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `App`, the entry point for declaring and parsing a command-line tool.

An `App` owns the root `Command` and the process-facing pieces around parsing:
the output sinks, the termination strategy, help printing and shell completion.

Example:
    app = App(
        "deploy",
        "Ship things.",
        flags=[Flag.boolean("dry-run", "Print instead of doing", "n")],
    ).with_default_flags()
    app.command("push", "Push a build", args=[Arg.string("target", required=True)],
                action=push)

    results = await app.parse()
    await results.run()

`parse()` never raises for bad user input. Errors are collected on the
`Results`, and `Results.run()` decides whether to print help, exit, or run the
selected action.
"""
from __future__ import annotations

import os
import sys
from typing import Callable, Iterable, Mapping

from flagtree.command import Command
from flagtree.console import write_stderr, write_stdout
from flagtree.logger import logger
from flagtree.parser.field import Arg, Flag
from flagtree.parser.session import ParseSession
from flagtree.protocols import ActionFn
from flagtree.results import Results

HELP_VAR = "help"
BASH_COMPLETIONS_VAR = "show_bash_completions"
BASH_SCRIPT_VAR = "completion_script_bash"


class App:
    """
    A command-line application.

    Attributes:
        root (Command): The root command, named after the app.
        stdout (Callable[[str], None]): Sink for help and completion output.
        stderr (Callable[[str], None]): Sink for errors.
        terminate (Callable[[int], None]): Called with an exit code to stop early.
    """

    def __init__(
        self,
        name: str,
        help: str = "",
        flags: Iterable[Flag] | None = None,
        args: Iterable[Arg] | None = None,
        action: ActionFn | None = None,
        stdout: Callable[[str], None] | None = None,
        stderr: Callable[[str], None] | None = None,
        terminate: Callable[[int], None] | None = None,
    ) -> None:
        self.root = Command(name, help, flags=flags, args=args, action=action)
        self.stdout: Callable[[str], None] = stdout or write_stdout
        self.stderr: Callable[[str], None] = stderr or write_stderr
        self.terminate: Callable[[int], None] = terminate or sys.exit

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def help(self) -> str:
        return self.root.help

    def command(
        self,
        name: str,
        help: str = "",
        flags: Iterable[Flag] | None = None,
        args: Iterable[Arg] | None = None,
        action: ActionFn | None = None,
    ) -> Command:
        """Add a subcommand to the root command."""
        return self.root.add_command(name, help, flags=flags, args=args, action=action)

    def with_default_flags(self) -> App:
        """
        Prepend the flags every app should have:
        `-h/--help`, hidden `--completion-bash` and hidden `--completion-script-bash`.
        """
        self.root.flags[:0] = [
            Flag.boolean("help", "Print help and exit", "h"),
            Flag.boolean(
                "completion-bash",
                "Output possible completions for the given args",
                hidden=True,
                var_name=BASH_COMPLETIONS_VAR,
            ),
            Flag.boolean(
                "completion-script-bash",
                "Generate completion script for bash.",
                hidden=True,
            ),
        ]
        self.root.validate_flags()
        return self

    async def parse(
        self,
        argv: list[str] | None = None,
        env: Mapping[str, str] | None = None,
    ) -> Results:
        """
        Parse a command line.

        Args:
            argv (list[str] | None): Full argv including the binary. Defaults to
                `sys.argv`. Leading interpreter entries are skipped.
            env (Mapping[str, str] | None): Environment for env var fallbacks.
                Defaults to `os.environ`.

        Returns:
            Results: Parsed values, the selected command and any errors.

        If the completion flags are set, their output is written to `stdout` and
        `terminate(0)` is called before returning.
        """
        session = ParseSession(
            self,
            list(sys.argv if argv is None else argv),
            os.environ if env is None else env,
        )
        results = await session.parse()

        if results.flags.get(BASH_SCRIPT_VAR):
            logger.debug("Writing bash completion script for '%s'", results.binary)
            self.stdout(session.completion_script_bash())
            self.terminate(0)
        elif results.flags.get(BASH_COMPLETIONS_VAR):
            options = await session.completion_options()
            logger.debug("Writing %d completion option(s)", len(options))
            self.stdout("\n".join(options))
            self.terminate(0)

        return results

    async def complete(
        self,
        tokens: list[str],
        env: Mapping[str, str] | None = None,
    ) -> list[str]:
        """
        Completion suggestions for `tokens` (the words typed after the binary).

        Unlike `parse()`, nothing is written and nothing terminates.
        """
        session = ParseSession(
            self,
            [self.root.name, *tokens],
            os.environ if env is None else env,
        )
        await session.parse()
        return await session.completion_options()

    def print_help(
        self,
        results: Results,
        verbose: bool = False,
        doc_out: Callable[[str], None] | None = None,
        err_out: Callable[[str], None] | None = None,
    ) -> None:
        """Print the help for the selected command, then any errors."""
        doc_out = doc_out or self.stdout
        err_out = err_out or self.stderr
        doc_out(f"{self.root.help}\n\n{results.command.full_usage(verbose)}")
        if results.errors:
            err_out("ERROR: " + "\nERROR: ".join(results.errors))

    def __str__(self) -> str:
        return f"App(name='{self.name}', commands={list(self.root.subcommands)})"
