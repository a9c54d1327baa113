# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Command`, a node in the declared command tree.

Each command owns its flags, its positional arguments, its subcommands and an
optional action. A command without an action is a container for subcommands.
The `parent` link is only used to qualify names and to inherit flags; flag
lookups walk the command's own flags first, then each ancestor's, nearest first.

Schema mistakes are programmer errors and raise immediately:
- registering the same subcommand name twice (`CommandAlreadyExistsError`)
- a repeated positional that is not the last one (`SchemaError`)
- two visible flags or two args sharing a `var_name` (`SchemaError`)
"""
from __future__ import annotations

from typing import Iterable

from flagtree.exceptions import CommandAlreadyExistsError, SchemaError
from flagtree.formatting import align
from flagtree.logger import logger
from flagtree.parser.field import Arg, Flag
from flagtree.protocols import ActionFn


class Command:
    """
    A command or subcommand.

    Attributes:
        name (str): Name typed on the command line; the app name for the root.
        help (str): One-line description shown in usage.
        parent (Command | None): Enclosing command, `None` for the root.
        subcommands (dict[str, Command]): Children keyed by unique name.
        flags (list[Flag]): Flags declared on this command, in declaration order.
        args (list[Arg]): Positional arguments, in declaration order.
        action (ActionFn | None): Called with `(args, flags)` when selected.
    """

    def __init__(
        self,
        name: str,
        help: str = "",
        parent: Command | None = None,
        flags: Iterable[Flag] | None = None,
        args: Iterable[Arg] | None = None,
        action: ActionFn | None = None,
    ) -> None:
        self.name: str = name
        self.help: str = help
        self.parent: Command | None = parent
        self.subcommands: dict[str, Command] = {}
        self.flags: list[Flag] = list(flags or [])
        self.args: list[Arg] = list(args or [])
        self.action: ActionFn | None = action
        if action is not None and not callable(action):
            raise SchemaError(f"Action for '{self.full_name}' must be callable")
        self._validate_args()
        self.validate_flags()

    def _validate_args(self) -> None:
        seen: set[str] = set()
        for index, arg in enumerate(self.args):
            if not isinstance(arg, Arg):
                raise SchemaError(f"'{self.full_name}' args must be Arg instances")
            if arg.repeated and index != len(self.args) - 1:
                raise SchemaError(
                    f"Arg '{arg.name}' of '{self.full_name}' is repeated "
                    "but is not the last positional argument"
                )
            if arg.var_name in seen:
                raise SchemaError(
                    f"Arg var_name '{arg.var_name}' is defined twice in "
                    f"'{self.full_name}'"
                )
            seen.add(arg.var_name)

    def validate_flags(self) -> None:
        """
        Check that flag var_names are unique among the flags visible at this
        command and at every command below it.
        """
        seen: dict[str, Flag] = {}
        for flag in self.all_flags():
            if not isinstance(flag, Flag):
                raise SchemaError(f"'{self.full_name}' flags must be Flag instances")
            existing = seen.get(flag.var_name)
            if existing is not None and existing is not flag:
                raise SchemaError(
                    f"Flag var_name '{flag.var_name}' is used by both "
                    f"'--{existing.name}' and '--{flag.name}' in '{self.full_name}'"
                )
            seen[flag.var_name] = flag
        for subcommand in self.subcommands.values():
            subcommand.validate_flags()

    def add_command(
        self,
        name: str,
        help: str = "",
        flags: Iterable[Flag] | None = None,
        args: Iterable[Arg] | None = None,
        action: ActionFn | None = None,
    ) -> Command:
        """
        Register a subcommand.

        Raises:
            CommandAlreadyExistsError: If `name` is already registered here.
        """
        if name in self.subcommands:
            raise CommandAlreadyExistsError(
                f'"{self.full_name}" has subcommand {name} registered twice'
            )
        command = Command(name, help, parent=self, flags=flags, args=args, action=action)
        self.subcommands[name] = command
        logger.debug("Registered subcommand '%s'", command.full_name)
        return command

    def lookup_flag_by_name(self, name: str) -> Flag | None:
        """Find a flag by long name, searching this command then its ancestors."""
        command: Command | None = self
        while command is not None:
            for flag in command.flags:
                if flag.name == name:
                    return flag
            command = command.parent
        return None

    def lookup_flag_by_char(self, char: str) -> Flag | None:
        """Find a flag by short character, searching this command then its ancestors."""
        command: Command | None = self
        while command is not None:
            for flag in command.flags:
                if flag.char == char:
                    return flag
            command = command.parent
        return None

    def lookup_flag_by_var_name(self, var_name: str) -> Flag | None:
        """Find a flag by result key, searching this command then its ancestors."""
        command: Command | None = self
        while command is not None:
            for flag in command.flags:
                if flag.var_name == var_name:
                    return flag
            command = command.parent
        return None

    def lineage(self) -> list[Command]:
        """Commands from the root down to this one."""
        chain: list[Command] = []
        command: Command | None = self
        while command is not None:
            chain.append(command)
            command = command.parent
        return list(reversed(chain))

    @property
    def full_name(self) -> str:
        """The fully-qualified name, e.g. `myapp core import`."""
        if self.parent:
            return f"{self.parent.full_name} {self.name}"
        return self.name

    @property
    def short_usage(self) -> str:
        """Compact usage, e.g. `myapp run <state> [target]`."""
        arg_usage = " ".join(arg.doc_name for arg in self.args)
        return f"{self.full_name} {arg_usage}"

    def inherited_flags(self) -> list[Flag]:
        """Flags from ancestor commands, root first. Does not include own flags."""
        if not self.parent:
            return []
        return self.parent.inherited_flags() + self.parent.flags

    def all_flags(self) -> list[Flag]:
        """Own flags followed by inherited flags."""
        return self.flags + self.inherited_flags()

    def full_usage(self, verbose: bool = False) -> str:
        """
        Build the full help for this command.

        Sections: usage lines, positional args, own flags, and inherited flags
        ("Other Flags"). Hidden flags are only listed when `verbose` is set.
        """
        local_usage = f"  {self.short_usage}\t{self.help}"
        subcommand_usage = [
            f"  {command.short_usage}\t{command.help}"
            for command in self.subcommands.values()
        ]
        has_local_action = self.action is not None or bool(self.args)
        if subcommand_usage and has_local_action:
            usage_lines = [local_usage] + subcommand_usage
        elif has_local_action:
            usage_lines = [local_usage]
        else:
            usage_lines = subcommand_usage
        base_usage = "Usage:\n" + "\n".join(align(usage_lines))

        arg_docs = "\n".join(
            align([f"  {arg.doc_name}\t{arg.full_help}" for arg in self.args])
        )
        if arg_docs:
            arg_docs = f"\nArgs:\n{arg_docs}\n"

        flag_docs = "\n".join(align(self._flag_lines(self.flags, verbose)))
        if flag_docs:
            flag_docs = f"\nFlags:\n{flag_docs}\n"

        other_flag_docs = "\n".join(
            align(self._flag_lines(self.inherited_flags(), verbose))
        )
        if other_flag_docs:
            other_flag_docs = f"\nOther Flags:\n{other_flag_docs}\n"

        return f"{base_usage}\n{arg_docs}{flag_docs}{other_flag_docs}"

    @staticmethod
    def _flag_lines(flags: list[Flag], verbose: bool) -> list[str]:
        return [
            f"  {flag.short_usage}\t{flag.full_help}"
            for flag in flags
            if verbose or not flag.hidden
        ]

    def __str__(self) -> str:
        return (
            f"Command(name='{self.full_name}', flags={len(self.flags)}, "
            f"args={len(self.args)}, subcommands={len(self.subcommands)})"
        )

    def __repr__(self) -> str:
        return str(self)
