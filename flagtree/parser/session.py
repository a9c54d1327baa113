# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
This module implements `ParseSession`, the engine that turns an argv and an
environment into `Results` for a declared command tree.

Parsing happens in two phases:

Phase 1, structure (synchronous): a single pass over argv walks the command
tree, classifies each token as a flag, a subcommand or a positional value, and
records raw string candidates per field. Once the tokens of a command level are
exhausted, missing fields are filled from the environment, then from static
defaults. This phase alone decides which command is selected.

Phase 2, values (may suspend): every candidate is coerced in a fixed order:
flags from the root command down to the selected command in declaration order,
then the selected command's positional arguments. Custom parsers can rely on
that order to read values coerced before them.

Dialect:
- `--name value`, `--name=value`, `-c value`, `-cVALUE`
- `--no-name` for boolean flags; booleans never consume the next token
- a non-boolean flag consumes the next token even if it looks like a flag
- a bare `--` ends flag parsing; later tokens are positional
- once a positional value is seen, no further subcommand is entered

User errors never raise. Each one is appended to `Results.errors` and parsing
carries on, so a single invocation reports every problem at once.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PureWindowsPath
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from flagtree.exceptions import CoercionError, FlagtreeError
from flagtree.logger import logger
from flagtree.parser.coercion import checked_parse
from flagtree.parser.completion import completion_options, completion_script_bash
from flagtree.parser.field import Arg, FieldSpec, Flag
from flagtree.protocols import CandidateValue
from flagtree.results import Results

if TYPE_CHECKING:
    from flagtree.app import App
    from flagtree.command import Command

INTERPRETER_PATTERN = re.compile(r"^(python[\d.]*|pypy[\d.]*|node)(\.exe)?$")
FLAG_SEPARATOR = "--"


@dataclass
class Candidates:
    """Raw string values per `var_name`, before coercion."""

    flags: dict[str, CandidateValue | None] = field(default_factory=dict)
    args: dict[str, CandidateValue | None] = field(default_factory=dict)


class ParseSession:
    """
    State for parsing one command line.

    Attributes:
        argv (list[str]): The argv as given, including the binary.
        tokens (list[str]): The argv after the binary, as typed by the user.
        env (Mapping[str, str]): Environment used for env var fallbacks.
        remaining_tokens (list[str]): Tokens not yet consumed by phase 1.
        candidates (Candidates): Raw values captured by phase 1.
        flags_mode_active (bool): False for good once `--` has been seen.
        positional_index (int): Next positional slot of the selected command.
    """

    def __init__(self, app: App, argv: list[str], env: Mapping[str, str]) -> None:
        self._app = app
        self.argv: list[str] = list(argv)
        self.env: Mapping[str, str] = env
        self.remaining_tokens: list[str] = list(argv)
        binary = self._remove_binary_name(self.remaining_tokens)
        self.tokens: list[str] = list(self.remaining_tokens)
        self.candidates = Candidates()
        self.flags_mode_active: bool = True
        self.positional_index: int = 0
        self.last_token_slot: int | None = None
        self._results = Results(binary=binary, command=app.root, app=app)

    @property
    def app(self) -> App:
        return self._app

    @property
    def results(self) -> Results:
        return self._results

    @property
    def flag_candidates(self) -> Mapping[str, CandidateValue | None]:
        return MappingProxyType(self.candidates.flags)

    @property
    def arg_candidates(self) -> Mapping[str, CandidateValue | None]:
        return MappingProxyType(self.candidates.args)

    async def completion_options(self) -> list[str]:
        return await completion_options(self)

    def completion_script_bash(self) -> str:
        return completion_script_bash(self._results.binary)

    async def parse(self) -> Results:
        """Run both parsing phases and return the results."""
        self.parse_structure(self._app.root)
        await self.parse_values(self._results.command)
        return self._results

    def _remove_binary_name(self, tokens: list[str]) -> str:
        """Drop leading interpreter paths, then pop and return the binary."""
        while tokens and INTERPRETER_PATTERN.match(PureWindowsPath(tokens[0]).name):
            logger.debug("Dropping interpreter from argv: %s", tokens.pop(0))
        if not tokens:
            raise FlagtreeError(
                "The argv is empty but should have at least the name of the binary."
            )
        return tokens.pop(0)

    def _error(self, message: str) -> None:
        logger.debug("Parse error: %s", message)
        self._results.errors.append(message)

    def parse_structure(self, command: Command) -> None:
        """
        Phase 1: consume the remaining tokens for `command` and its subcommands.
        """
        self._results.command = command
        found_positional = False
        while self.remaining_tokens:
            token = self.remaining_tokens.pop(0)
            logger.debug("Processing token [%s]", token)
            if self.flags_mode_active and token.startswith("-"):
                self._parse_flag(command, token)
            elif not found_positional and token in command.subcommands:
                self.parse_structure(command.subcommands[token])
            else:
                found_positional = True
                self._parse_arg(command, token)
        self._set_defaults(command)

    def _parse_flag(self, command: Command, token: str) -> None:
        if token == FLAG_SEPARATOR:
            logger.debug('Token "--" found, no more flag parsing.')
            self.flags_mode_active = False
            return

        value: str | None = None
        flag: Flag | None = None
        if token.startswith("--"):
            name, separator, attached = token[2:].partition("=")
            if separator:
                value = attached
            if name.startswith("no-"):
                negated = command.lookup_flag_by_name(name[3:])
                if negated is not None and negated.is_boolean:
                    flag = negated
                    if value:
                        self._error(
                            "Ignored flag value provided for negated boolean flag "
                            f'{negated.name} in "{token}"'
                        )
                    value = "false"
            if flag is None:
                flag = command.lookup_flag_by_name(name)
        else:
            if len(token) > 2:
                value = token[2:]
            flag = command.lookup_flag_by_char(token[1:2])

        if flag is None:
            self._error(f'No flag for "{token}" in "{command.full_name}"')
            return

        if value is None:
            if flag.is_boolean:
                value = "true"
            elif self.remaining_tokens:
                value = self.remaining_tokens.pop(0)

        if value is None:
            self._error(f'Missing value for "{token}" (expected {flag.type_name})')
            return

        if not flag.is_allowed(value):
            self._error(
                f'Flag "{flag.name}" is "{value}" but must be one of {flag.allowed_doc}'
            )
            return

        if flag.repeated:
            logger.debug('Adding flag "%s" value of "%s"', flag.name, value)
            values = self.candidates.flags.get(flag.var_name)
            if not isinstance(values, list):
                values = []
                self.candidates.flags[flag.var_name] = values
            values.append(value)
            return

        if flag.var_name in self.candidates.flags:
            self._error(
                f'Flag "{flag.name}" is specified more than once but is not a '
                "repeatable flag."
            )
            return

        logger.debug('Setting flag "%s" to "%s"', flag.name, value)
        self.candidates.flags[flag.var_name] = value

    def _parse_arg(self, command: Command, token: str) -> None:
        final_token = not self.remaining_tokens
        if self.positional_index >= len(command.args):
            if self.positional_index == 0:
                self._error(f'No such subcommand or positional argument for "{token}".')
            else:
                self._error(f'Unexpected (extra) positional argument "{token}".')
            self.last_token_slot = self.positional_index if final_token else None
            self.positional_index += 1
            return

        arg = command.args[self.positional_index]
        self.last_token_slot = self.positional_index if final_token else None
        if not arg.is_allowed(token):
            self._error(f'Arg "{arg.name}" is "{token}" but must be one of {arg.allowed_doc}')

        if arg.repeated:
            values = self.candidates.args.get(arg.var_name)
            if not isinstance(values, list):
                values = []
                self.candidates.args[arg.var_name] = values
            values.append(token)
            return

        self.candidates.args[arg.var_name] = token
        self.positional_index += 1

    def _set_defaults(self, command: Command) -> None:
        """Fill every field of `command` that has no candidate yet."""
        for flag in command.flags:
            self._set_default(flag, self.candidates.flags, "Flag")
        # Args of parent commands are never coerced, so they get no defaults.
        if command is self._results.command:
            for arg in command.args:
                self._set_default(arg, self.candidates.args, "Arg")

    def _set_default(
        self,
        spec: FieldSpec,
        target: dict[str, CandidateValue | None],
        label: str,
    ) -> None:
        if spec.var_name in target:
            return

        value: CandidateValue | None
        if spec.env_var and spec.env_var in self.env:
            env_value = self.env[spec.env_var]
            value = [env_value] if spec.repeated else env_value
            logger.debug(
                '%s "%s" initialized from env var "%s" to "%s"',
                label,
                spec.name,
                spec.env_var,
                value,
            )
        elif spec.default_value is not None:
            default = spec.default_value
            if isinstance(default, list):
                value = list(default)
            else:
                value = [default] if spec.repeated else default
            logger.debug('%s "%s" initialized to default value "%s"', label, spec.name, value)
        else:
            value = None
            logger.debug('%s "%s" initialized to None.', label, spec.name)

        if not spec.is_allowed(value):
            target[spec.var_name] = None
            shown = ",".join(value) if isinstance(value, list) else value
            self._error(
                f'{label} "{spec.name}" value of {shown} is not one of the allowed '
                f"values: {spec.allowed_doc}"
            )
            return

        target[spec.var_name] = value

    async def parse_values(self, command: Command) -> None:
        """
        Phase 2: coerce candidates root-to-leaf, flags first, then the leaf's args.
        """
        for level in command.lineage():
            for flag in level.flags:
                await self._parse_value(flag, self.candidates.flags, self._results.flags)
        for arg in command.args:
            await self._parse_value(arg, self.candidates.args, self._results.args)

    async def _parse_value(
        self,
        spec: Flag | Arg,
        candidates: dict[str, CandidateValue | None],
        target: dict,
    ) -> None:
        value = candidates.get(spec.var_name)
        try:
            target[spec.var_name] = await checked_parse(spec, value, self)
        except CoercionError as error:
            target[spec.var_name] = None
            if isinstance(spec, Flag):
                self._error(f"Flag --{spec.name} {error}")
            else:
                self._error(f"Arg '{spec.name}' {error}")
