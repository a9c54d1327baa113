# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Shell completion for a finished structural parse.

`completion_options()` answers "what could the user type next?" from the last
two tokens of the command line:
- after a non-boolean flag: that flag's completer output or allowed values
- otherwise: subcommand names, then candidates for the positional slot being
  typed, then (when the current token starts with `-`) every flag spelling
- nothing found: every visible `--flag`

Hidden flags are only offered once more than three characters of one of their
names have been typed.

`completion_script_bash()` renders the bash hook that calls the binary back
with `--completion-bash`.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from flagtree.logger import logger
from flagtree.protocols import CompleteFn, ParseState
from flagtree.utils import ensure_async

if TYPE_CHECKING:
    from flagtree.parser.field import FieldSpec
    from flagtree.parser.session import ParseSession

COMPLETION_FLAG = "--completion-bash"
HIDDEN_PREFIX_LENGTH = 3

BASH_COMPLETION_TEMPLATE = """
_{name}_bash_autocomplete() {{
  local cur prev opts base
  COMPREPLY=()
  cur="${{COMP_WORDS[COMP_CWORD]}}"
  opts=$( ${{COMP_WORDS[0]}} {flag} ${{COMP_WORDS[@]:1:$((COMP_CWORD - 1))}} "${{cur}}" )
  COMPREPLY=( $(compgen -W "${{opts}}" -- ${{cur}}) )
  return 0
}}
complete -F _{name}_bash_autocomplete {name}"""


async def _field_options(spec: FieldSpec, cur: str, session: ParseSession) -> list[str]:
    if spec.completer is not None:
        return list(await ensure_async(spec.completer)(cur, session))
    if spec.allowed_values:
        return list(spec.allowed_values)
    return []


async def completion_options(session: ParseSession) -> list[str]:
    """Suggestions for the last token of `session.tokens`."""
    options: list[str] = []
    command = session.results.command

    tokens = [token for token in session.tokens if token != COMPLETION_FLAG]
    cur = tokens.pop() if tokens else ""
    prev = tokens.pop() if tokens else None
    logger.debug("Completing cur=%r prev=%r for '%s'", cur, prev, command.full_name)

    all_flags = command.all_flags()

    current_flag = next(
        (
            flag
            for flag in all_flags
            if not flag.is_boolean and prev is not None and prev in flag.doc_names
        ),
        None,
    )
    if current_flag is not None:
        return await _field_options(current_flag, cur, session)

    options.extend(command.subcommands)

    slot = session.last_token_slot
    if slot is None:
        slot = session.positional_index
    if slot < len(command.args):
        options.extend(await _field_options(command.args[slot], cur, session))

    if cur.startswith("-"):
        for flag in all_flags:
            typed_hidden_name = len(cur) > HIDDEN_PREFIX_LENGTH and any(
                name.startswith(cur) for name in flag.doc_names
            )
            if not flag.hidden or typed_hidden_name:
                options.extend(flag.doc_names)

    if not options:
        return [f"--{flag.name}" for flag in all_flags if not flag.hidden]

    return options


def completion_script_bash(binary: str) -> str:
    """The bash registration script for `binary`, keyed on its base name."""
    name = os.path.basename(binary)
    return BASH_COMPLETION_TEMPLATE.format(name=name, flag=COMPLETION_FLAG)


def complete_file(predicate: Callable[[str], bool] | None = None) -> CompleteFn:
    """
    Build a completer that lists entries of the directory being typed.

    Directories are always offered; files only when `predicate` accepts them.

    Example:
        Arg.path("config", completer=complete_file(lambda p: p.endswith(".yaml")))
    """

    def complete(cur: str, _state: ParseState) -> list[str]:
        prefix = os.path.dirname(cur)
        directory = prefix or "."
        try:
            entries = sorted(Path(directory).iterdir())
        except OSError as error:
            logger.debug("Cannot list '%s' for completion: %s", directory, error)
            return []
        options = []
        for entry in entries:
            path = os.path.join(prefix, entry.name)
            if entry.is_dir() or predicate is None or predicate(path):
                options.append(path)
        return options

    return complete
