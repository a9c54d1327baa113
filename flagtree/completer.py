# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `FlagtreeCompleter`, a Prompt Toolkit completer backed by the same
completion engine that answers `--completion-bash`.

This lets a Flagtree app offer identical suggestions in an interactive prompt
and in the shell:
- Subcommand names, positional values and flag spellings
- Flag value suggestions (allowed values or custom completers)
- Longest common prefix (LCP) insertion when several matches agree
- Quoting of suggestions that contain whitespace

Example:
    session = PromptSession(completer=FlagtreeCompleter(app))
    line = await session.prompt_async("deploy> ")
"""
from __future__ import annotations

import asyncio
import os
import shlex
from typing import TYPE_CHECKING, AsyncGenerator, Iterable, Mapping

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from flagtree.logger import logger

if TYPE_CHECKING:
    from flagtree.app import App


class FlagtreeCompleter(Completer):
    """
    Prompt Toolkit completer for a Flagtree app's command line.

    The buffer holds the words after the binary name. They are tokenized with
    `shlex`, handed to `App.complete()`, and the suggestions are filtered by the
    word under the cursor.

    Args:
        app (App): The app whose command tree drives completion.
        env (Mapping[str, str] | None): Environment for env var defaults.
    """

    def __init__(self, app: App, env: Mapping[str, str] | None = None):
        self.app = app
        self.env = env

    def _split(self, document: Document) -> tuple[list[str], str] | None:
        text = document.text_before_cursor
        try:
            tokens = shlex.split(text)
        except ValueError:
            return None
        if not tokens or text.endswith((" ", "\t")):
            tokens.append("")
        return tokens, tokens[-1]

    async def get_completions_async(
        self, document: Document, complete_event: CompleteEvent
    ) -> AsyncGenerator[Completion, None]:
        split = self._split(document)
        if split is None:
            return
        tokens, stub = split
        suggestions = await self.app.complete(tokens, self.env)
        logger.debug("Interactive completion for %r: %s", tokens, suggestions)
        for completion in self._yield_lcp_completions(suggestions, stub):
            yield completion

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        """
        Synchronous variant for callers without an event loop.

        Runs the completion engine with `asyncio.run`, so it must not be called
        from inside a running loop; Prompt Toolkit's async prompt uses
        `get_completions_async` instead.
        """
        split = self._split(document)
        if split is None:
            return
        tokens, stub = split
        suggestions = asyncio.run(self.app.complete(tokens, self.env))
        yield from self._yield_lcp_completions(suggestions, stub)

    def _ensure_quote(self, text: str) -> str:
        """Quote a suggestion that contains whitespace."""
        if " " in text or "\t" in text:
            return f'"{text}"'
        return text

    def _yield_lcp_completions(
        self, suggestions: list[str], stub: str
    ) -> Iterable[Completion]:
        """
        Yield completions for the current stub using longest-common-prefix logic.

        Behavior:
        - If only one match, yield it fully.
        - If multiple matches share a longer prefix, insert the prefix and also
          list every match in the menu.
        - Otherwise list all matches individually.
        """
        matches = list(dict.fromkeys(s for s in suggestions if s.startswith(stub)))
        if not matches:
            return

        lcp = os.path.commonprefix(matches)

        if len(matches) == 1:
            yield Completion(
                self._ensure_quote(matches[0]),
                start_position=-len(stub),
                display=matches[0],
            )
        elif len(lcp) > len(stub) and not lcp.startswith("-"):
            yield Completion(lcp, start_position=-len(stub), display=lcp)
            for match in matches:
                yield Completion(
                    self._ensure_quote(match), start_position=-len(stub), display=match
                )
        else:
            for match in matches:
                yield Completion(
                    self._ensure_quote(match), start_position=-len(stub), display=match
                )
