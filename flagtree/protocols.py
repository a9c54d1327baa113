# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the structural protocols and callback signatures used by Flagtree.

Custom value parsers and completers receive a `ParseState`: a read-mostly view
of the parse in progress. Candidates are exposed as read-only mappings; the
results map may be read to pick up values coerced earlier in the fixed
root-to-leaf order.

Callback types:
- ParseFn: `(raw_value, state) -> value`, sync or async.
- CompleteFn: `(current_token, state) -> list[str]`, sync or async.
- ActionFn: `(args, flags) -> None`, sync or async.
"""
from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Mapping,
    Protocol,
    Union,
    runtime_checkable,
)

if TYPE_CHECKING:
    from flagtree.app import App
    from flagtree.results import Results

CandidateValue = Union[str, list[str]]

ParseFn = Callable[[str, "ParseState"], Union[Any, Awaitable[Any]]]
CompleteFn = Callable[[str, "ParseState"], Union[list[str], Awaitable[list[str]]]]
ActionFn = Callable[[dict[str, Any], dict[str, Any]], Union[None, Awaitable[None]]]


@runtime_checkable
class ParseState(Protocol):
    @property
    def app(self) -> App: ...

    @property
    def flag_candidates(self) -> Mapping[str, CandidateValue | None]: ...

    @property
    def arg_candidates(self) -> Mapping[str, CandidateValue | None]: ...

    @property
    def results(self) -> Results: ...

    async def completion_options(self) -> list[str]: ...

    def completion_script_bash(self) -> str: ...
