"""Narrow interface between the rewriter and a C/C++ parser."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Literal, Protocol

from unvoid.rewrite.models import FunctionNode, SourceLocation

if TYPE_CHECKING:
    from unvoid.frontend.compdb import CompileCommand

Language = Literal["c", "cpp"]


class TranslationUnit(Protocol):
    """One parsed source file plus what is needed to map nodes back to bytes."""

    @property
    def path(self) -> str: ...

    @property
    def language(self) -> Language: ...

    def spelling_location(self, loc: SourceLocation) -> SourceLocation | None:
        """Where the token at ``loc`` is literally spelled, or None if ``loc`` is invalid."""
        ...

    def end_of_token(self, loc: SourceLocation) -> SourceLocation | None:
        """Location just past the token that starts at ``loc``."""
        ...

    def file_text(self, file: str) -> bytes | None:
        """Original bytes of ``file``, or None if the unit does not know it."""
        ...

    def function_nodes(self) -> Iterator[FunctionNode]:
        """Zero-parameter function declarations and definitions, in source order."""
        ...


class Parser(Protocol):
    def parse(self, command: CompileCommand) -> TranslationUnit: ...
