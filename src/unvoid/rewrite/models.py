"""Data model shared by the parser frontend, the rewriter and the applier.

Offsets are byte offsets into the original file contents.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Literal

NotEligibleReason = Literal[
    "foreign_linkage",
    "extraction_failed",
    "no_text",
    "no_void_suffix",
]


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """A byte position in one file."""

    file: str
    offset: int


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """A contiguous ``[start, end)`` byte range of exactly one file."""

    file: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span {self.start}..{self.end} in {self.file}")

    @classmethod
    def between(cls, start: SourceLocation, end: SourceLocation) -> SourceSpan | None:
        """Span from ``start`` up to ``end``, or None if they disagree on the file or order."""
        if start.file != end.file or end.offset < start.offset:
            return None
        return cls(start.file, start.offset, end.offset)

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: SourceSpan) -> bool:
        """True if both spans share at least one byte of the same file."""
        return self.file == other.file and self.start < other.end and other.start < self.end


@dataclass(frozen=True, slots=True)
class FunctionNode:
    """A zero-parameter function declaration or definition.

    ``end`` is the location of the first byte of the node's last token,
    the same convention compiler source ranges use.
    """

    name: str
    start: SourceLocation
    end: SourceLocation
    is_definition: bool
    is_extern_c: bool


@dataclass(frozen=True, slots=True)
class Eligible:
    """A node whose declarator ends in a literal ``(void)``.

    ``suffix`` is the untouched remainder of a definition (its body and
    anything between the parameter list and the body); empty for
    declarations.
    """

    span: SourceSpan
    decl_text: str
    suffix: str = ""

    @property
    def trailing_text(self) -> str:
        return self.decl_text[-6:]


@dataclass(frozen=True, slots=True)
class NotEligible:
    """A node that must be left alone."""

    reason: NotEligibleReason


Classification = Eligible | NotEligible


@dataclass(frozen=True, slots=True)
class Edit:
    """Replace the bytes of ``span`` with ``replacement``."""

    span: SourceSpan
    replacement: str

    @property
    def file(self) -> str:
        return self.span.file


@dataclass(frozen=True)
class EditSet:
    """Append-only collection of edits across all processed files.

    Immutable: ``add`` returns a new set. Adding an edit equal to one
    already present is a no-op, since the same file can be reached more
    than once in a run.
    """

    edits: tuple[Edit, ...] = ()
    _seen: frozenset[Edit] = field(default=frozenset(), repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self._seen) != len(self.edits):
            object.__setattr__(self, "_seen", frozenset(self.edits))

    def add(self, edit: Edit) -> EditSet:
        if edit in self._seen:
            return self
        return EditSet((*self.edits, edit), self._seen | {edit})

    def by_file(self) -> dict[str, list[Edit]]:
        """Edits grouped per file, each group ordered by start offset."""
        grouped: dict[str, list[Edit]] = {}
        for edit in self.edits:
            grouped.setdefault(edit.file, []).append(edit)
        for edits in grouped.values():
            edits.sort(key=lambda e: (e.span.start, e.span.end))
        return grouped

    @property
    def files(self) -> list[str]:
        return sorted({edit.file for edit in self.edits})

    def __iter__(self) -> Iterator[Edit]:
        return iter(self.edits)

    def __len__(self) -> int:
        return len(self.edits)

    def __bool__(self) -> bool:
        return bool(self.edits)
