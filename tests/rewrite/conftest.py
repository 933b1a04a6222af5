"""Shared fixtures for rewrite tests."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest

from unvoid.frontend.compdb import CompileCommand
from unvoid.frontend.treesitter import TreeSitterParser, TreeSitterTranslationUnit
from unvoid.rewrite.models import FunctionNode, SourceLocation

_TOKEN = re.compile(rb"\w+|\S")


@dataclass
class FakeUnit:
    """Hand-built translation unit: tokens are words or single punctuation characters."""

    path: str
    source: bytes
    language: str = "cpp"
    invalid_offsets: set[int] = field(default_factory=set)
    spelling: dict[int, SourceLocation] = field(default_factory=dict)
    nodes: list[FunctionNode] = field(default_factory=list)

    def spelling_location(self, loc: SourceLocation) -> SourceLocation | None:
        if loc.offset in self.invalid_offsets:
            return None
        return self.spelling.get(loc.offset, loc)

    def end_of_token(self, loc: SourceLocation) -> SourceLocation | None:
        match = _TOKEN.match(self.source, loc.offset)
        if match is None:
            return None
        return SourceLocation(loc.file, match.end())

    def file_text(self, file: str) -> bytes | None:
        return self.source if file == self.path else None

    def function_nodes(self) -> Iterator[FunctionNode]:
        return iter(self.nodes)


def fake_node(
    unit: FakeUnit,
    text: str,
    *,
    is_definition: bool = False,
    is_extern_c: bool = False,
) -> FunctionNode:
    """Node covering the first occurrence of ``text``; end is its last token's start."""
    start = unit.source.index(text.encode())
    stop = start + len(text.encode())
    last = [m for m in _TOKEN.finditer(unit.source, start, stop)][-1]
    return FunctionNode(
        name="fn",
        start=SourceLocation(unit.path, start),
        end=SourceLocation(unit.path, last.start()),
        is_definition=is_definition,
        is_extern_c=is_extern_c,
    )


@pytest.fixture
def make_unit() -> type[FakeUnit]:
    return FakeUnit


@pytest.fixture
def node_for() -> object:
    return fake_node


@pytest.fixture
def parse_cpp() -> object:
    parser = TreeSitterParser()

    def _parse(source: str, path: str = "/src/t.cpp") -> TreeSitterTranslationUnit:
        command = CompileCommand(directory="/src", file=path, arguments=["c++", path])
        return parser.parse(command, source.encode())

    return _parse
