"""Rewrite operations - walk translation units and collect edits.

Files are processed one at a time. The EditSet is threaded through as a
value: each step takes the set so far and returns the extended one.

Failure policy:
- Missing compile command: CompilationDatabaseError, aborts the run
  before any file is parsed.
- Unreadable file / missing grammar: recorded as a failure for that file,
  the run continues.
- Anything that goes wrong for a single function: the function is skipped.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from unvoid.core.errors import ParseError
from unvoid.core.logging import get_logger
from unvoid.core.progress import progress
from unvoid.rewrite.classify import classify
from unvoid.rewrite.emit import emit
from unvoid.rewrite.models import EditSet, NotEligible

if TYPE_CHECKING:
    from unvoid.frontend.base import Parser, TranslationUnit
    from unvoid.frontend.compdb import CompilationDatabase

log = get_logger("rewrite")


@dataclass
class FileFailure:
    """A file that could not be processed."""

    path: str
    error: ParseError


@dataclass
class RewriteResult:
    """Outcome of a rewrite pass over a list of files."""

    edits: EditSet = field(default_factory=EditSet)
    files_processed: int = 0
    skipped: Counter[str] = field(default_factory=Counter)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def rewrite_unit(
    tu: TranslationUnit,
    edits: EditSet,
    skipped: Counter[str] | None = None,
) -> EditSet:
    """Classify every zero-parameter function of ``tu`` and add its edit, if any."""
    for node in tu.function_nodes():
        result = classify(node, tu)
        if isinstance(result, NotEligible):
            log.debug(
                "function_skipped",
                path=tu.path,
                function=node.name,
                offset=node.start.offset,
                reason=result.reason,
            )
            if skipped is not None:
                skipped[result.reason] += 1
            continue
        edits = emit(result, edits)
        log.debug("function_rewritten", path=tu.path, function=node.name, offset=node.start.offset)
    return edits


class RewriteOps:
    """Drives parsing and rewriting for a set of source files."""

    def __init__(self, compdb: CompilationDatabase, parser: Parser) -> None:
        self._compdb = compdb
        self._parser = parser

    def run(self, files: Sequence[str | Path], edits: EditSet | None = None) -> RewriteResult:
        """Rewrite ``files`` in order.

        Args:
            files: Source paths, looked up in the compilation database
            edits: Edits from an earlier pass to extend

        Raises:
            CompilationDatabaseError: A file has no compile command.
        """
        # Resolve every command first so a bad file list fails before any work
        commands = [self._compdb.get_compile_command(f) for f in files]
        result = RewriteResult(edits=edits if edits is not None else EditSet())

        for command in progress(commands, desc="Rewriting"):
            try:
                tu = self._parser.parse(command)
            except ParseError as e:
                log.error("parse_failed", path=command.path, error=str(e))
                result.failures.append(FileFailure(path=command.path, error=e))
                continue

            before = len(result.edits)
            result.edits = rewrite_unit(tu, result.edits, result.skipped)
            added = len(result.edits) - before
            result.files_processed += 1
            log.info("file_processed", path=tu.path, language=tu.language, edits=added)

        return result
