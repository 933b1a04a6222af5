"""Mutation operations - apply collected edits to files on disk.

Every edit of a file is positioned against the file's original bytes, so
all of them are applied in a single pass from the end of the file
backwards. Each file is written independently: a file that fails is
reported and the others are still saved.
"""

from __future__ import annotations

import difflib
import hashlib
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from unvoid.core.errors import ApplyError
from unvoid.core.logging import get_logger
from unvoid.rewrite.models import Edit, EditSet

log = get_logger("mutation")


@dataclass
class FileDelta:
    """Delta for a single file."""

    path: str
    edits: int
    old_hash: str
    new_hash: str
    unified_diff: str | None = None


@dataclass
class ApplyFailure:
    path: str
    error: ApplyError


@dataclass
class MutationResult:
    """Result of applying an EditSet."""

    mutation_id: str
    applied: bool
    dry_run: bool
    files: list[FileDelta] = field(default_factory=list)
    failures: list[ApplyFailure] = field(default_factory=list)

    @property
    def edits_applied(self) -> int:
        return sum(delta.edits for delta in self.files)

    @property
    def ok(self) -> bool:
        return not self.failures


def _hash_content(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()[:12]


def apply_edits(original: bytes, edits: Sequence[Edit], path: str | None = None) -> bytes:
    """Apply ``edits`` to ``original`` in one pass.

    Offsets refer to ``original``. Edits may touch but not overlap.

    Raises:
        ApplyError: Overlapping edits, an edit past the end of the content,
            or an edit for a different file than ``path``.
    """
    ordered = sorted(edits, key=lambda e: (e.span.start, e.span.end))
    label = path or (ordered[0].file if ordered else "<memory>")

    for prev, cur in zip(ordered, ordered[1:], strict=False):
        if cur.span.overlaps(prev.span):
            raise ApplyError.overlapping(
                label, (prev.span.start, prev.span.end), (cur.span.start, cur.span.end)
            )
    for edit in ordered:
        if path is not None and edit.file != path:
            raise ApplyError.wrong_file(path, edit.file)
        if edit.span.end > len(original):
            raise ApplyError.out_of_range(label, edit.span.end, len(original))

    result = original
    for edit in reversed(ordered):
        result = result[: edit.span.start] + edit.replacement.encode("utf-8") + result[edit.span.end :]
    return result


def _unified_diff(path: str, old: bytes, new: bytes) -> str:
    old_lines = old.decode("utf-8", errors="replace").splitlines(keepends=True)
    new_lines = new.decode("utf-8", errors="replace").splitlines(keepends=True)
    return "".join(difflib.unified_diff(old_lines, new_lines, fromfile=path, tofile=path))


class MutationOps:
    """Applies EditSets to files on disk."""

    def apply(self, edit_set: EditSet, *, dry_run: bool = False) -> MutationResult:
        """Apply all edits, one file at a time.

        Args:
            edit_set: Edits keyed by absolute file path
            dry_run: Compute deltas and diffs, write nothing
        """
        result = MutationResult(
            mutation_id=str(uuid.uuid4())[:8],
            applied=not dry_run,
            dry_run=dry_run,
        )

        for path, edits in sorted(edit_set.by_file().items()):
            try:
                delta = self._apply_file(path, edits, dry_run=dry_run)
            except ApplyError as e:
                log.error("apply_failed", path=path, error=str(e))
                result.failures.append(ApplyFailure(path=path, error=e))
                continue
            result.files.append(delta)
            log.info("file_saved" if not dry_run else "file_previewed", path=path, edits=delta.edits)

        return result

    def _apply_file(self, path: str, edits: list[Edit], *, dry_run: bool) -> FileDelta:
        full_path = Path(path)
        try:
            original = full_path.read_bytes()
        except OSError as e:
            raise ApplyError.io_error(path, e.strerror or str(e)) from e

        updated = apply_edits(original, edits, path)

        if not dry_run:
            try:
                full_path.write_bytes(updated)
            except OSError as e:
                raise ApplyError.io_error(path, e.strerror or str(e)) from e

        return FileDelta(
            path=path,
            edits=len(edits),
            old_hash=_hash_content(original),
            new_hash=_hash_content(updated),
            unified_diff=_unified_diff(path, original, updated) if dry_run else None,
        )


def fixes_document(edit_set: EditSet, main_source_file: str = "") -> dict[str, object]:
    """Replacements in the clang-apply-replacements YAML layout."""
    return {
        "MainSourceFile": main_source_file,
        "Replacements": [
            {
                "FilePath": edit.file,
                "Offset": edit.span.start,
                "Length": edit.span.length,
                "ReplacementText": edit.replacement,
            }
            for edit in sorted(edit_set, key=lambda e: (e.file, e.span.start))
        ],
    }


def export_fixes(edit_set: EditSet, path: Path, main_source_file: str = "") -> None:
    """Write ``edit_set`` as a replacements YAML file."""
    document = fixes_document(edit_set, main_source_file)
    try:
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(
                document,
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                explicit_start=True,
                explicit_end=True,
            )
    except OSError as e:
        raise ApplyError.io_error(str(path), e.strerror or str(e)) from e
