"""Tests for mutation operations.

Covers:
- Single-pass application of edits
- Overlap and range rejection
- Dry run mode and diffs
- Per-file failure isolation
- Replacements export
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from unvoid.core.errors import ApplyError, ErrorCode
from unvoid.mutation.ops import (
    MutationOps,
    _hash_content,
    apply_edits,
    export_fixes,
    fixes_document,
)
from unvoid.rewrite.models import Edit, EditSet, SourceSpan


def _edit(path: str, start: int, end: int, replacement: str) -> Edit:
    return Edit(SourceSpan(path, start, end), replacement)


class TestHashContent:
    def test_hash_returns_12_chars(self) -> None:
        result = _hash_content(b"hello world")
        assert len(result) == 12
        assert all(c in "0123456789abcdef" for c in result)

    def test_hash_is_deterministic(self) -> None:
        assert _hash_content(b"int f();") == _hash_content(b"int f();")
        assert _hash_content(b"int f();") != _hash_content(b"int g();")


class TestApplyEdits:
    def test_offsets_refer_to_original_content(self) -> None:
        """
        Given two edits that change the length of the text
        When both are applied
        Then the second edit still lands at its original position
        """
        original = b"int a(void);\nint b(void);\n"
        edits = [_edit("/f.cpp", 0, 11, "int a()"), _edit("/f.cpp", 13, 24, "int b()")]

        assert apply_edits(original, edits) == b"int a();\nint b();\n"

    def test_order_of_edits_does_not_matter(self) -> None:
        original = b"int a(void);\nint b(void);\n"
        edits = [_edit("/f.cpp", 0, 11, "int a()"), _edit("/f.cpp", 13, 24, "int b()")]

        assert apply_edits(original, edits) == apply_edits(original, list(reversed(edits)))

    def test_touching_edits_are_allowed(self) -> None:
        assert apply_edits(b"abcd", [_edit("/f", 0, 2, "X"), _edit("/f", 2, 4, "Y")]) == b"XY"

    def test_overlapping_edits_are_rejected(self) -> None:
        with pytest.raises(ApplyError) as exc_info:
            apply_edits(b"abcdef", [_edit("/f", 0, 4, "X"), _edit("/f", 2, 6, "Y")])

        assert exc_info.value.code == ErrorCode.APPLY_OVERLAPPING_EDITS

    def test_edit_past_end_is_rejected(self) -> None:
        with pytest.raises(ApplyError) as exc_info:
            apply_edits(b"abc", [_edit("/f", 1, 10, "X")])

        assert exc_info.value.code == ErrorCode.APPLY_SPAN_OUT_OF_RANGE

    def test_edit_for_other_file_is_rejected(self) -> None:
        with pytest.raises(ApplyError) as exc_info:
            apply_edits(b"abc", [_edit("/other", 0, 1, "X")], path="/f")

        assert exc_info.value.code == ErrorCode.APPLY_WRONG_FILE

    def test_replacement_is_utf8_encoded(self) -> None:
        assert apply_edits(b"int f(void);", [_edit("/f", 0, 11, "int é()")]) == (
            "int é();".encode()
        )

    def test_no_edits_returns_original(self) -> None:
        assert apply_edits(b"int f(void);", []) == b"int f(void);"


class TestMutationOps:
    def test_saves_files(self, tmp_path: Path) -> None:
        target = tmp_path / "a.cpp"
        target.write_bytes(b"int foo(void);\n")
        edits = EditSet((_edit(str(target), 0, 13, "int foo()"),))

        result = MutationOps().apply(edits)

        assert result.ok
        assert result.applied
        assert result.edits_applied == 1
        assert target.read_bytes() == b"int foo();\n"
        delta = result.files[0]
        assert delta.old_hash != delta.new_hash
        assert delta.unified_diff is None

    def test_dry_run_writes_nothing(self, tmp_path: Path) -> None:
        target = tmp_path / "a.cpp"
        target.write_bytes(b"int foo(void);\n")
        edits = EditSet((_edit(str(target), 0, 13, "int foo()"),))

        result = MutationOps().apply(edits, dry_run=True)

        assert result.dry_run
        assert not result.applied
        assert target.read_bytes() == b"int foo(void);\n"
        diff = result.files[0].unified_diff
        assert diff is not None
        assert "-int foo(void);" in diff
        assert "+int foo();" in diff

    def test_failing_file_does_not_stop_others(self, tmp_path: Path) -> None:
        """
        Given edits for a missing file and an existing one
        When the edits are applied
        Then the missing file is reported and the existing one is saved
        """
        good = tmp_path / "good.cpp"
        good.write_bytes(b"int foo(void);\n")
        missing = tmp_path / "gone.cpp"
        edits = EditSet(
            (
                _edit(str(missing), 0, 13, "int foo()"),
                _edit(str(good), 0, 13, "int foo()"),
            )
        )

        result = MutationOps().apply(edits)

        assert not result.ok
        assert [f.path for f in result.failures] == [str(missing)]
        assert result.failures[0].error.code == ErrorCode.APPLY_IO_ERROR
        assert good.read_bytes() == b"int foo();\n"

    def test_file_changed_since_parse_is_reported(self, tmp_path: Path) -> None:
        target = tmp_path / "a.cpp"
        target.write_bytes(b"int f();")
        edits = EditSet((_edit(str(target), 0, 40, "int foo()"),))

        result = MutationOps().apply(edits)

        assert result.failures[0].error.code == ErrorCode.APPLY_SPAN_OUT_OF_RANGE
        assert target.read_bytes() == b"int f();"

    def test_empty_edit_set(self) -> None:
        result = MutationOps().apply(EditSet())

        assert result.ok
        assert result.files == []
        assert result.edits_applied == 0


class TestExportFixes:
    def test_document_layout(self) -> None:
        edits = EditSet(
            (
                _edit("/src/b.cpp", 4, 15, "int g()"),
                _edit("/src/a.cpp", 0, 13, "int foo()"),
            )
        )

        document = fixes_document(edits, "/src/a.cpp")

        assert document == {
            "MainSourceFile": "/src/a.cpp",
            "Replacements": [
                {"FilePath": "/src/a.cpp", "Offset": 0, "Length": 13, "ReplacementText": "int foo()"},
                {"FilePath": "/src/b.cpp", "Offset": 4, "Length": 11, "ReplacementText": "int g()"},
            ],
        }

    def test_writes_yaml(self, tmp_path: Path) -> None:
        out = tmp_path / "fixes.yaml"
        edits = EditSet((_edit("/src/a.cpp", 0, 13, "int foo()\n{\n}"),))

        export_fixes(edits, out, main_source_file="/src/a.cpp")

        text = out.read_text()
        assert text.startswith("---")
        assert text.rstrip().endswith("...")
        loaded = yaml.safe_load(text)
        assert loaded["Replacements"][0]["ReplacementText"] == "int foo()\n{\n}"

    def test_unwritable_destination(self, tmp_path: Path) -> None:
        with pytest.raises(ApplyError) as exc_info:
            export_fixes(EditSet(), tmp_path / "missing" / "fixes.yaml")

        assert exc_info.value.code == ErrorCode.APPLY_IO_ERROR
