"""Tests for CLI progress helpers."""

from unvoid.core.progress import is_console_suppressed, pluralize, progress, suppress_console_logs


class TestPluralize:
    def test_singular(self) -> None:
        assert pluralize(1, "file") == "1 file"

    def test_plural_default(self) -> None:
        assert pluralize(3, "edit") == "3 edits"

    def test_plural_explicit(self) -> None:
        assert pluralize(0, "entry", "entries") == "0 entries"


class TestProgress:
    def test_yields_all_items_without_tty(self) -> None:
        items = [f"f{i}.cpp" for i in range(150)]
        assert list(progress(items, desc="Rewriting")) == items

    def test_accepts_generators(self) -> None:
        assert list(progress(x for x in range(3))) == [0, 1, 2]


class TestConsoleSuppression:
    def test_suppression_is_scoped(self) -> None:
        assert not is_console_suppressed()
        with suppress_console_logs():
            assert is_console_suppressed()
        assert not is_console_suppressed()
