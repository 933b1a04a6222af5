"""Recover the verbatim source text of a node."""

from __future__ import annotations

from typing import TYPE_CHECKING

from unvoid.rewrite.models import SourceLocation, SourceSpan

if TYPE_CHECKING:
    from unvoid.frontend.base import TranslationUnit


def token_span(tu: TranslationUnit, start: SourceLocation, end: SourceLocation) -> SourceSpan | None:
    """Byte span from ``start`` through the whole token beginning at ``end``.

    Both ends are first resolved to where their tokens are spelled. Returns
    None when either end is invalid, the ends lie in different files, or
    the end precedes the start (macro shuffling can do that).
    """
    start_spelling = tu.spelling_location(start)
    end_spelling = tu.spelling_location(end)
    if start_spelling is None or end_spelling is None:
        return None
    token_end = tu.end_of_token(end_spelling)
    if token_end is None:
        return None
    return SourceSpan.between(start_spelling, token_end)


def span_text(tu: TranslationUnit, span: SourceSpan) -> str | None:
    """Literal text of ``span``; None if the bytes are unavailable or not UTF-8."""
    data = tu.file_text(span.file)
    if data is None or span.end > len(data):
        return None
    try:
        return data[span.start : span.end].decode("utf-8")
    except UnicodeDecodeError:
        return None
