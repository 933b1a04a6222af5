"""Decide whether a zero-parameter function is spelled with a literal ``(void)``.

Matching is purely textual once the parser has confirmed the function has
no parameters: ``( void )``, ``(void /*x*/)`` and multi-line spellings are
left alone.

For definitions the declarator ends at the last ``)`` before the first
``{``. Constructors with member initialisers and trailing return types
that contain parentheses are therefore never rewritten.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from unvoid.rewrite.extract import span_text, token_span
from unvoid.rewrite.models import Classification, Eligible, FunctionNode, NotEligible

if TYPE_CHECKING:
    from unvoid.frontend.base import TranslationUnit

VOID_PARAMS = "(void)"
EMPTY_PARAMS = "()"


def declarator_end(text: str) -> int:
    """Index just past the parameter list of a definition's text (0 if there is none)."""
    brace = text.find("{")
    head = text if brace == -1 else text[:brace]
    return head.rfind(")") + 1


def ends_with_void(decl_text: str) -> bool:
    return len(decl_text) > len(VOID_PARAMS) and decl_text.endswith(VOID_PARAMS)


def classify(node: FunctionNode, tu: TranslationUnit) -> Classification:
    if node.is_extern_c:
        return NotEligible("foreign_linkage")

    span = token_span(tu, node.start, node.end)
    text = span_text(tu, span) if span is not None else None
    if span is None or text is None:
        return NotEligible("extraction_failed")
    if not text:
        return NotEligible("no_text")

    if not node.is_definition:
        if not ends_with_void(text):
            return NotEligible("no_void_suffix")
        return Eligible(span=span, decl_text=text)

    end = declarator_end(text)
    decl_text = text[:end]
    if not ends_with_void(decl_text):
        return NotEligible("no_void_suffix")
    return Eligible(span=span, decl_text=decl_text, suffix=text[end:])
