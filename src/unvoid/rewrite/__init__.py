"""Rewrite module - turn `f(void)` spellings into `f()`."""

from unvoid.rewrite.classify import classify
from unvoid.rewrite.emit import emit, make_edit, replacement_text
from unvoid.rewrite.extract import span_text, token_span
from unvoid.rewrite.models import (
    Edit,
    EditSet,
    Eligible,
    FunctionNode,
    NotEligible,
    SourceLocation,
    SourceSpan,
)

__all__ = [
    "Edit",
    "EditSet",
    "Eligible",
    "FunctionNode",
    "NotEligible",
    "SourceLocation",
    "SourceSpan",
    "classify",
    "emit",
    "make_edit",
    "replacement_text",
    "span_text",
    "token_span",
]
