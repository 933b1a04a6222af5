"""Turn an eligible classification into an edit."""

from __future__ import annotations

from unvoid.core.errors import InternalError
from unvoid.rewrite.classify import EMPTY_PARAMS, VOID_PARAMS
from unvoid.rewrite.models import Edit, EditSet, Eligible


def replacement_text(eligible: Eligible) -> str:
    """Declarator with ``(void)`` turned into ``()``, followed by the untouched suffix.

    Raises:
        InternalError: ``eligible`` does not end in ``(void)``.
    """
    if eligible.trailing_text != VOID_PARAMS:
        raise InternalError.unexpected(
            "eligible declarator does not end in (void)",
            file=eligible.span.file,
            offset=eligible.span.start,
        )
    return eligible.decl_text[: -len(VOID_PARAMS)] + EMPTY_PARAMS + eligible.suffix


def make_edit(eligible: Eligible) -> Edit:
    # The span is the whole node; for definitions the replacement carries the body too
    return Edit(span=eligible.span, replacement=replacement_text(eligible))


def emit(eligible: Eligible, edits: EditSet) -> EditSet:
    return edits.add(make_edit(eligible))
