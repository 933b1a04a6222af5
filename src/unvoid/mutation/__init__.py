"""Mutation module - apply and export edits."""

from unvoid.mutation.ops import (
    FileDelta,
    MutationOps,
    MutationResult,
    apply_edits,
    export_fixes,
)

__all__ = ["FileDelta", "MutationOps", "MutationResult", "apply_edits", "export_fixes"]
