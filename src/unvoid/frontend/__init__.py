"""Parser frontend: compilation databases and C/C++ translation units."""

from unvoid.frontend.base import Language, Parser, TranslationUnit
from unvoid.frontend.compdb import (
    CompilationDatabase,
    CompileCommand,
    FixedCompilationDatabase,
    JsonCompilationDatabase,
    load_compilation_database,
    split_fixed_flags,
)
from unvoid.frontend.treesitter import TreeSitterParser, TreeSitterTranslationUnit

__all__ = [
    "CompilationDatabase",
    "CompileCommand",
    "FixedCompilationDatabase",
    "JsonCompilationDatabase",
    "Language",
    "Parser",
    "TranslationUnit",
    "TreeSitterParser",
    "TreeSitterTranslationUnit",
    "load_compilation_database",
    "split_fixed_flags",
]
