"""Tree-sitter backed C/C++ translation units.

Tree-sitter does not preprocess, so every token is spelled exactly where it
appears and a unit covers a single file. Macro bodies are opaque
``preproc_*`` nodes and never produce functions. Both branches of
conditional compilation are parsed.

Node end locations point at the first byte of the last token, so the
extractor has to ask ``end_of_token`` for the real end, as it would with a
compiler's source ranges.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter

from unvoid.core.errors import ParseError
from unvoid.core.logging import get_logger
from unvoid.frontend.base import Language
from unvoid.frontend.compdb import CompileCommand
from unvoid.rewrite.models import FunctionNode, SourceLocation

log = get_logger("treesitter")

_GRAMMAR_MODULES: dict[Language, str] = {
    "c": "tree_sitter_c",
    "cpp": "tree_sitter_cpp",
}

_DEFINITION_TYPES = frozenset({"function_definition", "inline_method_definition"})
_DECLARATION_TYPES = frozenset({"declaration", "field_declaration"})

# Declarators that only decorate the return type of a function declarator
_RETURN_DECORATORS = frozenset({"pointer_declarator", "reference_declarator"})

_PARAMETER_TYPES = frozenset(
    {
        "parameter_declaration",
        "optional_parameter_declaration",
        "variadic_parameter_declaration",
    }
)

# Never searched for functions: block scope, parameter lists, lambdas
_OPAQUE_TYPES = frozenset({"compound_statement", "parameter_list", "lambda_expression"})


def _last_token(node: Any) -> Any:
    while node.child_count:
        node = node.children[-1]
    return node


def _function_declarator(declarator: Any | None) -> Any | None:
    """Strip return-type pointers/references; return the function declarator if one is left."""
    while declarator is not None and declarator.type in _RETURN_DECORATORS:
        inner = declarator.child_by_field_name("declarator")
        if inner is None:
            named = declarator.named_children
            inner = named[-1] if named else None
        declarator = inner
    if declarator is None or declarator.type != "function_declarator":
        return None
    name = declarator.child_by_field_name("declarator")
    # `void (*fp)(void)` declares a pointer variable, not a function
    if name is None or name.type == "parenthesized_declarator":
        return None
    return declarator


def _parameter_count(function_declarator: Any) -> int:
    params = function_declarator.child_by_field_name("parameters")
    if params is None:
        return 0
    declared = [p for p in params.named_children if p.type in _PARAMETER_TYPES]
    if len(declared) == 1 and _is_void_parameter(declared[0]):
        return 0
    # A bare `...` is not a parameter node, so `f(...)` counts as zero
    return len(declared)


def _is_void_parameter(param: Any) -> bool:
    if param.type != "parameter_declaration" or param.child_by_field_name("declarator"):
        return False
    type_node = param.child_by_field_name("type")
    return (
        type_node is not None
        and len(param.named_children) == 1
        and type_node.type == "primitive_type"
        and type_node.text == b"void"
    )


def _is_static(node: Any) -> bool:
    return any(
        child.type == "storage_class_specifier" and child.text == b"static"
        for child in node.children
    )


def _unqualified_name(function_declarator: Any) -> str | None:
    """Plain identifier of a non-member function; None for qualified or operator names."""
    name = function_declarator.child_by_field_name("declarator")
    if name is None or name.type != "identifier":
        return None
    return name.text.decode("utf-8", errors="replace")


@dataclass
class TreeSitterTranslationUnit:
    """A parsed C or C++ file."""

    path: str
    language: Language
    source: bytes
    tree: Any = field(repr=False)

    @property
    def root_node(self) -> Any:
        return self.tree.root_node

    def _token_at(self, offset: int) -> Any | None:
        if not 0 <= offset < len(self.source):
            return None
        return self.root_node.descendant_for_byte_range(offset, offset + 1)

    def spelling_location(self, loc: SourceLocation) -> SourceLocation | None:
        if loc.file != self.path:
            return None
        node = self._token_at(loc.offset)
        if node is None:
            return None
        while node is not None:
            if node.type == "ERROR" or node.is_missing:
                return None
            node = node.parent
        return loc

    def end_of_token(self, loc: SourceLocation) -> SourceLocation | None:
        if loc.file != self.path:
            return None
        node = self._token_at(loc.offset)
        if node is None or node.start_byte != loc.offset:
            return None
        return SourceLocation(self.path, node.end_byte)

    def file_text(self, file: str) -> bytes | None:
        return self.source if file == self.path else None

    def function_nodes(self) -> Iterator[FunctionNode]:
        c_functions: set[str] = set()
        yield from self._walk(
            self.root_node.children,
            extern_c=self.language == "c",
            member=False,
            c_functions=c_functions,
        )

    def _walk(
        self,
        nodes: Iterable[Any],
        *,
        extern_c: bool,
        member: bool,
        c_functions: set[str],
    ) -> Iterator[FunctionNode]:
        for node in nodes:
            if node.type in _DEFINITION_TYPES:
                fn = _function_declarator(node.child_by_field_name("declarator"))
                if fn is not None and _parameter_count(fn) == 0:
                    linkage = self._has_c_linkage(
                        node, fn, extern_c=extern_c, member=member, c_functions=c_functions
                    )
                    yield self._make_node(node, node, fn, is_definition=True, extern_c=linkage)
                continue

            if node.type in _DECLARATION_TYPES:
                declarators = node.children_by_field_name("declarator")
                # Later declarators share the declaration's leading specifiers
                for declarator in declarators[1:]:
                    if _function_declarator(declarator) is not None:
                        log.debug(
                            "declarator_skipped",
                            path=self.path,
                            offset=declarator.start_byte,
                            reason="multiple_declarators",
                        )
                fn = _function_declarator(declarators[0]) if declarators else None
                if fn is not None and _parameter_count(fn) == 0:
                    linkage = self._has_c_linkage(
                        node, fn, extern_c=extern_c, member=member, c_functions=c_functions
                    )
                    yield self._make_node(
                        node, declarators[0], fn, is_definition=False, extern_c=linkage
                    )

            if node.type in _OPAQUE_TYPES:
                continue

            child_extern_c = extern_c
            child_member = member
            if node.type == "field_declaration_list":
                child_member = True
            elif node.type == "linkage_specification" and self.language == "cpp":
                value = node.child_by_field_name("value")
                child_extern_c = value is not None and value.text == b'"C"'
                child_member = False
            yield from self._walk(
                node.children,
                extern_c=child_extern_c,
                member=child_member,
                c_functions=c_functions,
            )

    def _has_c_linkage(
        self,
        node: Any,
        function_declarator: Any,
        *,
        extern_c: bool,
        member: bool,
        c_functions: set[str],
    ) -> bool:
        """Whether the function declared by ``node`` has C language linkage.

        In C++ only non-member functions with external linkage can have it.
        A redeclaration keeps the linkage of an earlier ``extern "C"``
        declaration of the same name.
        """
        if self.language == "c":
            return True
        if member or _is_static(node):
            return False
        name = _unqualified_name(function_declarator)
        if extern_c:
            if name is not None:
                c_functions.add(name)
            return True
        return name is not None and name in c_functions

    def _make_node(
        self,
        start_node: Any,
        end_node: Any,
        function_declarator: Any,
        *,
        is_definition: bool,
        extern_c: bool,
    ) -> FunctionNode:
        name_node = function_declarator.child_by_field_name("declarator")
        return FunctionNode(
            name=name_node.text.decode("utf-8", errors="replace"),
            start=SourceLocation(self.path, start_node.start_byte),
            end=SourceLocation(self.path, _last_token(end_node).start_byte),
            is_definition=is_definition,
            is_extern_c=extern_c,
        )


@dataclass
class TreeSitterParser:
    """Parses C and C++ files with the tree-sitter grammars.

    Usage::

        parser = TreeSitterParser()
        tu = parser.parse(compdb.get_compile_command("src/foo.cpp"))
        for node in tu.function_nodes():
            ...
    """

    c_extensions: frozenset[str] = frozenset({".c"})
    _languages: dict[str, Any] = field(default_factory=dict, repr=False)

    def language_for(self, command: CompileCommand) -> Language:
        hint = command.language_hint()
        if hint == "c" or hint == "cpp":
            return hint
        return "c" if Path(command.file).suffix.lower() in self.c_extensions else "cpp"

    def _get_language(self, language: Language) -> Any:
        if language in self._languages:
            return self._languages[language]
        module_name = _GRAMMAR_MODULES[language]
        try:
            mod = importlib.import_module(module_name)
            lang = tree_sitter.Language(mod.language())
        except (ImportError, AttributeError) as err:
            raise ParseError.language_unavailable(language, module_name) from err
        self._languages[language] = lang
        return lang

    def parse(self, command: CompileCommand, content: bytes | None = None) -> TreeSitterTranslationUnit:
        """Parse the file named by ``command``.

        Args:
            command: Compile command of the file; decides C vs C++.
            content: File content. If None, reads from disk.

        Raises:
            ParseError: File unreadable or grammar unavailable.
        """
        path = command.path
        if content is None:
            try:
                content = Path(path).read_bytes()
            except OSError as e:
                raise ParseError.unreadable(path, e.strerror or str(e)) from e

        language = self.language_for(command)
        parser = tree_sitter.Parser(self._get_language(language))
        tree = parser.parse(content)
        if tree.root_node.has_error:
            log.debug("parse_has_errors", path=path, language=language)
        return TreeSitterTranslationUnit(path=path, language=language, source=content, tree=tree)
