"""Compilation databases: the exact compiler invocation for each source file.

Two flavours:
- ``JsonCompilationDatabase`` reads ``compile_commands.json`` from a build
  directory (CMake's ``-DCMAKE_EXPORT_COMPILE_COMMANDS=ON`` output).
- ``FixedCompilationDatabase`` applies one set of flags, given on the
  command line after ``--``, to every file.

A file missing from the database is a configuration error for the whole
run, never a per-file skip.
"""

from __future__ import annotations

import json
import os
import shlex
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from unvoid.core.errors import CompilationDatabaseError
from unvoid.core.logging import get_logger

log = get_logger("compdb")

DEFAULT_DATABASE_NAME = "compile_commands.json"

# Driver name used for commands synthesized from fixed flags
_FIXED_DRIVER = "clang-tool"


@dataclass(frozen=True)
class CompileCommand:
    """One compiler invocation."""

    directory: str
    file: str
    arguments: list[str] = field(default_factory=list)

    @property
    def path(self) -> str:
        """Absolute, normalized path of the source file."""
        return _normalize(self.file, self.directory)

    def language_hint(self) -> str | None:
        """Language named by the flags or the driver ("c" / "cpp"), if any."""
        args = self.arguments
        for i, arg in enumerate(args):
            lang: str | None = None
            if arg == "-x" and i + 1 < len(args):
                lang = args[i + 1]
            elif arg.startswith("-x") and len(arg) > 2:
                lang = arg[2:]
            if lang is not None:
                if lang in ("c", "c-header", "cpp-output"):
                    return "c"
                if lang.startswith("c++"):
                    return "cpp"
        for arg in args:
            if arg.startswith(("-std=", "--std=")):
                std = arg.split("=", 1)[1]
                if "++" in std:
                    return "cpp"
                if std.startswith(("c", "gnu", "iso9899")):
                    return "c"
        # gcc/clang pick the language from the extension; g++/clang++ force C++
        if args and Path(args[0]).name.removesuffix(".exe").endswith("++"):
            return "cpp"
        return None


class CompilationDatabase(Protocol):
    def get_compile_command(self, file: str | Path) -> CompileCommand: ...


def _normalize(file: str | Path, directory: str | Path) -> str:
    return os.path.normpath(os.path.join(os.fspath(directory), os.fspath(file)))


class JsonCompilationDatabase:
    """``compile_commands.json`` loaded from a build directory."""

    def __init__(self, commands: Sequence[CompileCommand], source: str = "<memory>") -> None:
        self._source = source
        self._by_path: dict[str, CompileCommand] = {}
        for command in commands:
            # First entry wins, like clang's JSONCompilationDatabase
            self._by_path.setdefault(command.path, command)

    @classmethod
    def from_directory(
        cls, build_path: str | Path, filename: str = DEFAULT_DATABASE_NAME
    ) -> JsonCompilationDatabase:
        """Load ``<build_path>/<filename>``.

        Raises:
            CompilationDatabaseError: Missing file, invalid JSON, or malformed entries.
        """
        db_path = Path(build_path) / filename
        if not db_path.is_file():
            raise CompilationDatabaseError.not_found(str(build_path), filename)
        try:
            raw = json.loads(db_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CompilationDatabaseError.parse_error(str(db_path), str(e)) from e

        commands = cls._parse_entries(raw, str(db_path))
        log.debug("compdb_loaded", path=str(db_path), entries=len(commands))
        return cls(commands, source=str(db_path))

    @staticmethod
    def _parse_entries(raw: object, source: str) -> list[CompileCommand]:
        if not isinstance(raw, list):
            raise CompilationDatabaseError.parse_error(source, "expected a JSON array")
        commands: list[CompileCommand] = []
        for index, entry in enumerate(raw):
            if not isinstance(entry, dict):
                raise CompilationDatabaseError.parse_error(source, f"entry {index} is not an object")
            directory = entry.get("directory")
            file = entry.get("file")
            if not isinstance(directory, str) or not isinstance(file, str):
                raise CompilationDatabaseError.parse_error(
                    source, f"entry {index} needs string 'directory' and 'file'"
                )
            arguments = entry.get("arguments")
            if arguments is None:
                command = entry.get("command")
                if not isinstance(command, str):
                    raise CompilationDatabaseError.parse_error(
                        source, f"entry {index} needs 'arguments' or 'command'"
                    )
                try:
                    arguments = shlex.split(command)
                except ValueError as e:
                    raise CompilationDatabaseError.parse_error(
                        source, f"entry {index}: {e}"
                    ) from e
            elif not isinstance(arguments, list) or not all(isinstance(a, str) for a in arguments):
                raise CompilationDatabaseError.parse_error(
                    source, f"entry {index} 'arguments' must be a list of strings"
                )
            commands.append(CompileCommand(directory=directory, file=file, arguments=arguments))
        return commands

    def get_compile_command(self, file: str | Path) -> CompileCommand:
        """Find the command for ``file``.

        An absolute path must match exactly. A relative path is resolved
        against the current directory first; failing that, with any ``./``
        prefix removed it may match the tail of exactly one database path.

        Raises:
            CompilationDatabaseError: No (unique) entry for the file.
        """
        file_str = os.fspath(file)
        resolved = _normalize(file_str, Path.cwd())
        if resolved in self._by_path:
            return self._by_path[resolved]
        if not os.path.isabs(file_str):
            relative = file_str
            while relative.startswith("./"):
                relative = relative[2:]
            relative = os.path.normpath(relative)
            matches = [
                path
                for path in self._by_path
                if path == relative or path.endswith(os.sep + relative)
            ]
            if len(matches) == 1:
                return self._by_path[matches[0]]
            if len(matches) > 1:
                log.debug("compdb_ambiguous_suffix", file=file_str, matches=len(matches))
        raise CompilationDatabaseError.no_command(file_str, self._source)


class FixedCompilationDatabase:
    """Every file compiles with the same flags."""

    def __init__(self, flags: Sequence[str], directory: str | Path | None = None) -> None:
        self._flags = list(flags)
        self._directory = os.fspath(directory) if directory is not None else os.getcwd()

    def get_compile_command(self, file: str | Path) -> CompileCommand:
        file_str = os.fspath(file)
        return CompileCommand(
            directory=self._directory,
            file=file_str,
            arguments=[_FIXED_DRIVER, *self._flags, file_str],
        )


def split_fixed_flags(argv: Sequence[str]) -> tuple[list[str], list[str] | None]:
    """Split ``argv`` at the first ``--``.

    Returns the tool arguments and the compiler flags after ``--`` (None when
    there is no ``--``).
    """
    argv = list(argv)
    if "--" not in argv:
        return argv, None
    index = argv.index("--")
    return argv[:index], argv[index + 1 :]


def load_compilation_database(
    build_path: str | Path,
    fixed_flags: Sequence[str] | None = None,
    *,
    filename: str = DEFAULT_DATABASE_NAME,
) -> CompilationDatabase:
    """Fixed flags from the command line win; otherwise read the build directory.

    Raises:
        CompilationDatabaseError: The build directory has no usable database.
    """
    if fixed_flags is not None:
        log.debug("compdb_fixed", flags=list(fixed_flags))
        return FixedCompilationDatabase(fixed_flags)
    return JsonCompilationDatabase.from_directory(build_path, filename)
