"""unvoid error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Compilation database
- 4xxx: Parse
- 5xxx: Apply
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Compilation database (3xxx)
    COMPDB_NOT_FOUND = 3001
    COMPDB_PARSE_ERROR = 3002
    COMPDB_NO_COMMAND = 3003

    # Parse (4xxx)
    PARSE_FILE_UNREADABLE = 4001
    PARSE_LANGUAGE_UNAVAILABLE = 4002

    # Apply (5xxx)
    APPLY_OVERLAPPING_EDITS = 5001
    APPLY_SPAN_OUT_OF_RANGE = 5002
    APPLY_WRONG_FILE = 5003
    APPLY_IO_ERROR = 5004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class UnvoidError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'COMPDB_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(UnvoidError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class CompilationDatabaseError(UnvoidError):
    """The compilation database is missing, malformed, or lacks a file."""

    @classmethod
    def not_found(cls, build_path: str, filename: str) -> "CompilationDatabaseError":
        return cls(
            code=ErrorCode.COMPDB_NOT_FOUND,
            message=f"No {filename} found in {build_path}",
            details={"build_path": build_path, "filename": filename},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "CompilationDatabaseError":
        return cls(
            code=ErrorCode.COMPDB_PARSE_ERROR,
            message=f"Failed to load compilation database {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def no_command(cls, file: str, database: str | None = None) -> "CompilationDatabaseError":
        where = f" in {database}" if database else ""
        return cls(
            code=ErrorCode.COMPDB_NO_COMMAND,
            message=f"No compile command found for {file}{where}",
            details={"file": file, "database": database},
        )


class ParseError(UnvoidError):
    """A single translation unit could not be parsed."""

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_FILE_UNREADABLE,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def language_unavailable(cls, language: str, module: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_LANGUAGE_UNAVAILABLE,
            message=f"Grammar for {language} is not available (install {module})",
            details={"language": language, "module": module},
        )


class ApplyError(UnvoidError):
    """Edits could not be applied to a file."""

    @classmethod
    def overlapping(cls, path: str, first: tuple[int, int], second: tuple[int, int]) -> "ApplyError":
        return cls(
            code=ErrorCode.APPLY_OVERLAPPING_EDITS,
            message=f"Overlapping edits in {path}: {first} and {second}",
            details={"path": path, "first": list(first), "second": list(second)},
        )

    @classmethod
    def out_of_range(cls, path: str, end: int, size: int) -> "ApplyError":
        return cls(
            code=ErrorCode.APPLY_SPAN_OUT_OF_RANGE,
            message=f"Edit ends at offset {end} but {path} has {size} bytes",
            details={"path": path, "end": end, "size": size},
        )

    @classmethod
    def wrong_file(cls, path: str, edit_path: str) -> "ApplyError":
        return cls(
            code=ErrorCode.APPLY_WRONG_FILE,
            message=f"Edit for {edit_path} cannot be applied to {path}",
            details={"path": path, "edit_path": edit_path},
        )

    @classmethod
    def io_error(cls, path: str, reason: str) -> "ApplyError":
        return cls(
            code=ErrorCode.APPLY_IO_ERROR,
            message=f"Failed to save {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )


class InternalError(UnvoidError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
