"""Core module exports."""

from unvoid.core.errors import (
    ApplyError,
    CompilationDatabaseError,
    ConfigError,
    ErrorCode,
    InternalError,
    ParseError,
    UnvoidError,
)
from unvoid.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from unvoid.core.progress import pluralize, progress, status

__all__ = [
    # Errors
    "ApplyError",
    "CompilationDatabaseError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "ParseError",
    "UnvoidError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "pluralize",
    "progress",
    "status",
]
