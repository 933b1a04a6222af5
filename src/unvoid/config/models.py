"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (UNVOID__SECTION__KEY)
3. Project YAML (.unvoid.yaml)
4. Global YAML (~/.config/unvoid/config.yaml)
5. Built-in defaults (this file)

Examples:
    UNVOID__LOGGING__LEVEL=DEBUG
    UNVOID__COMPDB__FILENAME=compile_flags.json
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        UNVOID__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG reports every skipped function.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CompileDbConfig(BaseModel):
    """Compilation database lookup.

    Env vars:
        UNVOID__COMPDB__FILENAME: Database file name inside the build path
    """

    filename: str = Field(
        default="compile_commands.json",
        description="Name of the JSON compilation database inside BUILD_PATH.",
    )

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError(f"Must be a plain file name, got {v!r}")
        return v


class RewriteConfig(BaseModel):
    """Rewrite behaviour.

    Env vars:
        UNVOID__REWRITE__C_EXTENSIONS: Extensions parsed as C when flags don't say
    """

    c_extensions: list[str] = Field(
        default_factory=lambda: [".c"],
        description="File extensions parsed as C when the compile command does not "
        "name a language. Everything else is parsed as C++.",
    )

    @field_validator("c_extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in (e.lower() for e in v)]


class UnvoidConfig(BaseModel):
    """Root configuration (for type hints; loader uses BaseSettings)."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    compdb: CompileDbConfig = Field(default_factory=CompileDbConfig)
    rewrite: RewriteConfig = Field(default_factory=RewriteConfig)
