"""Config module exports."""

from unvoid.config.loader import load_config
from unvoid.config.models import (
    CompileDbConfig,
    LoggingConfig,
    LogOutputConfig,
    RewriteConfig,
    UnvoidConfig,
)

__all__ = [
    "load_config",
    "CompileDbConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "RewriteConfig",
    "UnvoidConfig",
]
