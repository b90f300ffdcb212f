"""Structured logging primitives for recordcsv."""

from .log_events import LogEvents, emit
from .logger import (
    DEFAULT_LOG_LEVEL,
    MANDATORY_FIELDS,
    LogConfig,
    LogFormat,
    UnifiedLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LogConfig",
    "LogFormat",
    "MANDATORY_FIELDS",
    "UnifiedLogger",
    "configure_logging",
    "get_logger",
    "LogEvents",
    "emit",
]
