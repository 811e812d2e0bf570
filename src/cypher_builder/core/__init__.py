"""Core error, configuration and logging infrastructure."""

from .base import ApplicationError, ErrorCode, ErrorDetails, ErrorLevel
from .config import Settings, settings
from .errors import (
    CompilationError,
    ConfigurationError,
    ExecutionError,
    NoResultError,
    PatternConflictError,
    TransactionError,
)

__all__ = [
    "ApplicationError",
    "CompilationError",
    "ConfigurationError",
    "ErrorCode",
    "ErrorDetails",
    "ErrorLevel",
    "ExecutionError",
    "NoResultError",
    "PatternConflictError",
    "Settings",
    "TransactionError",
    "settings",
]
