"""Base error classes and enums"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any

from logfire.integrations.pydantic import PluginSettings
from pydantic import BaseModel, Field, field_serializer


class ErrorLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_logging_level(self) -> int:
        """Convert ErrorLevel to logging level"""
        return {
            ErrorLevel.DEBUG: logging.DEBUG,
            ErrorLevel.INFO: logging.INFO,
            ErrorLevel.WARNING: logging.WARNING,
            ErrorLevel.ERROR: logging.ERROR,
            ErrorLevel.CRITICAL: logging.CRITICAL,
        }[self]


class ErrorCode(str, Enum):
    """Error codes for the query builder."""

    # General Errors (1xxx)
    UNKNOWN = "1000"
    CONFIG_INVALID = "1005"

    # Pattern Errors (2xxx)
    PATTERN_CONFLICT = "2001"

    # Compilation Errors (3xxx)
    COMPILATION_FAILED = "3001"

    # Database Errors (4xxx)
    DB_QUERY = "4002"
    DB_RECORD_NOT_FOUND = "4004"
    DB_TRANSACTION = "4005"


class ErrorDetails(BaseModel, plugin_settings=PluginSettings(logfire={"record": "all"})):
    """Base model for structured error details"""

    source: str = Field(description="Component or module where the error occurred")
    operation: str = Field(description="Builder call or pass being performed when the error occurred")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(), description="When the error occurred")

    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ValidationErrorDetails(ErrorDetails):
    """Details for invalid builder input"""

    field: str | None = Field(None, description="Argument that failed validation")
    actual_value: Any = Field(None, description="Value that failed validation")
    expected_type: str | None = Field(None, description="Expected type or format")
    constraint: str | None = Field(None, description="Constraint that was violated")


class CompilationErrorDetails(ErrorDetails):
    """Details for failures while rendering a query structure"""

    grammar: str | None = Field(None, description="Grammar pass that failed")
    element_type: str | None = Field(None, description="Type of the element that could not be rendered")


class DatabaseErrorDetails(ErrorDetails):
    """Details for database-related errors"""

    connection: str | None = Field(None, description="Connection alias the query was sent to")
    query: str | None = Field(None, description="Cypher text that was executed")
    parameter_names: list[str] = Field(default_factory=list, description="Names of the bound parameters")


class ApplicationError(Exception):
    """Base class for all query builder errors"""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        level: ErrorLevel = ErrorLevel.ERROR,
        details: ErrorDetails | dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.level = level

        if details is None:
            self.details = ErrorDetails(source="unknown", operation="unknown")
        elif isinstance(details, dict):
            source = details.pop("source", "unknown")
            operation = details.pop("operation", "unknown")
            self.details = ErrorDetails(source=source, operation=operation, **details)
        else:
            self.details = details

        super().__init__(message)
