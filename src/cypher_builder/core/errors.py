"""Specific error types for the query builder."""

from typing import Any

from .base import (
    ApplicationError,
    CompilationErrorDetails,
    DatabaseErrorDetails,
    ErrorCode,
    ErrorLevel,
    ValidationErrorDetails,
)


class ConfigurationError(ApplicationError):
    """Invalid builder input, detected while the query is being assembled."""

    def __init__(self, message: str, details: ValidationErrorDetails | dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.CONFIG_INVALID,
            level=ErrorLevel.ERROR,
            details=details,
        )

    @classmethod
    def for_argument(
        cls,
        message: str,
        operation: str,
        field: str | None = None,
        actual_value: Any = None,
        constraint: str | None = None,
    ) -> "ConfigurationError":
        """Build an error describing the argument of a builder call that was rejected."""
        return cls(
            message,
            ValidationErrorDetails(
                source="builder",
                operation=operation,
                field=field,
                actual_value=actual_value,
                constraint=constraint,
            ),
        )


class PatternConflictError(ConfigurationError):
    """A variable name is registered both as a node and as a relationship."""

    def __init__(self, message: str, details: ValidationErrorDetails | dict[str, Any] | None = None):
        super().__init__(message=message, details=details)
        self.code = ErrorCode.PATTERN_CONFLICT


class CompilationError(ApplicationError):
    """A grammar pass met an element it cannot render."""

    def __init__(self, message: str, details: CompilationErrorDetails | dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.COMPILATION_FAILED,
            level=ErrorLevel.ERROR,
            details=details,
        )

    @classmethod
    def unsupported(cls, grammar: str, element: object) -> "CompilationError":
        return cls(
            f"{grammar} cannot render element of type {type(element).__name__}",
            CompilationErrorDetails(
                source="grammar",
                operation="compile",
                grammar=grammar,
                element_type=type(element).__name__,
            ),
        )


class ExecutionError(ApplicationError):
    """Running a compiled query against the database failed."""

    def __init__(self, message: str, details: DatabaseErrorDetails | dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.DB_QUERY,
            level=ErrorLevel.ERROR,
            details=details,
        )


class TransactionError(ApplicationError):
    """Transaction bookkeeping misuse (commit without begin, double begin, ...)."""

    def __init__(self, message: str, details: DatabaseErrorDetails | dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.DB_TRANSACTION,
            level=ErrorLevel.ERROR,
            details=details,
        )


class NoResultError(ApplicationError):
    """A query expected to yield a record yielded none."""

    def __init__(self, message: str, details: DatabaseErrorDetails | dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.DB_RECORD_NOT_FOUND,
            level=ErrorLevel.WARNING,
            details=details,
        )
