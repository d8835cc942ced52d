"""
Structured error handling for codequery.

Provides error types carrying an internal code, a user-facing message and
recovery hints, so tool and CLI failures surface with a stable shape.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any

from codequery.constants import utcnow


class ErrorCode(IntEnum):
    """Internal error codes for categorization."""

    # Corpus Errors (2000-2999)
    CORPUS_NOT_FOUND = 2001
    CORPUS_READ_FAILED = 2002
    CORPUS_MALFORMED = 2003

    # Query Errors (3000-3999)
    QUERY_ALREADY_EXECUTED = 3001

    # Configuration Errors (4000-4999)
    INVALID_CONFIG = 4001

    # User Input Errors (6000-6999)
    INVALID_ARGS = 6001
    UNKNOWN_FILTER = 6002
    VALIDATION_FAILED = 6003


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class RecoveryAction:
    """Suggested action to recover from an error."""

    description: str
    command: str | None = None


@dataclass
class ErrorContext:
    """Context information for an error."""

    operation: str | None = None
    file_path: str | None = None
    component: str | None = None
    timestamp: datetime = field(default_factory=utcnow)
    additional_info: dict[str, Any] = field(default_factory=dict)


class CodeQueryError(Exception):
    """Base error class for codequery."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        user_message: str,
        severity: str = ErrorSeverity.MEDIUM,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.severity = severity
        self.user_message = user_message
        self.context = context or ErrorContext()
        self.recovery_actions = recovery_actions or []
        self.original_error = original_error

    def get_formatted_message(self) -> str:
        """Get a formatted error message for display to users."""
        parts = [
            f"[Error] {self.user_message}",
            f"   Code: {self.code.value}",
        ]

        if self.context.operation:
            parts.append(f"   Operation: {self.context.operation}")
        if self.context.file_path:
            parts.append(f"   File: {self.context.file_path}")

        if self.recovery_actions:
            parts.append("")
            parts.append("Suggested actions:")
            for i, action in enumerate(self.recovery_actions, 1):
                parts.append(f"   {i}. {action.description}")
                if action.command:
                    parts.append(f"      Run: {action.command}")

        return "\n".join(parts)


class ConfigurationError(CodeQueryError):
    """Error related to configuration issues."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CONFIG,
            message=message,
            user_message=user_message or "Configuration error occurred.",
            severity=ErrorSeverity.HIGH,
            context=context,
            recovery_actions=recovery_actions,
        )


class ValidationError(CodeQueryError):
    """Error related to input validation failures."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
        code: ErrorCode = ErrorCode.VALIDATION_FAILED,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            user_message=user_message or "Validation failed.",
            severity=ErrorSeverity.MEDIUM,
            context=context,
            recovery_actions=recovery_actions,
        )


class UnknownFilterError(ValidationError):
    """A filter name that is not registered for the queried entity kind."""

    def __init__(self, name: str, kind: str, known: list[str]) -> None:
        super().__init__(
            message=f"Unknown {kind} filter '{name}'",
            user_message=f"'{name}' is not a {kind} filter.",
            context=ErrorContext(
                component="filter_registry",
                additional_info={"filter": name, "kind": kind},
            ),
            recovery_actions=[
                RecoveryAction(
                    description=f"Use one of: {', '.join(sorted(known))}",
                    command=f"codequery filters {kind}",
                )
            ],
            code=ErrorCode.UNKNOWN_FILTER,
        )
        self.name = name
        self.kind = kind


class CorpusError(CodeQueryError):
    """The corpus snapshot is missing, unreadable or malformed.

    Raised by the loader only; a corpus that loaded is well-formed.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CORPUS_MALFORMED,
        file_path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            user_message="The codebase corpus could not be loaded.",
            severity=ErrorSeverity.CRITICAL,
            context=ErrorContext(component="corpus_loader", file_path=file_path),
            recovery_actions=[
                RecoveryAction(
                    description="Re-run the extractor to regenerate the corpus snapshot",
                    command="codequery check",
                )
            ],
            original_error=original_error,
        )


class QueryStateError(CodeQueryError):
    """A query was executed more than once."""

    def __init__(self, message: str) -> None:
        super().__init__(
            code=ErrorCode.QUERY_ALREADY_EXECUTED,
            message=message,
            user_message="Query objects can only be executed once.",
            severity=ErrorSeverity.LOW,
            context=ErrorContext(component="query_builder"),
        )
