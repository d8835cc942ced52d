"""Error classification with a lightweight lookup table.

Classifies exceptions into categories and retryability for MCP error responses.
Only two fields are consumed at runtime: ``category`` (str enum) and ``is_retryable`` (bool).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from codequery.types.errors import (
    ConfigurationError,
    CorpusError,
    ErrorCode,
    QueryStateError,
    ValidationError,
)


class ErrorCategory(str, Enum):
    """High-level error categories for handling decisions."""

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    CLIENT_ERROR = "client_error"
    SYSTEM_ERROR = "system_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class ErrorClassification:
    """Classification result: category and retryability."""

    category: ErrorCategory
    is_retryable: bool


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

# Order matters: the first matching row wins, so subclasses come first.
_TYPE_TABLE: list[tuple[tuple[type[Exception], ...], ErrorClassification]] = [
    (
        (ValidationError, QueryStateError),
        ErrorClassification(ErrorCategory.CLIENT_ERROR, False),
    ),
    (
        (ConfigurationError,),
        ErrorClassification(ErrorCategory.PERMANENT, False),
    ),
    (
        (PermissionError,),
        ErrorClassification(ErrorCategory.TRANSIENT, True),
    ),
    (
        (FileNotFoundError, NotADirectoryError, IsADirectoryError),
        ErrorClassification(ErrorCategory.PERMANENT, False),
    ),
    (
        (ValueError, TypeError, KeyError, AttributeError),
        ErrorClassification(ErrorCategory.CLIENT_ERROR, False),
    ),
    (
        (MemoryError,),
        ErrorClassification(ErrorCategory.SYSTEM_ERROR, False),
    ),
    (
        (IOError, OSError),
        ErrorClassification(ErrorCategory.SYSTEM_ERROR, True),
    ),
]

# A corpus that is missing or unreadable may appear after the extractor
# runs again; a malformed one will not fix itself.
_CORPUS_CODES: dict[ErrorCode, ErrorClassification] = {
    ErrorCode.CORPUS_NOT_FOUND: ErrorClassification(ErrorCategory.TRANSIENT, True),
    ErrorCode.CORPUS_READ_FAILED: ErrorClassification(ErrorCategory.SYSTEM_ERROR, True),
    ErrorCode.CORPUS_MALFORMED: ErrorClassification(ErrorCategory.PERMANENT, False),
}

_UNKNOWN = ErrorClassification(ErrorCategory.UNKNOWN, False)


def _classify(error: Exception) -> ErrorClassification:
    """Corpus error codes first, then the type table."""
    if isinstance(error, CorpusError):
        return _CORPUS_CODES.get(error.code, _UNKNOWN)

    for exc_types, cls in _TYPE_TABLE:
        if isinstance(error, exc_types):
            return cls

    return _UNKNOWN


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def classify_error(
    error: Exception, context: dict[str, Any] | None = None
) -> ErrorClassification:
    """Classify an error into category and retryability."""
    return _classify(error)


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    return _classify(error).is_retryable
