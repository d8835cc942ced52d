"""
codequery type definitions.

This module exports the entity records and error types used across codequery.
"""

# Entity types
from .entities import (
    ClassEntity,
    ControllerPattern,
    ControllerRef,
    Entity,
    EntityKind,
    ModelEntity,
    Relation,
    RouteEntity,
    ViewEntity,
)

# Error types
from .errors import (
    CodeQueryError,
    ConfigurationError,
    CorpusError,
    ErrorCode,
    ErrorContext,
    ErrorSeverity,
    QueryStateError,
    RecoveryAction,
    UnknownFilterError,
    ValidationError,
)

__all__ = [
    # Entity types
    "ClassEntity",
    "ControllerPattern",
    "ControllerRef",
    "Entity",
    "EntityKind",
    "ModelEntity",
    "Relation",
    "RouteEntity",
    "ViewEntity",
    # Error types
    "ErrorCode",
    "ErrorSeverity",
    "RecoveryAction",
    "ErrorContext",
    "CodeQueryError",
    "ConfigurationError",
    "ValidationError",
    "UnknownFilterError",
    "CorpusError",
    "QueryStateError",
]
