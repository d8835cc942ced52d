"""Shared infrastructure for the codequery MCP server.

This module contains the FastMCP instance, the corpus registry, service
accessors, the error handling decorator and response helpers shared
across all tool modules.
"""

import functools
import re

from fastmcp import FastMCP

from codequery.config import Settings
from codequery.services.corpus_registry import CorpusContext, CorpusRegistry
from codequery.services.query_service import QueryService
from codequery.types.errors import CodeQueryError
from codequery.utils.error_classifier import classify_error
from codequery.utils.logger import generate_request_id, logger, with_correlation_id
from codequery.utils.toon_encoder import ToonEncoder, is_structurally_toon_eligible

# =============================================================================
# FastMCP Server Instance
# =============================================================================

mcp = FastMCP(
    "codequery",
    instructions="""codequery - Codebase Metadata Query Server

This server answers structured queries over a codebase's extracted metadata:
classes, data models, routes and views.

Every query tool takes independent filter categories. Values inside one
`_or` category are combined with OR, values inside one `_and` category with
AND, and all categories given in one call must hold together. Negative
categories (`doesnt_*`, `not_*`) exclude what their positive twin would
include. Name, class, URI and view filters accept `*` wildcards; property,
relation, middleware and parameter filters match exactly.

Use `list_filter_categories` to see every category for a kind. Calling a
query tool without filters returns every entity of that kind.
Use `manage_corpus` to see which snapshot is active, switch snapshots or
reload one after the extractor ran.
""",
)

# =============================================================================
# Module-level Globals
# =============================================================================

_settings = Settings.from_env()
_registry = CorpusRegistry(
    default_path=_settings.corpus_path,
    index_name=_settings.view_index_name,
)
_toon_encoder = ToonEncoder()


def configure_server(settings: Settings) -> None:
    """Apply resolved settings before the server starts serving."""
    global _settings
    _settings = settings
    _registry.configure(
        default_path=settings.corpus_path,
        index_name=settings.view_index_name,
    )


# =============================================================================
# Registry-based Service Access
# =============================================================================


def _get_active_context() -> CorpusContext:
    """Get the active corpus context (activates the configured path if needed)."""
    return _registry.get_active()


def _get_query_service() -> QueryService:
    """Get the query service for the active corpus."""
    return _get_active_context().get_query_service()


# =============================================================================
# Error Handling Helpers & Decorator
# =============================================================================


_RE_UNIX_PATH = re.compile(
    r"(?:/(?:home|tmp|var|etc|usr|opt|root|Users|Windows"
    r"|srv|mnt|media|run|data|proc|sys|snap|nix)[^\s'\",:;)\}\]]*)"
)
_RE_WIN_PATH = re.compile(r"(?:[A-Z]:\\[^\s'\",:;)\}\]]+)")
_RE_FILE_URI = re.compile(r"file://[^\s\"']+")


def _sanitize_error_message(error_msg: str) -> str:
    """Remove absolute paths from error messages returned to clients."""
    sanitized = _RE_UNIX_PATH.sub(
        lambda m: ".../" + m.group(0).rsplit("/", 1)[-1],
        error_msg,
    )
    sanitized = _RE_WIN_PATH.sub(
        lambda m: "...\\" + m.group(0).rsplit("\\", 1)[-1],
        sanitized,
    )
    return _RE_FILE_URI.sub("<file-uri>", sanitized)


def _success_response(kind_plural: str, message: str, items: object, **extra: object) -> dict:
    """Build a standard success response dict for a query tool."""
    return {"success": True, "message": message, kind_plural: items, **extra}


def _failure_response(
    error_message: str,
    error_code: str = "client_error",
    is_retryable: bool = False,
    **extra: object,
) -> dict:
    """Build a standard failure response dict.

    All MCP tool failures use this shape so consumers see one predictable
    structure: ``{"success": False, "error": "...", "error_code": "...",
    "is_retryable": ...}``.

    Args:
        error_message: Human-readable error description.
        error_code: Error classification (default ``"client_error"``).
        is_retryable: Whether the consumer should retry the operation.
        **extra: Additional keys merged into the response.
    """
    return {
        "success": False,
        "error": error_message,
        "error_code": error_code,
        "is_retryable": is_retryable,
        **extra,
    }


def _with_error_handling(operation_name: str, toon_auto: bool = True):
    """Decorator for MCP tool implementations with error handling and TOON auto-encoding.

    Each call runs under a fresh correlation ID. Exceptions are logged,
    classified and turned into :func:`_failure_response` dicts. Errors from
    the codequery hierarchy also carry their recovery hints.

    When ``toon_auto`` is True and TOON is enabled in the settings,
    successful dict responses that are structurally eligible (flat uniform
    arrays with at least five elements, no nested arrays) are returned as
    TOON strings. Encoding failures fall back to the dict.

    Args:
        operation_name: Name of the operation for logging and error context.
        toon_auto: Enable automatic TOON encoding for eligible responses.
    """

    def _apply_toon(result):
        if not (toon_auto and _settings.toon_enabled):
            return result
        if isinstance(result, dict) and result.get("success"):
            try:
                if is_structurally_toon_eligible(result):
                    return _toon_encoder.encode(result)
            except Exception as e:
                logger.debug(f"TOON encoding skipped for '{operation_name}': {e}")
        return result

    def _handle_exception(e: Exception):
        classification = classify_error(e, {"operation": operation_name})
        logger.bind(
            operation=operation_name,
            category=classification.category.value,
            error_type=type(e).__name__,
        ).error(f"Error in operation '{operation_name}': {e}")
        extra: dict[str, object] = {}
        if isinstance(e, CodeQueryError):
            extra["error_type"] = type(e).__name__
            extra["recovery_actions"] = [a.description for a in e.recovery_actions]
        return _failure_response(
            _sanitize_error_message(str(e)),
            error_code=classification.category.value,
            is_retryable=classification.is_retryable,
            **extra,
        )

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with with_correlation_id(generate_request_id(), operation_name) as ctx:
                try:
                    result = func(*args, **kwargs)
                    logger.debug(f"{operation_name} finished in {ctx.elapsed_ms:.1f}ms")
                    return _apply_toon(result)
                except Exception as e:
                    return _handle_exception(e)

        return wrapper

    return decorator
