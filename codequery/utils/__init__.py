"""
codequery utility modules.

- Logging (MCP-safe, correlation IDs)
- Error classification for tool responses
- TOON encoding of flat tabular responses
"""

# Logger
from .logger import (
    RequestContext,
    configure_logging,
    generate_request_id,
    get_correlation_id,
    get_request_context,
    is_debug_enabled,
    is_mcp_server,
    logger,
    with_correlation_id,
)

# Resilience
from .error_classifier import (
    ErrorCategory,
    ErrorClassification,
    classify_error,
    is_retryable,
)

# TOON
from .toon_encoder import (
    ToonEncoder,
    ToonEncodingError,
    has_nested_arrays,
    is_structurally_toon_eligible,
)

__all__ = [
    # Logger
    "RequestContext",
    "configure_logging",
    "generate_request_id",
    "get_correlation_id",
    "get_request_context",
    "is_debug_enabled",
    "is_mcp_server",
    "logger",
    "with_correlation_id",
    # Resilience
    "ErrorCategory",
    "ErrorClassification",
    "classify_error",
    "is_retryable",
    # TOON
    "ToonEncoder",
    "ToonEncodingError",
    "has_nested_arrays",
    "is_structurally_toon_eligible",
]
