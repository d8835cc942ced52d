"""
Safe logging utility for MCP server context.

MCP STDIO Transport Protocol:
- STDOUT: Reserved for JSON-RPC messages ONLY
- STDERR: May be used for logging (per MCP spec)

configure_logging() installs a single STDERR sink, so the server and the
CLI never write log lines to STDOUT.

Correlation ID Support:
- Uses contextvars to propagate correlation IDs across async operations
- Every record carries ``extra["correlation_id"]`` ("-" outside a request)
- Use with_correlation_id() context manager for scoped correlation IDs
"""

import os
import secrets
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Generator

from loguru import logger as loguru_logger

# ============================================================================
# Request Context
# ============================================================================


@dataclass
class RequestContext:
    """Request context for correlation ID tracking."""

    correlation_id: str
    tool_name: str | None = None
    start_time: float | None = None

    @property
    def elapsed_ms(self) -> float:
        if self.start_time is None:
            return 0.0
        return (time.time() - self.start_time) * 1000


# Context variable for request tracking
_request_context: ContextVar[RequestContext | None] = ContextVar(
    "request_context", default=None
)


def generate_request_id() -> str:
    """
    Generate a unique request ID for correlation.

    Format: req_<timestamp_base36>_<random_hex>
    """
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(4)
    return f"req_{base36_encode(timestamp)}_{random_part}"


def base36_encode(number: int) -> str:
    """Encode an integer to base36 string."""
    if number == 0:
        return "0"

    chars = "0123456789abcdefghijklmnopqrstuvwxyz"
    result = []
    while number:
        result.append(chars[number % 36])
        number //= 36
    return "".join(reversed(result))


def get_request_context() -> RequestContext | None:
    """Get the current request context (if any)."""
    return _request_context.get()


def get_correlation_id() -> str | None:
    """Get the current correlation ID (if any)."""
    ctx = get_request_context()
    return ctx.correlation_id if ctx else None


@contextmanager
def with_correlation_id(
    correlation_id: str,
    tool_name: str | None = None,
) -> Generator[RequestContext, None, None]:
    """
    Context manager for running code with a correlation ID.

    All log messages within this context will include the correlation ID.

    Args:
        correlation_id: The correlation ID to use
        tool_name: Optional tool name for additional context

    Yields:
        The RequestContext object
    """
    context = RequestContext(
        correlation_id=correlation_id,
        tool_name=tool_name,
        start_time=time.time(),
    )
    token = _request_context.set(context)
    try:
        yield context
    finally:
        _request_context.reset(token)


# ============================================================================
# Logger Configuration
# ============================================================================

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<dim>{extra[correlation_id]}</dim> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def is_mcp_server() -> bool:
    """Check if we're in MCP server mode."""
    return os.environ.get("MCP_SERVER", "").lower() == "true"


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.environ.get("DEBUG", "").lower() == "true"


def _add_correlation_id(record: dict) -> None:
    record["extra"].setdefault("correlation_id", get_correlation_id() or "-")


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a single STDERR sink.

    ``DEBUG=true`` in the environment forces the DEBUG level.
    """
    if is_debug_enabled():
        level = "DEBUG"
    loguru_logger.remove()
    loguru_logger.configure(patcher=_add_correlation_id)
    loguru_logger.add(
        sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
        colorize=not is_mcp_server(),
        backtrace=is_debug_enabled(),
        diagnose=False,
    )


# Export loguru logger for direct use
logger = loguru_logger
