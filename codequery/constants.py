"""Shared constants for codequery.

Centralizes default paths, the reserved view leaf name and the
timezone-aware datetime helper.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


# Default corpus snapshot location, relative to the working directory
DEFAULT_CORPUS_PATH: str = ".codequery/corpus.json"

# Leaf segment that lets `dir.sub` also address `dir.sub.index`
VIEW_INDEX_NAME: str = "index"

# Separator between a view namespace and its dotted path (`pkg::dir.leaf`)
VIEW_NAMESPACE_SEPARATOR: str = "::"

# Marker used by extractors for routes bound to a closure instead of a controller
CLOSURE_MARKER: str = "Closure"

# Separators accepted between a controller class and method in filter values
CONTROLLER_METHOD_SEPARATORS: tuple[str, ...] = (",", "@")
