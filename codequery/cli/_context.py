"""CLI corpus context -- mirrors _shared.py's registry pattern for CLI commands.

CLI commands that query a corpus use cli_corpus_scope(path) instead of
loading snapshots directly, so loading and query services go through the
same lazy CorpusContext the MCP server uses.
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator

from codequery.services.corpus_registry import CorpusContext, CorpusRegistry
from codequery.utils.logger import logger

_registry = CorpusRegistry()


def get_corpus_context(path: str, index_name: str | None = None) -> CorpusContext:
    """Activate and return a corpus context for a CLI command."""
    return _registry.activate(path, index_name)


@contextlib.contextmanager
def cli_corpus_scope(
    path: str, index_name: str | None = None
) -> Generator[CorpusContext, None, None]:
    """Context manager providing a CorpusContext that is dropped on exit.

    A CLI invocation reads the snapshot fresh, so edits between two
    commands in the same process are picked up.
    """
    ctx = get_corpus_context(path, index_name)
    try:
        yield ctx
    finally:
        ctx.reload()
        logger.debug(f"CLI corpus scope closed: {ctx.path}")
