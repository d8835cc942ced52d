"""Corpus management tools: registry status, activation and reload."""

from typing import Literal

from codequery.mcp_server._shared import (
    _failure_response,
    _get_active_context,
    _registry,
    _with_error_handling,
    mcp,
)

# =============================================================================
# Raw helpers (undecorated, called by the dispatch implementation)
# =============================================================================


def _corpus_status_helper() -> dict:
    """Return registry state without loading anything."""
    contexts = _registry.list_contexts()
    return {
        "success": True,
        "message": f"{len(contexts)} corpus snapshots known.",
        "registry": _registry.to_dict(),
    }


def _activate_corpus_helper(path: str) -> dict:
    """Activate a snapshot and load it so problems surface immediately."""
    ctx = _registry.activate(path)
    counts = ctx.get_corpus().counts()
    return {
        "success": True,
        "message": f"Activated {ctx.name}.",
        "activated": ctx.to_dict(),
        "counts": counts,
    }


def _reload_corpus_helper() -> dict:
    """Drop the active corpus and read its snapshot again."""
    ctx = _get_active_context()
    ctx.reload()
    ctx.get_corpus()
    return {
        "success": True,
        "message": f"Reloaded {ctx.name}.",
        "activated": ctx.to_dict(),
    }


# =============================================================================
# Implementation
# =============================================================================


@_with_error_handling("manage_corpus", toon_auto=False)
def _manage_corpus_impl(action: str = "status", path: str = "") -> dict:
    """Implementation for manage_corpus tool, dispatching by action."""
    if action == "status":
        return _corpus_status_helper()
    if action == "activate":
        if not path:
            return _failure_response("path is required when action='activate'")
        return _activate_corpus_helper(path)
    if action == "reload":
        return _reload_corpus_helper()
    return _failure_response(
        f"Unknown action '{action}'. Choose from: status, activate, reload"
    )


# =============================================================================
# MCP Tool Registration
# =============================================================================


@mcp.tool
def manage_corpus(
    action: Literal["status", "activate", "reload"] = "status",
    path: str = "",
) -> dict:
    """Inspect or switch the corpus snapshot that queries run against.

    Each snapshot path gets its own cached corpus and query service, so
    switching back to a snapshot seen before does not read it again.

    Args:
        action: What to do:
            - "status": Active path and every known snapshot (default)
            - "activate": Switch to the snapshot at ``path`` and load it
            - "reload": Re-read the active snapshot after the extractor ran
        path: Snapshot file path (required when action="activate")

    Returns:
        When action="status": the registry with its known snapshots
        When action="activate" or "reload": the snapshot and its entity counts
    """
    return _manage_corpus_impl(action, path)
