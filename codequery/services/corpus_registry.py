"""Corpus registry for per-snapshot query isolation.

Each corpus snapshot path gets its own context holding the parsed corpus
and the query service built on it. Snapshots are loaded lazily on first
query, so activating a path costs nothing until it is used.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from codequery.constants import VIEW_INDEX_NAME, utcnow
from codequery.corpus import Corpus, load_corpus
from codequery.utils.logger import logger

if TYPE_CHECKING:
    from codequery.services.query_service import QueryService

_IN_MEMORY = "<memory>"
_NEVER = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class CorpusContext:
    """The corpus and services scoped to a single snapshot.

    The corpus is read on first access and then held for the lifetime of
    the context. Call :meth:`reload` after the snapshot file changes.
    """

    path: str
    index_name: str = VIEW_INDEX_NAME
    activated_at: Optional[datetime] = None
    _corpus: Optional[Corpus] = field(default=None, repr=False)
    _query_service: Optional["QueryService"] = field(default=None, repr=False)
    _init_lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    @property
    def name(self) -> str:
        """Short snapshot name (file basename)."""
        return Path(self.path).name

    @property
    def is_loaded(self) -> bool:
        return self._corpus is not None

    def get_corpus(self) -> Corpus:
        """Get the corpus, loading the snapshot on first access.

        Raises:
            CorpusError: If the snapshot is missing or malformed.
        """
        if self._corpus is not None:
            return self._corpus
        with self._init_lock:
            if self._corpus is None:
                self._corpus = load_corpus(self.path)
            return self._corpus

    def get_query_service(self) -> "QueryService":
        """Get or create the query service for this corpus."""
        if self._query_service is not None:
            return self._query_service
        with self._init_lock:
            if self._query_service is None:
                from codequery.services.query_service import QueryService

                self._query_service = QueryService(
                    self.get_corpus(), index_name=self.index_name
                )
            return self._query_service

    def reload(self) -> None:
        """Drop the cached corpus so the next access re-reads the snapshot."""
        with self._init_lock:
            if self.path == _IN_MEMORY:
                return
            self._corpus = None
            self._query_service = None
        logger.info(f"Corpus context reset: {self.path}")

    def to_dict(self) -> dict:
        """Serialize corpus context to dictionary."""
        return {
            "path": self.path,
            "name": self.name,
            "activated_at": (
                self.activated_at.isoformat() if self.activated_at else None
            ),
            "loaded": self.is_loaded,
            "counts": self._corpus.counts() if self._corpus is not None else None,
        }


class CorpusRegistry:
    """Registry of corpus contexts keyed by snapshot path.

    The active context serves every MCP tool call. If none was activated
    explicitly, the first access activates ``default_path``.

    Usage:
        registry = CorpusRegistry(default_path=".codequery/corpus.json")
        service = registry.get_active().get_query_service()
    """

    def __init__(
        self,
        default_path: str | None = None,
        index_name: str = VIEW_INDEX_NAME,
    ) -> None:
        self._contexts: dict[str, CorpusContext] = {}
        self._active_path: Optional[str] = None
        self._default_path = default_path
        self._index_name = index_name
        self._lock = threading.Lock()

    @property
    def active_path(self) -> Optional[str]:
        return self._active_path

    def configure(
        self,
        default_path: str | None = None,
        index_name: str | None = None,
    ) -> None:
        """Change the fallback path and view index name for new contexts."""
        with self._lock:
            if default_path is not None:
                self._default_path = default_path
            if index_name is not None:
                self._index_name = index_name

    def activate(self, path: str, index_name: str | None = None) -> CorpusContext:
        """Activate a snapshot by path.

        Creates the context on first activation and keeps cached state for
        paths seen before. A context is only reused when it was built with
        the same view index name; otherwise a fresh one replaces it. Nothing
        is read from disk here.
        """
        resolved = str(Path(path).resolve())
        with self._lock:
            index_name = index_name or self._index_name
            ctx = self._contexts.get(resolved)
            if ctx is None or ctx.index_name != index_name:
                ctx = CorpusContext(path=resolved, index_name=index_name)
                self._contexts[resolved] = ctx
                logger.info(f"New corpus registered: {resolved} (index name '{index_name}')")
            ctx.activated_at = utcnow()
            self._active_path = resolved
            logger.debug(f"Corpus activated: {ctx.name} ({resolved})")
            return ctx

    def activate_corpus(self, corpus: Corpus) -> CorpusContext:
        """Activate an already built corpus that has no snapshot file."""
        ctx = CorpusContext(
            path=_IN_MEMORY,
            index_name=self._index_name,
            activated_at=utcnow(),
            _corpus=corpus,
        )
        with self._lock:
            self._contexts[_IN_MEMORY] = ctx
            self._active_path = _IN_MEMORY
        return ctx

    def get_active(self) -> CorpusContext:
        """Get the active corpus context, activating the default path if needed.

        Raises:
            ValueError: If nothing is active and no default path is configured.
        """
        with self._lock:
            if self._active_path is not None:
                return self._contexts[self._active_path]
            default_path = self._default_path
        if default_path is None:
            raise ValueError("No corpus activated and no default corpus path configured")
        return self.activate(default_path)

    def list_contexts(self) -> list[CorpusContext]:
        """Known contexts, most recently activated first."""
        contexts = list(self._contexts.values())
        contexts.sort(key=lambda c: c.activated_at or _NEVER, reverse=True)
        return contexts

    def reset(self) -> None:
        """Clear all contexts and state. Used for testing."""
        with self._lock:
            self._contexts.clear()
            self._active_path = None

    def to_dict(self) -> dict:
        """Serialize registry state."""
        return {
            "active_path": self._active_path,
            "contexts": [c.to_dict() for c in self.list_contexts()],
            "context_count": len(self._contexts),
        }
