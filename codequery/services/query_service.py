"""Query service: flat tool arguments in, formatted results out.

Tool and CLI callers pass filters as a ``category name -> values`` mapping.
The service rejects unknown names before anything runs, skips categories
whose value list is empty, executes one query over the corpus and wraps
the matches with :func:`format_results`.

Usage:
    service = QueryService(corpus)
    result = service.query("route", {"uses_middleware_and": ["auth", "web"]})
    result.to_dict()
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from codequery.constants import VIEW_INDEX_NAME
from codequery.corpus import Corpus
from codequery.query.builder import Query
from codequery.query.formatter import QueryResult, format_results
from codequery.query.registry import get_registry
from codequery.query.usage_graph import UsageGraph
from codequery.types.entities import EntityKind, ViewEntity
from codequery.utils.logger import logger

FilterArgs = Mapping[str, Optional[Iterable[str]]]


class QueryService:
    """Runs filter queries against one immutable corpus."""

    def __init__(self, corpus: Corpus, index_name: str = VIEW_INDEX_NAME) -> None:
        self.corpus = corpus
        self.index_name = index_name
        self._usage_graph: UsageGraph | None = None

    @property
    def usage_graph(self) -> UsageGraph:
        """Usage graph over the corpus views, built on first use."""
        if self._usage_graph is None:
            self._usage_graph = UsageGraph(self.corpus.views, self.index_name)
        return self._usage_graph

    def _describe_view(self, view: ViewEntity) -> dict[str, Any]:
        data = view.to_dict()
        data["uses"] = list(self.usage_graph.dependencies(view))
        data["used_by"] = list(self.usage_graph.dependents(view))
        return data

    def query(self, kind: EntityKind | str, filters: FilterArgs | None = None) -> QueryResult:
        """Run one query of ``kind`` with the given filter categories.

        Raises:
            UnknownFilterError: If a filter name is not a category of ``kind``.
        """
        kind = EntityKind(kind)
        registry = get_registry(kind)
        filters = filters or {}

        # Resolve every name first so a typo fails before any work is done
        for name in filters:
            registry.get(name)

        graph = self.usage_graph if kind is EntityKind.VIEW else None
        query = Query(kind, self.corpus.entities(kind), registry, self.index_name, graph)
        for name, values in filters.items():
            if values:
                query.apply(name, values)

        matched = query.execute()
        logger.debug(
            f"{kind.value} query with {len(query.applied)} active categories "
            f"matched {len(matched)} of {len(self.corpus.entities(kind))}"
        )
        describe = self._describe_view if kind is EntityKind.VIEW else None
        return format_results(kind, matched, describe)

    def query_classes(self, **filters: Optional[Iterable[str]]) -> QueryResult:
        return self.query(EntityKind.CLASS, filters)

    def query_models(self, **filters: Optional[Iterable[str]]) -> QueryResult:
        return self.query(EntityKind.MODEL, filters)

    def query_routes(self, **filters: Optional[Iterable[str]]) -> QueryResult:
        return self.query(EntityKind.ROUTE, filters)

    def query_views(self, **filters: Optional[Iterable[str]]) -> QueryResult:
        return self.query(EntityKind.VIEW, filters)

    @staticmethod
    def filter_categories(kind: EntityKind | str) -> list[dict[str, str]]:
        """Describe every filter category accepted for ``kind``."""
        return get_registry(kind).describe()
