"""Query builder.

A query starts from every entity of one kind in the corpus and narrows the
candidates once per applied filter category. Categories are ANDed; an
applied category with no values is dropped, so a query without values
returns the whole corpus in its original order.

Usage:
    query = new_query(corpus, EntityKind.CLASS)
    query.apply("implements_interfaces_or", ["*Authenticatable"])
    query.apply("doesnt_use_traits_and", ["*SoftDeletes", "*HasUuids"])
    results = query.execute()
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from codequery.constants import VIEW_INDEX_NAME
from codequery.corpus.corpus import Corpus
from codequery.query.accessors import accessors_for
from codequery.query.registry import FilterCategory, FilterRegistry, get_registry
from codequery.query.usage_graph import UsageGraph
from codequery.types.entities import Entity, EntityKind
from codequery.types.errors import QueryStateError
from codequery.utils.logger import logger


class Query:
    """A single-use filter query over entities of one kind.

    View queries read usage edges from ``usage_graph`` when one is given,
    and otherwise build a graph over ``entities`` at execution.
    """

    def __init__(
        self,
        kind: EntityKind | str,
        entities: Sequence[Entity],
        registry: FilterRegistry | None = None,
        index_name: str = VIEW_INDEX_NAME,
        usage_graph: UsageGraph | None = None,
    ) -> None:
        self.kind = EntityKind(kind)
        self._entities = tuple(entities)
        self._registry = registry or get_registry(self.kind)
        self._index_name = index_name
        self._usage_graph = usage_graph
        self._applied: list[tuple[FilterCategory, tuple[Any, ...]]] = []
        self._executed = False

    @property
    def applied(self) -> list[tuple[str, tuple[Any, ...]]]:
        """Applied category names with their values, in application order."""
        return [(category.name, values) for category, values in self._applied]

    def apply(self, category_name: str, values: Iterable[Any]) -> "Query":
        """Add one filter category. Does not execute anything.

        The combinator mode comes from the category name (``_or`` / ``_and``).

        Raises:
            UnknownFilterError: If the category does not exist for this kind.
        """
        category = self._registry.get(category_name)
        if isinstance(values, str):
            values = [values]
        parsed = category.parse_values(values or ())
        if parsed:
            self._applied.append((category, parsed))
        return self

    def where(self, filters: Mapping[str, Iterable[Any]]) -> "Query":
        """Apply several categories from a ``name -> values`` mapping."""
        for name, values in filters.items():
            self.apply(name, values)
        return self

    def execute(self) -> tuple[Entity, ...]:
        """Run the query and return matching entities in corpus order.

        Raises:
            QueryStateError: If the query was already executed.
        """
        if self._executed:
            raise QueryStateError(f"{self.kind.value} query executed twice")
        self._executed = True

        accessors = accessors_for(
            self.kind, self._entities, self._index_name, self._usage_graph
        )
        candidates: list[Entity] = list(self._entities)
        for category, values in self._applied:
            if not candidates:
                break
            predicate = category.predicate(values, getattr(accessors, category.attribute))
            candidates = [entity for entity in candidates if predicate(entity)]
            logger.debug(
                f"{self.kind.value} filter {category.name}={list(map(str, values))} "
                f"left {len(candidates)} candidates"
            )

        return tuple(candidates)


def new_query(
    corpus: Corpus,
    kind: EntityKind | str,
    index_name: str = VIEW_INDEX_NAME,
) -> Query:
    """Start a query over every entity of ``kind`` in ``corpus``."""
    kind = EntityKind(kind)
    return Query(kind, corpus.entities(kind), index_name=index_name)
