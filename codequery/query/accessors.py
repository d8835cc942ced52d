"""Attribute accessors for each entity kind.

Every accessor takes one entity and returns the tuple of values a filter
category compares against. Scalar attributes come back as a one-element
tuple (or an empty one when unset), so every comparison is "does any of
these values satisfy the filter value".

Filter categories refer to accessors by attribute name; the query builder
looks them up with :func:`accessors_for`.
"""

from __future__ import annotations

from typing import Sequence

from codequery.constants import VIEW_INDEX_NAME
from codequery.query.usage_graph import UsageGraph, view_name_candidates
from codequery.types.entities import (
    ClassEntity,
    ControllerRef,
    Entity,
    EntityKind,
    ModelEntity,
    RouteEntity,
    ViewEntity,
)


class ClassAccessors:
    """Name, contracts, mixins and supertypes of a class."""

    attributes: tuple[str, ...] = ("name", "interfaces", "traits", "parents")

    def name(self, entity: ClassEntity) -> tuple[str, ...]:
        return (entity.name,)

    def interfaces(self, entity: ClassEntity) -> tuple[str, ...]:
        return entity.interfaces

    def traits(self, entity: ClassEntity) -> tuple[str, ...]:
        return entity.traits

    def parents(self, entity: ClassEntity) -> tuple[str, ...]:
        return entity.parents


class ModelAccessors(ClassAccessors):
    """Class attributes plus declared properties and relations."""

    attributes = ClassAccessors.attributes + (
        "properties",
        "fillable",
        "hidden",
        "relations",
    )

    def properties(self, entity: ModelEntity) -> tuple[str, ...]:
        return entity.properties

    def fillable(self, entity: ModelEntity) -> tuple[str, ...]:
        return entity.fillable

    def hidden(self, entity: ModelEntity) -> tuple[str, ...]:
        return entity.hidden

    def relations(self, entity: ModelEntity) -> tuple[str, ...]:
        return entity.relation_names


class RouteAccessors:
    """Name, URI, controller, middleware and parameters of a route."""

    attributes: tuple[str, ...] = ("name", "uri", "controller", "middleware", "parameters")

    def name(self, entity: RouteEntity) -> tuple[str, ...]:
        return (entity.name,) if entity.name is not None else ()

    def uri(self, entity: RouteEntity) -> tuple[str, ...]:
        return (entity.uri,)

    def controller(self, entity: RouteEntity) -> tuple[ControllerRef, ...]:
        return (entity.controller,)

    def middleware(self, entity: RouteEntity) -> tuple[str, ...]:
        return entity.middleware

    def parameters(self, entity: RouteEntity) -> tuple[str, ...]:
        return entity.parameters


class ViewAccessors:
    """View names and one-hop usage edges, with index aliasing applied."""

    attributes: tuple[str, ...] = ("name", "uses", "used_by")

    def __init__(self, graph: UsageGraph, index_name: str = VIEW_INDEX_NAME) -> None:
        self.graph = graph
        self._index_name = index_name

    def name(self, entity: ViewEntity) -> tuple[str, ...]:
        return view_name_candidates(entity.name, self._index_name)

    def uses(self, entity: ViewEntity) -> tuple[str, ...]:
        return self.graph.uses_candidates(entity)

    def used_by(self, entity: ViewEntity) -> tuple[str, ...]:
        return self.graph.used_by_candidates(entity)


Accessors = ClassAccessors | RouteAccessors | ViewAccessors


def accessors_for(
    kind: EntityKind,
    entities: Sequence[Entity],
    index_name: str = VIEW_INDEX_NAME,
    graph: UsageGraph | None = None,
) -> Accessors:
    """Build the accessor set for one query over ``entities``.

    Views need the usage graph of the whole corpus. Callers that already
    hold one pass it as ``graph``; otherwise it is built here, once per query.
    """
    if kind is EntityKind.CLASS:
        return ClassAccessors()
    if kind is EntityKind.MODEL:
        return ModelAccessors()
    if kind is EntityKind.ROUTE:
        return RouteAccessors()
    if graph is None:
        graph = UsageGraph(entities, index_name)
    return ViewAccessors(graph, index_name)
