"""The in-memory corpus a query runs against."""

from __future__ import annotations

from dataclasses import dataclass

from codequery.types.entities import (
    ClassEntity,
    Entity,
    EntityKind,
    ModelEntity,
    RouteEntity,
    ViewEntity,
)


@dataclass(frozen=True)
class Corpus:
    """Immutable collections of extracted entities, in extractor order.

    Models are listed separately from classes: the class query covers
    ``classes`` only, the model query covers ``models`` only.
    """

    classes: tuple[ClassEntity, ...] = ()
    models: tuple[ModelEntity, ...] = ()
    routes: tuple[RouteEntity, ...] = ()
    views: tuple[ViewEntity, ...] = ()
    source: str | None = None

    def entities(self, kind: EntityKind | str) -> tuple[Entity, ...]:
        """Entities of one kind, in corpus order."""
        kind = EntityKind(kind)
        if kind is EntityKind.CLASS:
            return self.classes
        if kind is EntityKind.MODEL:
            return self.models
        if kind is EntityKind.ROUTE:
            return self.routes
        return self.views

    def counts(self) -> dict[str, int]:
        return {kind.plural: len(self.entities(kind)) for kind in EntityKind}

    @property
    def is_empty(self) -> bool:
        return not any(self.counts().values())
