"""Entity records consumed by the query engine.

These are the typed records an external extractor produces for each
queryable unit of a codebase. They are frozen: the engine reads them and
never mutates them, so one corpus can serve concurrent queries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Union

from codequery.constants import (
    CLOSURE_MARKER,
    CONTROLLER_METHOD_SEPARATORS,
    VIEW_NAMESPACE_SEPARATOR,
)


class EntityKind(StrEnum):
    """The four kinds of entity a query can target."""

    CLASS = "class"
    MODEL = "model"
    ROUTE = "route"
    VIEW = "view"

    @property
    def plural(self) -> str:
        """Plural noun used in messages and response keys."""
        if self is EntityKind.CLASS:
            return "classes"
        return f"{self.value}s"


@dataclass(frozen=True)
class ClassEntity:
    """A class with its contracts, mixins and supertype chain.

    ``parents`` is ordered nearest first.
    """

    name: str
    interfaces: tuple[str, ...] = ()
    traits: tuple[str, ...] = ()
    parents: tuple[str, ...] = ()
    file: str | None = None

    @property
    def kind(self) -> EntityKind:
        return EntityKind.CLASS

    @property
    def identity(self) -> str:
        return self.name

    @property
    def short_name(self) -> str:
        """Class name without its namespace."""
        return self.name.rsplit("\\", 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "short_name": self.short_name,
            "file": self.file,
            "interfaces": list(self.interfaces),
            "traits": list(self.traits),
            "parents": list(self.parents),
        }


@dataclass(frozen=True)
class Relation:
    """A named relation from a model to another model, by name only."""

    name: str
    related: str
    type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "related": self.related, "type": self.type}


@dataclass(frozen=True)
class ModelEntity(ClassEntity):
    """A data-model class with its declared properties and relations."""

    properties: tuple[str, ...] = ()
    fillable: tuple[str, ...] = ()
    hidden: tuple[str, ...] = ()
    relations: tuple[Relation, ...] = ()

    @property
    def kind(self) -> EntityKind:
        return EntityKind.MODEL

    @property
    def relation_names(self) -> tuple[str, ...]:
        return tuple(r.name for r in self.relations)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "properties": list(self.properties),
                "fillable": list(self.fillable),
                "hidden": list(self.hidden),
                "relations": {r.name: r.to_dict() for r in self.relations},
            }
        )
        return data


@dataclass(frozen=True)
class ControllerRef:
    """The action a route is bound to.

    A route bound to a closure has no ``class_name``.
    """

    class_name: str | None = None
    method: str | None = None

    @property
    def is_closure(self) -> bool:
        return self.class_name is None

    @property
    def display(self) -> str:
        if self.class_name is None:
            return CLOSURE_MARKER
        if self.method:
            return f"{self.class_name}@{self.method}"
        return self.class_name

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.class_name,
            "method": self.method,
            "closure": self.is_closure,
        }


@dataclass(frozen=True)
class ControllerPattern:
    """A controller filter value: a class pattern plus an optional method.

    The class pattern may contain wildcards; the method name is compared
    exactly.
    """

    class_pattern: str
    method: str | None = None

    @classmethod
    def parse(cls, value: str) -> "ControllerPattern":
        """Parse ``"Class"``, ``"Class, method"`` or ``"Class@method"``.

        Only the first separator splits; surrounding whitespace is dropped.
        An empty method part means "any method".

        Examples:
            >>> ControllerPattern.parse("PostController, index")
            ControllerPattern(class_pattern='PostController', method='index')
        """
        for separator in CONTROLLER_METHOD_SEPARATORS:
            if separator in value:
                class_part, method_part = value.split(separator, 1)
                return cls(class_part.strip(), method_part.strip() or None)
        return cls(value.strip())

    def __str__(self) -> str:
        if self.method:
            return f"{self.class_pattern}@{self.method}"
        return self.class_pattern


@dataclass(frozen=True)
class RouteEntity:
    """An HTTP route. ``name`` may be unset."""

    uri: str
    methods: tuple[str, ...]
    controller: ControllerRef = ControllerRef()
    name: str | None = None
    middleware: tuple[str, ...] = ()
    parameters: tuple[str, ...] = ()

    @property
    def kind(self) -> EntityKind:
        return EntityKind.ROUTE

    @property
    def identity(self) -> tuple[str, str]:
        return ("|".join(self.methods), self.uri)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "uri": self.uri,
            "methods": list(self.methods),
            "action": self.controller.display,
            "controller": self.controller.to_dict(),
            "middleware": list(self.middleware),
            "parameters": list(self.parameters),
        }


@dataclass(frozen=True)
class ViewEntity:
    """A template addressed by a namespaced dotted path.

    ``references`` holds the names of views this one includes or invokes as
    components, exactly as written in the template.
    """

    name: str
    references: tuple[str, ...] = ()
    file: str | None = None

    @property
    def kind(self) -> EntityKind:
        return EntityKind.VIEW

    @property
    def identity(self) -> str:
        return self.name

    @property
    def namespace(self) -> str | None:
        if VIEW_NAMESPACE_SEPARATOR in self.name:
            return self.name.split(VIEW_NAMESPACE_SEPARATOR, 1)[0]
        return None

    @property
    def path(self) -> str:
        """Dotted path without the namespace prefix."""
        if VIEW_NAMESPACE_SEPARATOR in self.name:
            return self.name.split(VIEW_NAMESPACE_SEPARATOR, 1)[1]
        return self.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "file": self.file,
            "references": list(self.references),
        }


Entity = Union[ClassEntity, ModelEntity, RouteEntity, ViewEntity]
