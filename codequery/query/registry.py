"""Filter category registry.

Each entity kind has a closed table of named filter categories. A category
is a declared descriptor: which attribute it reads, how a filter value is
compared against that attribute, whether matches are included or
excluded, and whether its values combine with OR or AND. One generic
engine evaluates all of them.

Categories come in symmetric sets of four per attribute::

    implements_interfaces_or          doesnt_implement_interfaces_or
    implements_interfaces_and         doesnt_implement_interfaces_and

The OR and AND variants are separate categories, so a caller may use both
at once; they are ANDed together like any two categories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable, Iterable, Iterator, Sequence

from codequery.patterns import equals_any, matches, matches_any
from codequery.query.combinator import CombinatorMode, combine, no_constraint
from codequery.types.entities import ControllerPattern, ControllerRef, EntityKind
from codequery.types.errors import UnknownFilterError


class Polarity(StrEnum):
    """Whether a category keeps or drops the entities it matches."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


class Comparison(StrEnum):
    """How one filter value is compared against an attribute's values."""

    WILDCARD = "wildcard"
    EXACT = "exact"
    CONTROLLER = "controller"


def _wildcard(candidates: Sequence[str], pattern: str) -> bool:
    return matches_any(pattern, candidates)


def _exact(candidates: Sequence[str], value: str) -> bool:
    return equals_any(value, candidates)


def _controller(candidates: Sequence[ControllerRef], pattern: ControllerPattern) -> bool:
    for ref in candidates:
        if ref.is_closure:
            continue
        if not matches(pattern.class_pattern, ref.class_name):
            continue
        if pattern.method is None or pattern.method == ref.method:
            return True
    return False


_COMPARATORS: dict[Comparison, Callable[[Sequence[Any], Any], bool]] = {
    Comparison.WILDCARD: _wildcard,
    Comparison.EXACT: _exact,
    Comparison.CONTROLLER: _controller,
}


@dataclass(frozen=True)
class FilterCategory:
    """A single named filter input."""

    name: str
    kind: EntityKind
    attribute: str
    comparison: Comparison
    polarity: Polarity
    mode: CombinatorMode
    description: str = ""

    def parse_values(self, values: Iterable[Any]) -> tuple[Any, ...]:
        """Normalize raw caller values for this category's comparison."""
        if self.comparison is Comparison.CONTROLLER:
            return tuple(
                v if isinstance(v, ControllerPattern) else ControllerPattern.parse(str(v))
                for v in values
            )
        return tuple(str(v) for v in values)

    def predicate(
        self,
        values: Sequence[Any],
        accessor: Callable[[Any], Sequence[Any]],
    ) -> Callable[[Any], bool]:
        """Build the entity predicate for ``values``.

        The combinator runs on the positive comparison; exclusion negates
        its result afterwards. Empty ``values`` never constrain.
        """
        parsed = self.parse_values(values)
        if not parsed:
            return no_constraint

        compare = _COMPARATORS[self.comparison]
        positive = combine(parsed, lambda entity, value: compare(accessor(entity), value), self.mode)
        if self.polarity is Polarity.INCLUDE:
            return positive

        def excluded(entity: Any) -> bool:
            return not positive(entity)

        return excluded

    def describe(self) -> dict[str, str]:
        """Serializable form, used by the filter listing tool and CLI."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "attribute": self.attribute,
            "comparison": self.comparison.value,
            "polarity": self.polarity.value,
            "mode": self.mode.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class AttributeFilters:
    """Declaration of the four categories filtering one attribute."""

    attribute: str
    include: str
    exclude: str
    comparison: Comparison
    noun: str

    def expand(self, kind: EntityKind) -> list[FilterCategory]:
        categories = []
        for polarity, base in ((Polarity.INCLUDE, self.include), (Polarity.EXCLUDE, self.exclude)):
            for mode in (CombinatorMode.OR, CombinatorMode.AND):
                categories.append(
                    FilterCategory(
                        name=f"{base}_{mode.value}",
                        kind=kind,
                        attribute=self.attribute,
                        comparison=self.comparison,
                        polarity=polarity,
                        mode=mode,
                        description=_describe(polarity, mode, self.noun, self.comparison),
                    )
                )
        return categories


def _describe(polarity: Polarity, mode: CombinatorMode, noun: str, comparison: Comparison) -> str:
    verb = "Includes" if polarity is Polarity.INCLUDE else "Excludes"
    quantifier = "ANY" if mode is CombinatorMode.OR else "ALL"
    if comparison is Comparison.EXACT:
        matching = "exact match only"
    elif comparison is Comparison.CONTROLLER:
        matching = "wildcards in the class, exact method after ',' or '@'"
    else:
        matching = "wildcards supported"
    return f"{verb} entities whose {noun} match {quantifier} of the values ({matching})."


@dataclass
class FilterRegistry:
    """The closed set of filter categories for one entity kind."""

    kind: EntityKind
    categories: dict[str, FilterCategory] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        kind: EntityKind,
        declarations: Iterable[AttributeFilters],
        bare_aliases: bool = False,
    ) -> "FilterRegistry":
        """Expand attribute declarations into a registry.

        With ``bare_aliases`` each category base name without a suffix is
        accepted as the OR variant (``uses`` for ``uses_or``).
        """
        registry = cls(kind)
        for declaration in declarations:
            for category in declaration.expand(kind):
                registry.categories[category.name] = category
            if bare_aliases:
                registry.aliases[declaration.include] = f"{declaration.include}_or"
                registry.aliases[declaration.exclude] = f"{declaration.exclude}_or"
        return registry

    def __contains__(self, name: object) -> bool:
        return name in self.categories or name in self.aliases

    def __iter__(self) -> Iterator[FilterCategory]:
        return iter(self.categories.values())

    def __len__(self) -> int:
        return len(self.categories)

    def names(self) -> list[str]:
        return list(self.categories) + list(self.aliases)

    def get(self, name: str) -> FilterCategory:
        """Look up a category by name or alias.

        Raises:
            UnknownFilterError: If ``name`` is not registered for this kind.
        """
        canonical = self.aliases.get(name, name)
        try:
            return self.categories[canonical]
        except KeyError:
            raise UnknownFilterError(name, self.kind.value, self.names()) from None

    def describe(self) -> list[dict[str, str]]:
        return [category.describe() for category in self]


_CLASS_FILTERS = [
    AttributeFilters("name", "name_equals", "name_doesnt_equal", Comparison.WILDCARD, "fully qualified name"),
    AttributeFilters(
        "interfaces",
        "implements_interfaces",
        "doesnt_implement_interfaces",
        Comparison.WILDCARD,
        "implemented interfaces",
    ),
    AttributeFilters("traits", "uses_traits", "doesnt_use_traits", Comparison.WILDCARD, "used traits"),
    AttributeFilters(
        "parents", "extends_classes", "doesnt_extend_classes", Comparison.WILDCARD, "parent classes"
    ),
]

_MODEL_FILTERS = _CLASS_FILTERS + [
    AttributeFilters(
        "properties", "has_properties", "doesnt_have_properties", Comparison.EXACT, "properties"
    ),
    AttributeFilters(
        "fillable",
        "has_fillable_properties",
        "doesnt_have_fillable_properties",
        Comparison.EXACT,
        "fillable properties",
    ),
    AttributeFilters(
        "hidden",
        "has_hidden_properties",
        "doesnt_have_hidden_properties",
        Comparison.EXACT,
        "hidden properties",
    ),
    AttributeFilters("relations", "has_relations", "doesnt_have_relations", Comparison.EXACT, "relations"),
]

_ROUTE_FILTERS = [
    AttributeFilters("name", "name_equals", "name_doesnt_equal", Comparison.WILDCARD, "route name"),
    AttributeFilters("uri", "path_equals", "path_doesnt_equal", Comparison.WILDCARD, "URI"),
    AttributeFilters(
        "controller", "uses_controller", "doesnt_use_controller", Comparison.CONTROLLER, "controller"
    ),
    AttributeFilters(
        "middleware", "uses_middleware", "doesnt_use_middleware", Comparison.EXACT, "middleware"
    ),
    AttributeFilters(
        "parameters", "has_parameter", "doesnt_have_parameter", Comparison.EXACT, "path parameters"
    ),
]

_VIEW_FILTERS = [
    AttributeFilters("name", "name_equals", "name_doesnt_equal", Comparison.WILDCARD, "view name"),
    AttributeFilters("uses", "uses", "doesnt_use", Comparison.WILDCARD, "used views"),
    AttributeFilters("used_by", "used_by", "not_used_by", Comparison.WILDCARD, "referring views"),
]

REGISTRIES: dict[EntityKind, FilterRegistry] = {
    EntityKind.CLASS: FilterRegistry.build(EntityKind.CLASS, _CLASS_FILTERS),
    EntityKind.MODEL: FilterRegistry.build(EntityKind.MODEL, _MODEL_FILTERS),
    EntityKind.ROUTE: FilterRegistry.build(EntityKind.ROUTE, _ROUTE_FILTERS),
    EntityKind.VIEW: FilterRegistry.build(EntityKind.VIEW, _VIEW_FILTERS, bare_aliases=True),
}


def get_registry(kind: EntityKind | str) -> FilterRegistry:
    """Return the filter registry for an entity kind."""
    return REGISTRIES[EntityKind(kind)]
