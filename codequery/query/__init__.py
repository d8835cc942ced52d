"""Filter composition engine.

Components:
- combine: OR / AND combination of one test over a value list
- accessors_for: per-kind attribute accessors
- FilterRegistry / get_registry: declared filter categories per kind
- Query / new_query: applies categories to a corpus (AND across categories)
- UsageGraph: one-hop view usage resolution with index aliasing
- format_results: count message plus keyed or ordered descriptions
"""

from .accessors import (
    ClassAccessors,
    ModelAccessors,
    RouteAccessors,
    ViewAccessors,
    accessors_for,
)
from .builder import Query, new_query
from .combinator import CombinatorMode, combine, no_constraint
from .formatter import QueryResult, format_results
from .registry import (
    REGISTRIES,
    AttributeFilters,
    Comparison,
    FilterCategory,
    FilterRegistry,
    Polarity,
    get_registry,
)
from .usage_graph import UsageGraph, view_alias, view_name_candidates

__all__ = [
    "ClassAccessors",
    "ModelAccessors",
    "RouteAccessors",
    "ViewAccessors",
    "accessors_for",
    "Query",
    "new_query",
    "CombinatorMode",
    "combine",
    "no_constraint",
    "QueryResult",
    "format_results",
    "REGISTRIES",
    "AttributeFilters",
    "Comparison",
    "FilterCategory",
    "FilterRegistry",
    "Polarity",
    "get_registry",
    "UsageGraph",
    "view_alias",
    "view_name_candidates",
]
