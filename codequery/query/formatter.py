"""Format query results for tool responses.

Class and model results are keyed by fully qualified name; route and view
results are ordered lists. The message is "No {kind}s found." for an empty
result and "Found {N} {kind}s." otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from codequery.types.entities import Entity, EntityKind

Describer = Callable[[Entity], dict[str, Any]]

_KEYED_KINDS = frozenset({EntityKind.CLASS, EntityKind.MODEL})


def _default_describe(entity: Entity) -> dict[str, Any]:
    return entity.to_dict()


@dataclass(frozen=True)
class QueryResult:
    """Matched entities of one kind, ready to be serialized."""

    kind: EntityKind
    entities: tuple[Entity, ...]
    describe: Describer = _default_describe

    @property
    def count(self) -> int:
        return len(self.entities)

    @property
    def message(self) -> str:
        if not self.entities:
            return f"No {self.kind.plural} found."
        return f"Found {self.count} {self.kind.plural}."

    @property
    def is_keyed(self) -> bool:
        return self.kind in _KEYED_KINDS

    def items(self) -> dict[str, dict[str, Any]] | list[dict[str, Any]]:
        """Structured descriptions of the matched entities."""
        if self.is_keyed:
            return {entity.name: self.describe(entity) for entity in self.entities}
        return [self.describe(entity) for entity in self.entities]

    def to_dict(self) -> dict[str, Any]:
        """Two-field record: ``message`` plus the collection under the plural kind."""
        return {"message": self.message, self.kind.plural: self.items()}


def format_results(
    kind: EntityKind | str,
    entities: Sequence[Entity],
    describe: Describer | None = None,
) -> QueryResult:
    """Wrap matched entities in a :class:`QueryResult`."""
    return QueryResult(
        kind=EntityKind(kind),
        entities=tuple(entities),
        describe=describe or _default_describe,
    )
