"""Combine one per-value test over a list of filter values.

The combinator only knows about positive tests. Exclusion is applied by
the filter category on top of the combined result, so exclude-OR reads
"exclude if ANY value matches" and exclude-AND reads "exclude only if ALL
values match".
"""

from __future__ import annotations

from enum import StrEnum
from typing import Callable, Sequence, TypeVar

E = TypeVar("E")
V = TypeVar("V")

Predicate = Callable[[E], bool]


class CombinatorMode(StrEnum):
    """How the values of a single filter category combine."""

    OR = "or"
    AND = "and"


def no_constraint(entity: object) -> bool:
    """Predicate of an empty category: matches everything."""
    return True


def combine(
    values: Sequence[V],
    test: Callable[[E, V], bool],
    mode: CombinatorMode,
) -> Callable[[E], bool]:
    """Build a predicate over entities from a value list and a per-value test.

    Args:
        values: Caller-supplied filter values, in order.
        test: ``test(entity, value)`` decides whether one value holds for
            an entity.
        mode: OR needs one satisfied value, AND needs all of them.

    Returns:
        A predicate. With no values it is :func:`no_constraint` in both
        modes, never a predicate that rejects everything.
    """
    frozen = tuple(values)
    if not frozen:
        return no_constraint

    if mode is CombinatorMode.OR:
        def any_value(entity: E) -> bool:
            return any(test(entity, value) for value in frozen)

        return any_value

    def all_values(entity: E) -> bool:
        return all(test(entity, value) for value in frozen)

    return all_values
