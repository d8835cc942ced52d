"""Wildcard pattern matching.

A pattern is a plain string in which ``*`` stands for zero or more
characters of any kind, separators included. Every other character is
literal and comparison is case-sensitive. Patterns are anchored at both
ends, so a pattern without ``*`` only matches an identical string.

Any string is a valid pattern, so matching never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

WILDCARD = "*"


@dataclass(frozen=True)
class WildcardPattern:
    """A pattern split into its literal segments.

    ``prefix`` must start the value, ``suffix`` must end it, and ``middle``
    segments must appear in order in the span between them without
    overlapping each other or the anchors.
    """

    pattern: str
    prefix: str
    middle: tuple[str, ...]
    suffix: str

    @classmethod
    def from_string(cls, pattern: str) -> "WildcardPattern":
        segments = pattern.split(WILDCARD)
        if len(segments) == 1:
            # Literal; matches() compares it whole
            return cls(pattern, pattern, (), "")
        return cls(
            pattern=pattern,
            prefix=segments[0],
            middle=tuple(s for s in segments[1:-1] if s),
            suffix=segments[-1],
        )

    @property
    def is_literal(self) -> bool:
        return WILDCARD not in self.pattern

    def matches(self, value: str | None) -> bool:
        """Check whether ``value`` matches this pattern."""
        if value is None:
            return False
        if self.is_literal:
            return value == self.pattern

        start = len(self.prefix)
        end = len(value) - len(self.suffix)
        if end < start:
            return False
        if not value.startswith(self.prefix) or not value.endswith(self.suffix):
            return False

        position = start
        for segment in self.middle:
            found = value.find(segment, position, end)
            if found == -1:
                return False
            position = found + len(segment)
        return True


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> WildcardPattern:
    """Compile and cache a pattern string."""
    return WildcardPattern.from_string(pattern)


def matches(pattern: str, value: str | None) -> bool:
    """Match a single value against a wildcard pattern.

    Args:
        pattern: Pattern text; ``*`` is the only special character.
        value: Value to test. ``None`` (an unset attribute) never matches.

    Returns:
        True if the whole value matches the pattern.

    Examples:
        >>> matches("App\\\\Http\\\\*", "App\\\\Http\\\\UserController")
        True
        >>> matches("a*b", "ba")
        False
    """
    if value is None:
        return False
    if WILDCARD not in pattern:
        return pattern == value
    return compile_pattern(pattern).matches(value)


def matches_any(pattern: str, values) -> bool:
    """Check whether any of ``values`` matches ``pattern``."""
    return any(matches(pattern, value) for value in values)


def equals_any(expected: str, values) -> bool:
    """Exact-membership counterpart of :func:`matches_any`."""
    return expected in values
