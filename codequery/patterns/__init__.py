"""Wildcard pattern matching.

Usage:
    from codequery.patterns import matches

    matches("App\\Models\\*", "App\\Models\\User")  # True
    matches("*Controller", "UserController")       # True
    matches("web", "api")                          # False
"""

from .wildcard import (
    WILDCARD,
    WildcardPattern,
    compile_pattern,
    equals_any,
    matches,
    matches_any,
)

__all__ = [
    "WILDCARD",
    "WildcardPattern",
    "compile_pattern",
    "equals_any",
    "matches",
    "matches_any",
]
