"""
Phase 2 Tests: Wildcard Matcher

Tests for the wildcard pattern matcher:
- Literal patterns
- Prefix, suffix and infix wildcards
- Non-overlapping segments
- Literal treatment of regex metacharacters
"""

import pytest

from codequery.patterns import (
    WildcardPattern,
    compile_pattern,
    equals_any,
    matches,
    matches_any,
)


class TestLiteralPatterns:
    """Patterns without '*' compare whole strings."""

    def test_identical(self):
        assert matches("App\\Models\\User", "App\\Models\\User") is True

    def test_longer_value(self):
        assert matches("App\\Models\\User", "App\\Models\\UserProfile") is False

    def test_case_sensitive(self):
        assert matches("web", "Web") is False

    def test_empty_pattern(self):
        assert matches("", "") is True
        assert matches("", "a") is False


class TestWildcardPatterns:
    """Patterns with '*'."""

    @pytest.mark.parametrize("value", ["", "a", "App\\Models\\User", "pages.home"])
    def test_star_matches_everything(self, value):
        assert matches("*", value) is True

    def test_examples(self):
        assert matches("a*b", "aXXb") is True
        assert matches("a*b", "ab") is True
        assert matches("a*b", "ba") is False

    def test_prefix(self):
        assert matches("App\\Http\\Controllers\\*", "App\\Http\\Controllers\\Admin\\UserController")
        assert not matches("App\\Http\\Controllers\\*", "App\\Models\\User")

    def test_suffix(self):
        assert matches("*Controller", "App\\Http\\Controllers\\PostController")
        assert not matches("*Controller", "App\\Http\\Controllers\\PostControllerTest")

    def test_infix(self):
        assert matches("components*button", "components.ui.button")
        assert matches("*button*", "filament::components.button.index")

    def test_middle_segments_in_order(self):
        assert matches("a*b*c", "a1b2c")
        assert not matches("a*c*b", "a1b2c")

    def test_segments_do_not_overlap(self):
        assert not matches("ab*ba", "aba")
        assert matches("ab*ba", "abba")
        assert not matches("a*a", "a")

    def test_middle_cannot_reuse_suffix(self):
        assert not matches("*x*x", "x")
        assert matches("*x*x", "xx")

    def test_repeated_stars(self):
        assert matches("a**b", "ab")
        assert matches("**", "")

    def test_namespaced_views(self):
        assert matches("filament::*", "filament::components.button")
        assert matches("*::components*", "filament::components.modal")
        assert not matches("filament::*", "pages.home")


class TestMetacharacters:
    """Only '*' is special."""

    @pytest.mark.parametrize(
        "pattern,value",
        [
            ("pages.home", "pagesXhome"),
            ("a+b", "aab"),
            ("[ab]", "a"),
            ("a?", "a"),
            ("^a$", "a"),
        ],
    )
    def test_not_regex(self, pattern, value):
        assert matches(pattern, value) is False
        assert matches(pattern, pattern) is True

    def test_backslashes_are_literal(self):
        assert matches("App\\*\\User", "App\\Models\\User")
        assert not matches("App\\*\\User", "App/Models/User")


class TestNoneValue:
    """Unset attributes never match."""

    def test_none(self):
        assert matches("*", None) is False
        assert matches("home", None) is False
        assert compile_pattern("a*").matches(None) is False


class TestCompiledPattern:
    """Tests for WildcardPattern."""

    def test_split(self):
        pattern = WildcardPattern.from_string("a*b**c*d")
        assert pattern.prefix == "a"
        assert pattern.middle == ("b", "c")
        assert pattern.suffix == "d"
        assert not pattern.is_literal

    def test_literal(self):
        pattern = WildcardPattern.from_string("pages.home")
        assert pattern.is_literal
        assert pattern.matches("pages.home")

    def test_cache_returns_same_object(self):
        assert compile_pattern("App\\*") is compile_pattern("App\\*")


class TestHelpers:
    """Tests for matches_any / equals_any."""

    def test_matches_any(self):
        assert matches_any("*Notifiable", ["HasFactory", "Illuminate\\Notifications\\Notifiable"])
        assert not matches_any("*Notifiable", [])

    def test_equals_any_is_exact(self):
        assert equals_any("auth", ["web", "auth"])
        assert not equals_any("auth", ["auth:sanctum"])
        assert not equals_any("auth*", ["auth"])
