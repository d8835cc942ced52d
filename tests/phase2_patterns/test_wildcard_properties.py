"""Hypothesis property-based tests for the wildcard matcher.

Properties tested:
- Totality: matching never raises for any pattern and value
- Literal identity: a pattern without '*' matches itself and nothing longer
- Universal star: '*' matches every string
- Prefix/suffix: 'p*' and '*s' match exactly startswith/endswith
- Embedding: any value matches the pattern built by replacing parts of it with '*'
"""

from hypothesis import given
from hypothesis import strategies as st

from codequery.patterns import matches

# Identifier-ish text: letters, digits and the separators entity names use
name_text = st.text(
    alphabet=st.sampled_from("abcXYZ019\\.:_-/{}"),
    max_size=20,
)
literal_text = name_text
pattern_text = st.text(alphabet=st.sampled_from("ab*\\."), max_size=12)


@given(pattern=pattern_text, value=name_text)
def test_matching_is_total(pattern, value):
    assert matches(pattern, value) in (True, False)


@given(literal=literal_text)
def test_literal_matches_itself(literal):
    assert matches(literal, literal) is True


@given(literal=literal_text, extra=st.text(alphabet="xyz", min_size=1, max_size=5))
def test_literal_rejects_longer_value(literal, extra):
    assert matches(literal, literal + extra) is False


@given(value=name_text)
def test_star_matches_everything(value):
    assert matches("*", value) is True


@given(prefix=literal_text, value=name_text)
def test_prefix_pattern(prefix, value):
    assert matches(prefix + "*", value) == value.startswith(prefix)


@given(suffix=literal_text, value=name_text)
def test_suffix_pattern(suffix, value):
    assert matches("*" + suffix, value) == value.endswith(suffix)


@given(
    parts=st.lists(literal_text, min_size=1, max_size=5),
    keep=st.lists(st.booleans(), min_size=5, max_size=5),
)
def test_value_matches_its_own_generalization(parts, keep):
    """Replacing any parts of a value by '*' yields a pattern that matches it."""
    value = "".join(parts)
    pattern = "".join(part if keep[i] else "*" for i, part in enumerate(parts))
    assert matches(pattern, value) is True
