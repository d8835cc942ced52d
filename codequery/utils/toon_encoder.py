"""TOON Encoder for MCP Responses.

TOON (Token-Oriented Object Notation) combines YAML-like indentation with
CSV-style tabular arrays. It saves tokens for flat arrays of uniform
objects and does worse than JSON once array elements contain arrays of
their own.

Query responses qualify only when their collection is a list of flat,
uniform records, so most class and route results stay JSON. The
structural check decides per response.

Usage:
    from codequery.utils.toon_encoder import ToonEncoder, is_structurally_toon_eligible

    encoder = ToonEncoder()
    if is_structurally_toon_eligible(response):
        output = encoder.encode(response)
"""

from typing import Any, Literal

from toon_format import decode as toon_decode
from toon_format import encode as toon_encode
from toon_format.types import EncodeOptions

# Minimum number of records in a list before TOON pays off
MIN_TABULAR_ROWS = 5


class ToonEncodingError(Exception):
    """Raised when TOON encoding fails."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


def has_nested_arrays(data: Any, max_depth: int = 3) -> bool:
    """Check if data contains nested arrays that break TOON efficiency.

    Examples:
        >>> has_nested_arrays({"views": [{"name": "a"}, {"name": "b"}]})
        False
        >>> has_nested_arrays({"routes": [{"uri": "/", "methods": ["GET"]}]})
        True
    """

    def check_value(value: Any, depth: int, in_array: bool) -> bool:
        if depth > max_depth:
            return False
        if isinstance(value, list):
            if in_array and len(value) > 0:
                return True
            return any(check_value(item, depth + 1, True) for item in value)
        if isinstance(value, dict):
            return any(check_value(v, depth + 1, in_array) for v in value.values())
        return False

    return check_value(data, 0, False)


def _is_uniform_records(items: list) -> bool:
    if not items or not all(isinstance(item, dict) for item in items):
        return False
    keys = set(items[0])
    return all(set(item) == keys for item in items)


def is_structurally_toon_eligible(
    data: Any,
    min_array_size: int = MIN_TABULAR_ROWS,
) -> bool:
    """Decide from its shape whether a response dict benefits from TOON.

    Eligible when some top-level list holds at least ``min_array_size``
    uniform records and nothing in the response nests arrays.
    """
    if not isinstance(data, dict) or has_nested_arrays(data):
        return False
    return any(
        isinstance(value, list)
        and len(value) >= min_array_size
        and _is_uniform_records(value)
        for value in data.values()
    )


class ToonEncoder:
    """Encoder for converting MCP responses to TOON format.

    Attributes:
        delimiter: The delimiter to use in tabular arrays (comma, tab, or pipe).
        indent: Number of spaces for indentation.
    """

    def __init__(
        self,
        delimiter: Literal[",", "\t", "|"] = ",",
        indent: int = 2,
    ):
        self.delimiter = delimiter
        self.indent = indent

    def encode(self, data: Any) -> str:
        """Encode data to TOON format.

        Raises:
            ToonEncodingError: If encoding fails.
        """
        try:
            options: EncodeOptions = {
                "delimiter": self.delimiter,
                "indent": self.indent,
            }
            return toon_encode(data, options=options)
        except Exception as e:
            raise ToonEncodingError(f"Failed to encode to TOON: {e}", e) from e

    def decode(self, toon_str: str) -> Any:
        """Decode TOON-formatted string back to Python data.

        Raises:
            ToonEncodingError: If decoding fails.
        """
        try:
            return toon_decode(toon_str)
        except Exception as e:
            raise ToonEncodingError(f"Failed to decode TOON: {e}", e) from e
