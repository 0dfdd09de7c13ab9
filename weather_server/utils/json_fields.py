"""Targeted numeric field extraction from upstream JSON bodies.

This is a substring scan, not a JSON parser. It does not know about
nesting, string escaping or which object a field belongs to: the first
``"<field>":`` anywhere in the text wins, including one nested inside an
unrelated object or embedded in a string value.
"""

from typing import Optional

_NUMBER_CHARS = frozenset("0123456789.-")
_SEPARATORS = frozenset(" :")


def extract_number(text: str, field: str) -> Optional[float]:
    """
    Find ``"<field>":`` in text and parse the number that follows it.

    Spaces and colons after the match are skipped, then the longest run of
    digits, dots and minus signs is parsed as a float.

    Args:
        text: Raw response body
        field: Field name without quotes, e.g. ``latitude``

    Returns:
        The parsed value, or None if the field is missing or the token is
        not a valid number
    """
    needle = f'"{field}":'
    idx = text.find(needle)
    if idx == -1:
        return None

    start = idx + len(needle)
    length = len(text)
    while start < length and text[start] in _SEPARATORS:
        start += 1

    end = start
    while end < length and text[end] in _NUMBER_CHARS:
        end += 1

    token = text[start:end]
    try:
        return float(token)
    except ValueError:
        return None
