"""Query string decoding."""

import re
from typing import Dict, Optional
from urllib.parse import unquote_plus

# A '%' that does not start a two-digit hex escape
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _decode(component: str) -> str:
    if _BAD_ESCAPE.search(component):
        raise ValueError(f"Malformed percent-encoding: {component!r}")
    return unquote_plus(component, encoding="utf-8", errors="strict")


def parse_query(query: Optional[str]) -> Dict[str, str]:
    """
    Decode a raw query string into a mapping of parameter names to values.

    Pairs are split on the first ``=``; a pair without ``=`` maps to an
    empty string. Pairs whose key or value is not valid percent-encoded
    UTF-8 are dropped. When a key repeats, the last occurrence wins.

    Args:
        query: Raw (still percent-encoded) query string, may be None

    Returns:
        Dict of decoded parameter names to decoded values
    """
    params: Dict[str, str] = {}
    if not query:
        return params

    for pair in query.split("&"):
        if not pair:
            continue
        raw_key, _, raw_value = pair.partition("=")
        try:
            key = _decode(raw_key)
            value = _decode(raw_value)
        except ValueError:
            # UnicodeDecodeError is a ValueError too
            continue
        params[key] = value

    return params
