"""URL-encoding of request parameters for query strings and form bodies."""

from __future__ import annotations

from typing import Mapping
from urllib.parse import quote

HttpParams = Mapping[str, str]
"""String-to-string parameter mapping. Keys are unique; order is irrelevant."""


def _escape(text: str) -> str:
    # quote() leaves only A-Za-z0-9 and "-_.~" unescaped when safe is empty.
    return quote(text, safe="", encoding="utf-8")


def serialize(params: HttpParams) -> str:
    """Serialize *params* into ``k1=v1&k2=v2`` form.

    Keys and values are percent-encoded (UTF-8 first), pairs are emitted in
    sorted key order so the same mapping always yields the same string.

    Args:
        params: The parameters to encode.

    Returns:
        The encoded string, or ``""`` for an empty mapping.
    """
    return "&".join(
        f"{_escape(key)}={_escape(params[key])}" for key in sorted(params)
    )


def build_query_url(base: str, params: HttpParams) -> str:
    """Append *params* to *base* as a query string.

    Args:
        base: URL without a query component.
        params: Query parameters.

    Returns:
        *base* unchanged when *params* is empty, otherwise
        ``base + "?" + serialize(params)``.
    """
    if not params:
        return base
    return f"{base}?{serialize(params)}"
