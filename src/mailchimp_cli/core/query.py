"""Deterministic query string construction."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

# Characters left unescaped, matching encodeURIComponent.
_SAFE_CHARS = "-_.!~*'()"


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def _encode_component(value: Any) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return quote(str(value), safe=_SAFE_CHARS)


def encode_query(params: Mapping[str, Any] | None) -> str:
    """Serialize query parameters in insertion order.

    Entries whose value is ``None`` or an empty string are omitted.

    Args:
        params: Mapping of parameter name to scalar value

    Returns:
        ``key=value`` pairs joined by ``&`` (empty string if nothing remains)
    """
    if not params:
        return ""

    return "&".join(
        f"{_encode_component(key)}={_encode_component(value)}"
        for key, value in params.items()
        if not _is_absent(value)
    )


def with_query(path: str, params: Mapping[str, Any] | None) -> str:
    """Append encoded query parameters to a path, if there are any."""
    query_string = encode_query(params)
    if not query_string:
        return path
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{query_string}"
