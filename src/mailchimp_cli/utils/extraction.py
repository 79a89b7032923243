"""Data extraction utilities for the Mailchimp CLI."""

from typing import Any


def safe_get(data: dict[str, Any] | None, *keys: str, default: Any = None) -> Any:
    """Safely get a nested value from a dictionary.

    Args:
        data: Dictionary to traverse
        *keys: Keys to follow in order
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    current: Any = data
    for key in keys:
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current
