"""Input sanitization and log redaction utilities for the Mailchimp CLI."""

from typing import Any

REDACTED = "***REDACTED***"

SENSITIVE_KEYS = {"api_key", "apikey", "password", "secret", "token", "credential", "auth"}


def sanitize_input(text: str | None, max_len: int = 2000) -> str:
    """Strip control characters from user input and cap its length.

    Args:
        text: Input text to sanitize
        max_len: Maximum allowed length (default 2000)

    Returns:
        Sanitized string
    """
    if not text:
        return ""

    text = str(text)

    # Remove control characters except newlines and tabs
    text = "".join(char for char in text if char >= " " or char in "\n\t")

    return text[:max_len]


def redact_sensitive_data(
    data: dict,
    sensitive_keys: set[str] | None = None,
) -> dict:
    """Redact sensitive values from a dictionary for safe logging.

    Args:
        data: Dictionary to redact
        sensitive_keys: Set of key substrings to redact. Defaults to common sensitive keys.

    Returns:
        New dictionary with sensitive values replaced with "***REDACTED***"
    """
    if sensitive_keys is None:
        sensitive_keys = SENSITIVE_KEYS

    if not isinstance(data, dict):
        return data

    redacted = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if any(sk in key_lower for sk in sensitive_keys):
            redacted[key] = REDACTED
        elif isinstance(value, dict):
            redacted[key] = redact_sensitive_data(value, sensitive_keys)
        elif isinstance(value, list):
            redacted[key] = [
                redact_sensitive_data(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            redacted[key] = value

    return redacted


def redact_headers(headers: dict[str, Any] | None, extra: set[str] | None = None) -> dict[str, Any]:
    """Redact credential-bearing HTTP headers.

    Args:
        headers: Request headers
        extra: Additional header names (case-insensitive) to redact,
            e.g. the header a placement rule writes the token into

    Returns:
        Copy of the headers safe for logging
    """
    if not headers:
        return {}

    extra_lower = {name.lower() for name in (extra or set())}
    redacted = redact_sensitive_data(dict(headers))
    for key in redacted:
        if key.lower() in extra_lower:
            redacted[key] = REDACTED
    return redacted
