"""Utility modules for the Mailchimp CLI."""

from mailchimp_cli.utils.extraction import safe_get
from mailchimp_cli.utils.formatting import (
    collect_search_members,
    format_campaign,
    format_list,
    format_member,
    format_tag,
)
from mailchimp_cli.utils.sanitization import redact_headers, redact_sensitive_data, sanitize_input

__all__ = [
    "safe_get",
    "collect_search_members",
    "format_campaign",
    "format_list",
    "format_member",
    "format_tag",
    "redact_headers",
    "redact_sensitive_data",
    "sanitize_input",
]
