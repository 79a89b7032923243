"""Core infrastructure for the Mailchimp CLI."""

from mailchimp_cli.core.client import MailchimpClient
from mailchimp_cli.core.config import Config
from mailchimp_cli.core.digest import identity_key, md5_hex, normalize_email
from mailchimp_cli.core.exceptions import (
    MailchimpError,
    ConfigurationError,
    RequestError,
    TransportError,
    ValidationError,
)
from mailchimp_cli.core.query import encode_query, with_query

__all__ = [
    "MailchimpClient",
    "Config",
    "identity_key",
    "md5_hex",
    "normalize_email",
    "MailchimpError",
    "ConfigurationError",
    "RequestError",
    "TransportError",
    "ValidationError",
    "encode_query",
    "with_query",
]
