"""Mailchimp CLI - Mailchimp Marketing API access through a host-managed credential.

The API key is never visible to this package: the host token store decides
whether the credential exists and the host transport injects it into each
request.

Library Usage:
    >>> from mailchimp_cli import MailchimpClient, HostTokenStore, HostTransport
    >>>
    >>> store = HostTokenStore.from_files("~/.pave/permissions.yaml", "~/.pave/tokens.yaml")
    >>> client = MailchimpClient("us21", store, HostTransport(store))
    >>> member = client.get_member("b4cd77f0a4", "user@example.com")
    >>> print(member["status"])

CLI Usage:
    $ mailchimp ping --dc us21
    $ mailchimp member b4cd77f0a4 user@example.com --dc us21
    $ mailchimp report abc123 --dc us21 --clicks --opens --json
"""

__version__ = "0.1.0"

# Core
from mailchimp_cli.core.client import MailchimpClient
from mailchimp_cli.core.config import Config
from mailchimp_cli.core.digest import identity_key, md5_hex
from mailchimp_cli.core.exceptions import (
    MailchimpError,
    ConfigurationError,
    RequestError,
    TransportError,
    ValidationError,
)
from mailchimp_cli.core.query import encode_query

# Models
from mailchimp_cli.models.member import NewMember
from mailchimp_cli.models.results import (
    RequestResult,
    CampaignDetails,
    CampaignReportDetails,
)

# Host
from mailchimp_cli.host import HostTokenStore, HostTransport

__all__ = [
    # Version
    "__version__",
    # Core
    "MailchimpClient",
    "Config",
    "identity_key",
    "md5_hex",
    "encode_query",
    "MailchimpError",
    "ConfigurationError",
    "RequestError",
    "TransportError",
    "ValidationError",
    # Models
    "NewMember",
    "RequestResult",
    "CampaignDetails",
    "CampaignReportDetails",
    # Host
    "HostTokenStore",
    "HostTransport",
]
