"""Host-side credential store and authenticated transport."""

from mailchimp_cli.host.tokens import HostTokenStore, PlacementRule, TokenSlot
from mailchimp_cli.host.transport import HostResponse, HostTransport

__all__ = [
    "HostResponse",
    "HostTokenStore",
    "HostTransport",
    "PlacementRule",
    "TokenSlot",
]
