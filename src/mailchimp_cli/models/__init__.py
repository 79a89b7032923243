"""Data models for the Mailchimp CLI."""

from mailchimp_cli.models.member import MEMBER_STATUSES, NewMember
from mailchimp_cli.models.results import CampaignDetails, CampaignReportDetails, RequestResult

__all__ = [
    "MEMBER_STATUSES",
    "NewMember",
    "CampaignDetails",
    "CampaignReportDetails",
    "RequestResult",
]
