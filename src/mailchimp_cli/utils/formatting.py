"""Display formatters for Mailchimp API payloads.

Pure functions: each takes a decoded payload dict and returns a flat dict
with camelCase keys suitable for JSON output or terminal rendering.
"""

from typing import Any

from mailchimp_cli.utils.extraction import safe_get


def format_member(member: dict[str, Any]) -> dict[str, Any]:
    """Format a list member for display."""
    first_name = safe_get(member, "merge_fields", "FNAME") or ""
    last_name = safe_get(member, "merge_fields", "LNAME") or ""
    full_name = f"{first_name} {last_name}".strip()

    return {
        "id": member.get("id"),
        "email": member.get("email_address"),
        "status": member.get("status"),
        "fullName": full_name or None,
        "firstName": first_name or None,
        "lastName": last_name or None,
        "mergeFields": member.get("merge_fields") or {},
        "tags": [t.get("name") for t in member.get("tags") or []],
        "subscribed": member.get("timestamp_opt"),
        "lastChanged": member.get("last_changed"),
        "source": member.get("source"),
        "listId": member.get("list_id"),
    }


def format_campaign(campaign: dict[str, Any]) -> dict[str, Any]:
    """Format a campaign for display."""
    settings = campaign.get("settings") or {}
    recipients = campaign.get("recipients") or {}
    summary = campaign.get("report_summary") or {}

    return {
        "id": campaign.get("id"),
        "webId": campaign.get("web_id"),
        "type": campaign.get("type"),
        "status": campaign.get("status"),
        "title": settings.get("title") or "(no title)",
        "subject": settings.get("subject_line") or "(no subject)",
        "previewText": settings.get("preview_text") or None,
        "fromName": settings.get("from_name"),
        "replyTo": settings.get("reply_to"),
        "listId": recipients.get("list_id"),
        "listName": recipients.get("list_name"),
        "sendTime": campaign.get("send_time"),
        "createTime": campaign.get("create_time"),
        "emailsSent": campaign.get("emails_sent") or 0,
        "opens": summary.get("opens") or 0,
        "uniqueOpens": summary.get("unique_opens") or 0,
        "openRate": summary.get("open_rate") or 0,
        "clicks": summary.get("clicks") or 0,
        "subscriberClicks": summary.get("subscriber_clicks") or 0,
        "clickRate": summary.get("click_rate") or 0,
    }


def format_list(audience: dict[str, Any]) -> dict[str, Any]:
    """Format a list (audience) for display."""
    stats = audience.get("stats") or {}

    return {
        "id": audience.get("id"),
        "webId": audience.get("web_id"),
        "name": audience.get("name"),
        "contact": audience.get("contact"),
        "memberCount": stats.get("member_count") or 0,
        "unsubscribeCount": stats.get("unsubscribe_count") or 0,
        "cleanedCount": stats.get("cleaned_count") or 0,
        "campaignCount": stats.get("campaign_count") or 0,
        "lastSub": stats.get("last_sub_date"),
        "lastUnsub": stats.get("last_unsub_date"),
        "lastCampaign": stats.get("campaign_last_sent"),
        "openRate": stats.get("open_rate") or 0,
        "clickRate": stats.get("click_rate") or 0,
        "dateCreated": audience.get("date_created"),
    }


def format_tag(segment: dict[str, Any]) -> dict[str, Any]:
    """Format a static segment (tag) for display."""
    return {
        "id": segment.get("id"),
        "name": segment.get("name"),
        "memberCount": segment.get("member_count"),
        "createdAt": segment.get("created_at"),
        "updatedAt": segment.get("updated_at"),
    }


def collect_search_members(result: dict[str, Any]) -> list[dict[str, Any]]:
    """Merge exact and full-search matches from a member search, exact first."""
    exact = safe_get(result, "exact_matches", "members") or []
    full = safe_get(result, "full_search", "members") or []
    return [*exact, *full]


def percent(rate: float | int | None) -> str:
    """Render a 0..1 rate as a percentage with one decimal."""
    return f"{(rate or 0) * 100:.1f}%"
