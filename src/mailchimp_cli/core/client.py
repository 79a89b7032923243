"""Mailchimp Marketing API client built on a host-injected credential."""

import json
import logging
import re
from typing import Any
from urllib.parse import quote

from mailchimp_cli.core.config import (
    API_DOMAIN_PATTERN,
    API_KEY_ENV,
    Config,
    credential_setup_hint,
)
from mailchimp_cli.core.digest import identity_key
from mailchimp_cli.core.exceptions import ConfigurationError, RequestError, ValidationError
from mailchimp_cli.core.query import with_query
from mailchimp_cli.core.transport import (
    AuthenticatedTransport,
    CredentialStore,
    TransportResponse,
)
from mailchimp_cli.models.member import NewMember
from mailchimp_cli.models.results import CampaignDetails, CampaignReportDetails, RequestResult
from mailchimp_cli.utils.sanitization import redact_headers

logger = logging.getLogger(__name__)

BASE_URL_TEMPLATE = "https://{datacenter}.api.mailchimp.com/3.0"

_DATACENTER_PATTERN = re.compile(r"^[a-z]+[0-9]+$")


def _segment(value: str) -> str:
    """Percent-encode a value for use as a single path segment."""
    return quote(str(value), safe="")


class MailchimpClient:
    """Client for the Mailchimp Marketing API.

    The client never holds the API key. It checks at construction time that
    the host has a credential for ``config.service_id`` and passes every
    request to the authenticated transport, which injects the key.

    Example:
        >>> client = MailchimpClient("us21", store, transport)
        >>> result = client.request("/lists")
        >>> if result.is_success:
        ...     print(result.payload["total_items"])
    """

    def __init__(
        self,
        datacenter: str,
        credential_store: CredentialStore,
        transport: AuthenticatedTransport,
        config: Config | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            datacenter: Account datacenter (e.g., "us21")
            credential_store: Host credential store to check for the API key
            transport: Host transport that performs authenticated requests
            config: Optional Config instance. If not provided, creates from environment.

        Raises:
            ValidationError: If the datacenter identifier is malformed
            ConfigurationError: If the credential is not configured on the host
        """
        self.config = config or Config.from_env()
        datacenter = (datacenter or "").strip().lower()

        if not _DATACENTER_PATTERN.match(datacenter):
            raise ValidationError(
                f"Invalid datacenter '{datacenter}'. Expected something like 'us21' "
                "(the part of the API key after the hyphen).",
                field="datacenter",
                value=datacenter,
            )

        service_id = self.config.service_id
        if not credential_store.has_credential(service_id):
            raise ConfigurationError(
                "Mailchimp token not configured",
                slot=service_id,
                hint=credential_setup_hint(service_id),
                details={
                    "slot": service_id,
                    "env": API_KEY_ENV,
                    "placement": "header",
                    "domains": [API_DOMAIN_PATTERN],
                },
            )

        self.datacenter = datacenter
        self.base_url = BASE_URL_TEMPLATE.format(datacenter=datacenter)
        self._transport = transport
        logger.debug(f"MailchimpClient initialized for datacenter {datacenter}")

    # =========================================================================
    # Request pipeline
    # =========================================================================

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        headers: dict[str, str] | None = None,
        timeout_ms: int | None = None,
    ) -> RequestResult:
        """Execute one API request and normalize its outcome.

        Args:
            path: API path relative to the base URL (e.g., "/lists"). A missing
                leading slash is added.
            method: HTTP method
            body: Request body. Dicts and lists are serialized as JSON.
            headers: Header overrides
            timeout_ms: Request timeout in milliseconds

        Returns:
            RequestResult holding the decoded payload or a RequestError
        """
        if not path.startswith("/"):
            path = f"/{path}"
        url = f"{self.base_url}{path}"
        request_headers = {"Content-Type": "application/json"}
        if headers:
            if any(name.lower() == "content-type" for name in headers):
                request_headers = {}
            request_headers.update(headers)

        if body is not None and not isinstance(body, str):
            body = json.dumps(body)

        timeout_ms = timeout_ms or self.config.default_timeout_ms

        logger.info(f"{method} {path}")
        logger.debug(f"Request headers: {self._redact(request_headers)}")

        try:
            response = self._transport.authenticated_request(
                self.config.service_id,
                url,
                method=method,
                headers=request_headers,
                body=body,
                timeout_ms=timeout_ms,
            )
        except Exception as e:
            logger.debug(f"{method} {path} failed without a response: {e}")
            return RequestResult.failure(
                RequestError(
                    str(e) or type(e).__name__,
                    raw_body={"error": str(e), "error_type": type(e).__name__},
                )
            )

        if not response.ok:
            error = self._build_error(response)
            logger.debug(f"{method} {path} failed: {error}")
            return RequestResult.failure(error)

        logger.debug(f"{method} {path} completed with status {response.status}")
        return self._decode_success(response)

    def call(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        headers: dict[str, str] | None = None,
        timeout_ms: int | None = None,
    ) -> Any:
        """Execute a request and return its payload.

        Raises:
            RequestError: If the request failed
        """
        return self.request(path, method, body, headers, timeout_ms).unwrap()

    def _redact(self, headers: dict[str, str]) -> dict[str, str]:
        """Redact secret-bearing headers for logging when enabled."""
        if not self.config.redact_sensitive:
            return headers
        return redact_headers(headers)

    def _decode_success(self, response: TransportResponse) -> RequestResult:
        try:
            return RequestResult.success(response.json())
        except ValueError:
            text = response.text()
            if not text.strip():
                return RequestResult.success({})
            return RequestResult.failure(
                RequestError(
                    "Invalid JSON response",
                    status=response.status,
                    raw_body={"detail": text},
                )
            )

    def _build_error(self, response: TransportResponse) -> RequestError:
        """Build a RequestError from a failed response.

        The body is decoded as an API problem document (``type``, ``title``,
        ``detail``); a body that is not a JSON object becomes ``{"detail": text}``.
        """
        try:
            error_data = response.json()
        except ValueError:
            error_data = None
        if not isinstance(error_data, dict):
            error_data = {"detail": response.text()}

        message = error_data.get("detail") or error_data.get("title") or f"HTTP {response.status}"
        return RequestError(
            str(message),
            status=response.status,
            error_type=error_data.get("type"),
            raw_body=error_data,
        )

    # =========================================================================
    # Account
    # =========================================================================

    def get_account_info(self) -> dict[str, Any]:
        """Get account info (also verifies the API key)."""
        return self.call("/")

    # =========================================================================
    # Lists / Audiences
    # =========================================================================

    def get_lists(self, count: int | None = None, offset: int | None = None) -> dict[str, Any]:
        """Get all lists/audiences."""
        return self.call(with_query("/lists", {"count": count, "offset": offset}))

    def get_list(self, list_id: str) -> dict[str, Any]:
        """Get a specific list/audience."""
        return self.call(f"/lists/{_segment(list_id)}")

    # =========================================================================
    # Members
    # =========================================================================

    def get_members(
        self,
        list_id: str,
        count: int | None = None,
        offset: int | None = None,
        status: str | None = None,
        since: str | None = None,
    ) -> dict[str, Any]:
        """Get members of a list.

        Args:
            list_id: List ID
            count: Number of records to return
            offset: Number of records to skip
            status: Filter by subscription status
            since: Only members who opted in after this ISO 8601 timestamp
        """
        params = {
            "count": count,
            "offset": offset,
            "status": status,
            "since_timestamp_opt": since,
        }
        return self.call(with_query(f"/lists/{_segment(list_id)}/members", params))

    def get_member(self, list_id: str, email: str) -> dict[str, Any]:
        """Get a specific member by email address."""
        return self.call(f"/lists/{_segment(list_id)}/members/{identity_key(email)}")

    def add_member(self, list_id: str, member: NewMember) -> dict[str, Any]:
        """Add a new member to a list.

        Raises:
            ValidationError: If the member data is invalid
            RequestError: If the API rejects the request
        """
        errors = member.validate()
        if errors:
            raise ValidationError("; ".join(errors), field="member", value=member.email)

        return self.call(f"/lists/{_segment(list_id)}/members", method="POST", body=member.to_body())

    def search_members(self, query: str) -> dict[str, Any]:
        """Search members across all lists."""
        return self.call(with_query("/search-members", {"query": query}))

    # =========================================================================
    # Campaigns
    # =========================================================================

    def get_campaigns(
        self,
        count: int | None = None,
        offset: int | None = None,
        status: str | None = None,
        campaign_type: str | None = None,
        since: str | None = None,
        before: str | None = None,
    ) -> dict[str, Any]:
        """Get all campaigns, optionally filtered by status, type and create time."""
        params = {
            "count": count,
            "offset": offset,
            "status": status,
            "type": campaign_type,
            "since_create_time": since,
            "before_create_time": before,
        }
        return self.call(with_query("/campaigns", params))

    def get_campaign(self, campaign_id: str) -> dict[str, Any]:
        return self.call(f"/campaigns/{_segment(campaign_id)}")

    def get_campaign_content(self, campaign_id: str) -> dict[str, Any]:
        return self.call(f"/campaigns/{_segment(campaign_id)}/content")

    def get_campaign_with_content(self, campaign_id: str, content: bool = False) -> CampaignDetails:
        """Fetch a campaign and, optionally, its content as separate requests."""
        campaign_path = f"/campaigns/{_segment(campaign_id)}"
        campaign_result = self.request(campaign_path)
        content_result = self.request(f"{campaign_path}/content") if content else None
        return CampaignDetails(campaign=campaign_result, content=content_result)

    # =========================================================================
    # Reports
    # =========================================================================

    def get_campaign_report(self, campaign_id: str) -> dict[str, Any]:
        return self.call(f"/reports/{_segment(campaign_id)}")

    def get_campaign_click_details(self, campaign_id: str) -> dict[str, Any]:
        return self.call(f"/reports/{_segment(campaign_id)}/click-details")

    def get_campaign_open_details(
        self,
        campaign_id: str,
        count: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        path = f"/reports/{_segment(campaign_id)}/open-details"
        return self.call(with_query(path, {"count": count, "offset": offset}))

    def get_campaign_report_details(
        self,
        campaign_id: str,
        clicks: bool = False,
        opens: bool = False,
        open_count: int | None = None,
    ) -> CampaignReportDetails:
        """Fetch a campaign report plus optional click and open details.

        The requests run one after another. Each result is kept as returned,
        so a failed detail request never hides a successful report.

        Args:
            campaign_id: Campaign ID
            clicks: Also fetch click details
            opens: Also fetch open details
            open_count: Number of open records to request

        Returns:
            CampaignReportDetails with one RequestResult per request made
        """
        report_path = f"/reports/{_segment(campaign_id)}"
        report = self.request(report_path)
        click_details = self.request(f"{report_path}/click-details") if clicks else None
        open_details = (
            self.request(with_query(f"{report_path}/open-details", {"count": open_count}))
            if opens
            else None
        )
        return CampaignReportDetails(
            report=report,
            click_details=click_details,
            open_details=open_details,
        )

    # =========================================================================
    # Tags / Automations
    # =========================================================================

    def get_tags(self, list_id: str) -> dict[str, Any]:
        """Get tags (static segments) for a list."""
        return self.call(with_query(f"/lists/{_segment(list_id)}/segments", {"type": "static"}))

    def get_automations(self) -> dict[str, Any]:
        return self.call("/automations")
