"""Tests for MailchimpClient request pipeline and resource methods."""

import hashlib
import json
import logging

import pytest

from tests.helpers import FakeCredentialStore, FakeResponse
from mailchimp_cli.core.client import MailchimpClient
from mailchimp_cli.core.exceptions import (
    ConfigurationError,
    RequestError,
    TransportError,
    ValidationError,
)
from mailchimp_cli.models.member import NewMember

BASE = "https://us21.api.mailchimp.com/3.0"


class TestClientConstruction:
    """Tests for client initialization checks."""

    def test_base_url(self, client):
        assert client.base_url == BASE
        assert client.datacenter == "us21"

    def test_datacenter_is_normalized(self, config, credential_store, transport):
        client = MailchimpClient("  US6 ", credential_store, transport, config)
        assert client.base_url == "https://us6.api.mailchimp.com/3.0"

    def test_checks_configured_service_id(self, config, credential_store, transport):
        MailchimpClient("us21", credential_store, transport, config)
        assert credential_store.lookups == ["mailchimp"]

    def test_missing_credential_raises(self, config, transport):
        store = FakeCredentialStore(configured=set())

        with pytest.raises(ConfigurationError) as exc_info:
            MailchimpClient("us21", store, transport, config)

        error = exc_info.value
        assert error.message == "Mailchimp token not configured"
        assert error.slot == "mailchimp"
        assert "permissions.yaml" in error.hint
        assert "*.api.mailchimp.com" in error.hint
        assert "MAILCHIMP_API_KEY" in error.hint
        assert error.to_dict()["details"] == {
            "slot": "mailchimp",
            "env": "MAILCHIMP_API_KEY",
            "placement": "header",
            "domains": ["*.api.mailchimp.com"],
        }
        assert transport.calls == []

    @pytest.mark.parametrize("datacenter", ["", "us", "21", "us21.evil.com", "us-21", "us21/x"])
    def test_invalid_datacenter_raises(self, config, credential_store, transport, datacenter):
        with pytest.raises(ValidationError) as exc_info:
            MailchimpClient(datacenter, credential_store, transport, config)

        assert exc_info.value.field == "datacenter"
        assert transport.calls == []

    def test_client_holds_no_secret(self, client):
        assert not any("key" in name.lower() for name in vars(client))


class TestRequest:
    """Tests for the request pipeline."""

    def test_builds_absolute_url(self, client, transport):
        client.request("/lists")
        assert transport.calls[0]["url"] == f"{BASE}/lists"
        assert transport.calls[0]["service_id"] == "mailchimp"
        assert transport.calls[0]["method"] == "GET"

    def test_path_without_leading_slash(self, client, transport):
        client.request("lists")
        assert transport.calls[0]["url"] == f"{BASE}/lists"

    def test_default_headers_and_timeout(self, client, transport):
        client.request("/lists")
        call = transport.calls[0]
        assert call["headers"] == {"Content-Type": "application/json"}
        assert call["timeout_ms"] == 30000
        assert call["body"] is None

    def test_custom_timeout(self, client, transport):
        client.request("/lists", timeout_ms=5000)
        assert transport.calls[0]["timeout_ms"] == 5000

    def test_content_type_override_is_case_insensitive(self, client, transport):
        client.request("/lists", headers={"content-type": "text/plain"})
        assert transport.calls[0]["headers"] == {"content-type": "text/plain"}

    def test_extra_headers_merge_with_default(self, client, transport):
        client.request("/lists", headers={"X-Trace": "abc"})
        assert transport.calls[0]["headers"] == {
            "Content-Type": "application/json",
            "X-Trace": "abc",
        }

    def test_dict_body_is_serialized(self, client, transport):
        client.request("/lists/x/members", method="POST", body={"email_address": "a@b.co"})
        call = transport.calls[0]
        assert call["method"] == "POST"
        assert json.loads(call["body"]) == {"email_address": "a@b.co"}

    def test_string_body_is_sent_as_is(self, client, transport):
        client.request("/x", method="PUT", body='{"raw": true}')
        assert transport.calls[0]["body"] == '{"raw": true}'

    def test_success_payload(self, client, transport):
        transport.queue(FakeResponse(200, {"lists": [], "total_items": 0}))
        result = client.request("/lists")
        assert result.is_success
        assert result.payload == {"lists": [], "total_items": 0}

    def test_success_with_empty_body(self, client, transport):
        transport.queue(FakeResponse(204, ""))
        result = client.request("/lists/x/members/y", method="DELETE")
        assert result.is_success
        assert result.payload == {}

    def test_success_with_invalid_json(self, client, transport):
        transport.queue(FakeResponse(200, "<html>oops</html>"))
        result = client.request("/lists")
        assert result.is_failure
        assert result.error.message == "Invalid JSON response"
        assert result.error.status == 200

    def test_problem_document_error(self, client, transport):
        transport.queue(FakeResponse(404, {"type": "t", "title": "Resource Not Found", "detail": "d"}))
        result = client.request("/lists/missing")

        assert result.is_failure
        error = result.error
        assert error.message == "d"
        assert error.status == 404
        assert error.error_type == "t"
        assert error.raw_body == {"type": "t", "title": "Resource Not Found", "detail": "d"}

    def test_error_falls_back_to_title(self, client, transport):
        transport.queue(FakeResponse(401, {"title": "API Key Invalid"}))
        result = client.request("/")
        assert result.error.message == "API Key Invalid"

    def test_error_falls_back_to_status(self, client, transport):
        transport.queue(FakeResponse(502, {}))
        result = client.request("/")
        assert result.error.message == "HTTP 502"
        assert result.error.status == 502

    def test_non_json_error_body(self, client, transport):
        transport.queue(FakeResponse(500, "server exploded"))
        result = client.request("/lists")

        error = result.error
        assert error.message == "server exploded"
        assert error.status == 500
        assert error.error_type is None
        assert error.raw_body == {"detail": "server exploded"}

    def test_empty_error_body(self, client, transport):
        transport.queue(FakeResponse(503, ""))
        result = client.request("/lists")
        assert result.error.message == "HTTP 503"

    def test_non_object_json_error_body(self, client, transport):
        transport.queue(FakeResponse(400, ["bad", "request"]))
        result = client.request("/lists")
        assert result.error.raw_body == {"detail": '["bad", "request"]'}
        assert result.error.status == 400

    def test_transport_failure_has_no_status(self, client, transport):
        transport.queue(TransportError("Request timed out after 30000ms"))
        result = client.request("/lists")

        assert result.is_failure
        assert result.error.message == "Request timed out after 30000ms"
        assert result.error.status is None
        assert result.error.raw_body["error_type"] == "TransportError"

    def test_unexpected_transport_exception_is_normalized(self, client, transport):
        transport.queue(OSError("socket closed"))
        result = client.request("/lists")
        assert result.error.message == "socket closed"
        assert result.error.status is None

    def test_request_never_raises_on_api_error(self, client, transport):
        transport.queue(FakeResponse(500, "boom"))
        client.request("/lists")  # no exception

    def test_logs_path_but_redacts_secret_headers(self, client, caplog):
        caplog.set_level(logging.DEBUG, logger="mailchimp_cli.core.client")

        client.request("/lists", headers={"X-Auth-Token": "s3cret"})

        assert "GET /lists" in caplog.text
        assert "s3cret" not in caplog.text

    def test_redaction_can_be_disabled(self, config, credential_store, transport, caplog):
        config.redact_sensitive = False
        client = MailchimpClient("us21", credential_store, transport, config)
        caplog.set_level(logging.DEBUG, logger="mailchimp_cli.core.client")

        client.request("/lists", headers={"X-Trace": "trace-1"})

        assert "trace-1" in caplog.text

    def test_call_returns_payload(self, client, transport):
        transport.queue(FakeResponse(200, {"account_id": "x"}))
        assert client.call("/") == {"account_id": "x"}

    def test_call_raises_request_error(self, client, transport):
        transport.queue(FakeResponse(404, {"detail": "missing"}))
        with pytest.raises(RequestError) as exc_info:
            client.call("/lists/nope")
        assert exc_info.value.status == 404
        assert str(exc_info.value) == "missing (HTTP 404)"


class TestResourceMethods:
    """Tests for the paths and queries produced by resource methods."""

    def _url(self, transport, index=0):
        return transport.calls[index]["url"]

    def test_get_account_info(self, client, transport):
        client.get_account_info()
        assert self._url(transport) == f"{BASE}/"

    def test_get_lists(self, client, transport):
        client.get_lists(count=10, offset=0)
        assert self._url(transport) == f"{BASE}/lists?count=10&offset=0"

    def test_get_lists_without_paging(self, client, transport):
        client.get_lists()
        assert self._url(transport) == f"{BASE}/lists"

    def test_get_list_encodes_id(self, client, transport):
        client.get_list("a/b c")
        assert self._url(transport) == f"{BASE}/lists/a%2Fb%20c"

    def test_get_members_with_filters(self, client, transport):
        client.get_members("L1", count=5, offset=10, status="subscribed", since="2024-01-01")
        assert self._url(transport) == (
            f"{BASE}/lists/L1/members?count=5&offset=10&status=subscribed"
            "&since_timestamp_opt=2024-01-01"
        )

    def test_get_members_omits_unset_filters(self, client, transport):
        client.get_members("L1", count=10, offset=0)
        assert self._url(transport) == f"{BASE}/lists/L1/members?count=10&offset=0"

    def test_get_member_uses_identity_key(self, client, transport):
        client.get_member("L1", "  User@Example.COM ")
        key = hashlib.md5(b"user@example.com").hexdigest()
        assert self._url(transport) == f"{BASE}/lists/L1/members/{key}"

    def test_add_member(self, client, transport):
        transport.queue(FakeResponse(200, {"id": "m1", "status": "pending"}))
        member = NewMember(email="New@Example.com", status="pending", first_name="Ann", tags=["vip"])

        result = client.add_member("L1", member)

        call = transport.calls[0]
        assert result == {"id": "m1", "status": "pending"}
        assert call["method"] == "POST"
        assert call["url"] == f"{BASE}/lists/L1/members"
        assert json.loads(call["body"]) == {
            "email_address": "New@Example.com",
            "status": "pending",
            "merge_fields": {"FNAME": "Ann"},
            "tags": ["vip"],
        }

    def test_add_member_invalid_makes_no_request(self, client, transport):
        with pytest.raises(ValidationError):
            client.add_member("L1", NewMember(email="not-an-email"))
        assert transport.calls == []

    def test_search_members_encodes_query(self, client, transport):
        client.search_members("jane doe@example.com")
        assert self._url(transport) == f"{BASE}/search-members?query=jane%20doe%40example.com"

    def test_get_campaigns_filters(self, client, transport):
        client.get_campaigns(
            count=10,
            offset=0,
            status="sent",
            campaign_type="regular",
            since="2024-01-01",
            before="2024-02-01",
        )
        assert self._url(transport) == (
            f"{BASE}/campaigns?count=10&offset=0&status=sent&type=regular"
            "&since_create_time=2024-01-01&before_create_time=2024-02-01"
        )

    def test_get_campaign_and_content(self, client, transport):
        client.get_campaign("c1")
        client.get_campaign_content("c1")
        assert self._url(transport, 0) == f"{BASE}/campaigns/c1"
        assert self._url(transport, 1) == f"{BASE}/campaigns/c1/content"

    def test_report_endpoints(self, client, transport):
        client.get_campaign_report("c1")
        client.get_campaign_click_details("c1")
        client.get_campaign_open_details("c1", count=20)
        assert self._url(transport, 0) == f"{BASE}/reports/c1"
        assert self._url(transport, 1) == f"{BASE}/reports/c1/click-details"
        assert self._url(transport, 2) == f"{BASE}/reports/c1/open-details?count=20"

    def test_get_tags(self, client, transport):
        client.get_tags("L1")
        assert self._url(transport) == f"{BASE}/lists/L1/segments?type=static"

    def test_get_automations(self, client, transport):
        client.get_automations()
        assert self._url(transport) == f"{BASE}/automations"


class TestCompositeRequests:
    """Tests for multi-request operations."""

    def test_report_only(self, client, transport):
        transport.queue(FakeResponse(200, {"id": "c1"}))
        details = client.get_campaign_report_details("c1")

        assert len(transport.calls) == 1
        assert details.report.payload == {"id": "c1"}
        assert details.click_details is None
        assert details.open_details is None

    def test_failed_detail_keeps_successful_report(self, client, transport):
        transport.queue(
            FakeResponse(200, {"id": "c1", "emails_sent": 10}),
            FakeResponse(500, "server exploded"),
            FakeResponse(200, {"members": []}),
        )

        details = client.get_campaign_report_details("c1", clicks=True, opens=True, open_count=20)

        assert details.report.is_success
        assert details.report.payload["emails_sent"] == 10
        assert details.click_details.is_failure
        assert details.click_details.error.status == 500
        assert details.open_details.payload == {"members": []}
        assert [c["url"] for c in transport.calls] == [
            f"{BASE}/reports/c1",
            f"{BASE}/reports/c1/click-details",
            f"{BASE}/reports/c1/open-details?count=20",
        ]

    def test_failed_report_still_requests_details(self, client, transport):
        transport.queue(
            FakeResponse(404, {"detail": "Campaign not found"}),
            FakeResponse(200, {"urls_clicked": []}),
        )

        details = client.get_campaign_report_details("c1", clicks=True)

        assert details.report.error.message == "Campaign not found"
        assert details.click_details.is_success
        assert len(transport.calls) == 2

    def test_campaign_with_content(self, client, transport):
        transport.queue(
            FakeResponse(200, {"id": "c1"}),
            FakeResponse(200, {"html": "<p>Hi</p>"}),
        )

        details = client.get_campaign_with_content("c1", content=True)

        assert details.campaign.payload == {"id": "c1"}
        assert details.content.payload == {"html": "<p>Hi</p>"}

    def test_campaign_without_content(self, client, transport):
        details = client.get_campaign_with_content("c1")
        assert details.content is None
        assert len(transport.calls) == 1
