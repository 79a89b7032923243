"""Pytest configuration and fixtures for Mailchimp CLI tests."""

import os
import sys
from typing import Any

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from tests.helpers import FakeCredentialStore, FakeTransport  # noqa: E402


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all MAILCHIMP_* env vars to ensure clean state."""
    for key in list(os.environ.keys()):
        if key.startswith("MAILCHIMP_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config(tmp_path):
    """Config with explicit values, independent of the environment."""
    from mailchimp_cli.core.config import Config

    return Config(
        datacenter="us21",
        service_id="mailchimp",
        default_timeout_ms=30000,
        permissions_file=str(tmp_path / "permissions.yaml"),
        tokens_file=str(tmp_path / "tokens.yaml"),
        log_level="WARNING",
        redact_sensitive=True,
    )


@pytest.fixture
def credential_store() -> FakeCredentialStore:
    return FakeCredentialStore()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(config, credential_store, transport):
    """MailchimpClient wired to fake host collaborators."""
    from mailchimp_cli.core.client import MailchimpClient

    return MailchimpClient("us21", credential_store, transport, config)


@pytest.fixture
def sample_member() -> dict[str, Any]:
    """Member payload as returned by the API."""
    return {
        "id": "b642b4217b34b1e8d3bd915fc65c4452",
        "email_address": "user@example.com",
        "status": "subscribed",
        "merge_fields": {"FNAME": "Jane", "LNAME": "Doe"},
        "tags": [{"id": 1, "name": "vip"}, {"id": 2, "name": "beta"}],
        "timestamp_opt": "2024-01-10T12:00:00+00:00",
        "last_changed": "2024-02-01T08:30:00+00:00",
        "source": "API - Generic",
        "list_id": "b4cd77f0a4",
    }


@pytest.fixture
def sample_campaign() -> dict[str, Any]:
    """Campaign payload as returned by the API."""
    return {
        "id": "abc123",
        "web_id": 987,
        "type": "regular",
        "status": "sent",
        "create_time": "2024-03-01T10:00:00+00:00",
        "send_time": "2024-03-02T10:00:00+00:00",
        "emails_sent": 1200,
        "settings": {
            "title": "March Newsletter",
            "subject_line": "What's new in March",
            "preview_text": "Spring updates",
            "from_name": "Acme",
            "reply_to": "news@acme.test",
        },
        "recipients": {"list_id": "b4cd77f0a4", "list_name": "Customers"},
        "report_summary": {
            "opens": 800,
            "unique_opens": 600,
            "open_rate": 0.5,
            "clicks": 200,
            "subscriber_clicks": 150,
            "click_rate": 0.125,
        },
    }


@pytest.fixture
def sample_list() -> dict[str, Any]:
    """List payload as returned by the API."""
    return {
        "id": "b4cd77f0a4",
        "web_id": 42,
        "name": "Customers",
        "contact": {"company": "Acme"},
        "date_created": "2023-05-05T00:00:00+00:00",
        "stats": {
            "member_count": 1500,
            "unsubscribe_count": 30,
            "cleaned_count": 5,
            "campaign_count": 12,
            "open_rate": 0.42,
            "click_rate": 0.07,
        },
    }
