"""Test doubles for the host credential store and transport."""

import json
from typing import Any


class FakeResponse:
    """Transport response double.

    A ``str`` body is returned verbatim by ``text()`` and parsed by
    ``json()``; any other body is treated as already-decoded JSON.
    """

    def __init__(self, status: int = 200, body: Any = None) -> None:
        self.status = status
        self._body = {} if body is None else body

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body

    def text(self) -> str:
        if isinstance(self._body, str):
            return self._body
        return json.dumps(self._body)


class FakeCredentialStore:
    """Credential store double that records lookups."""

    def __init__(self, configured: set[str] | None = None) -> None:
        self.configured = configured if configured is not None else {"mailchimp"}
        self.lookups: list[str] = []

    def has_credential(self, name: str) -> bool:
        self.lookups.append(name)
        return name in self.configured


class FakeTransport:
    """Transport double that replays queued responses in order.

    Queued exceptions are raised instead of returned. When the queue is
    empty a 200 response with an empty JSON object is returned.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def authenticated_request(
        self,
        service_id: str,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
        timeout_ms: int = 30000,
    ) -> FakeResponse:
        self.calls.append(
            {
                "service_id": service_id,
                "url": url,
                "method": method,
                "headers": headers,
                "body": body,
                "timeout_ms": timeout_ms,
            }
        )
        response = self.responses.pop(0) if self.responses else FakeResponse(200, {})
        if isinstance(response, Exception):
            raise response
        return response

