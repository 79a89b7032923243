"""Host-side authenticated transport using requests."""

import logging
from typing import Any

import requests

from mailchimp_cli.core.exceptions import ConfigurationError, TransportError
from mailchimp_cli.host.tokens import HostTokenStore
from mailchimp_cli.utils.sanitization import redact_headers

logger = logging.getLogger(__name__)


class HostResponse:
    """Adapts a requests.Response to the transport response contract."""

    def __init__(self, response: requests.Response) -> None:
        self._response = response

    @property
    def ok(self) -> bool:
        return self._response.ok

    @property
    def status(self) -> int:
        return self._response.status_code

    def json(self) -> Any:
        return self._response.json()

    def text(self) -> str:
        return self._response.text


class HostTransport:
    """Sends requests with the secret of a named token slot injected.

    The secret is resolved per request from the token store, placed as a
    header or query parameter according to the slot's placement rule, and
    only sent to URLs matching the slot's domain allow-list.
    """

    def __init__(self, store: HostTokenStore, session: requests.Session | None = None) -> None:
        self.store = store
        self.session = session or requests.Session()

    def authenticated_request(
        self,
        service_id: str,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
        timeout_ms: int = 30000,
    ) -> HostResponse:
        """Send an authenticated request.

        Raises:
            TransportError: If the URL is not allowed for the slot, the
                credential cannot be resolved, or no response is received
        """
        try:
            slot, secret = self.store.resolve(service_id)
        except ConfigurationError as e:
            raise TransportError(e.message, details={"service_id": service_id}) from e

        if not slot.allows_url(url):
            raise TransportError(
                f"Domain not allowed for token '{service_id}'",
                details={"url": url, "domains": list(slot.domains)},
            )

        request_headers = dict(headers or {})
        params = None
        if slot.placement.type == "header":
            request_headers[slot.placement.name] = slot.placement.render(secret)
        else:
            params = {slot.placement.name: slot.placement.render(secret)}

        logger.debug(
            f"{method} {url} headers={redact_headers(request_headers, {slot.placement.name})}"
        )

        data = body.encode("utf-8") if body is not None else None
        try:
            response = self.session.request(
                method,
                url,
                headers=request_headers,
                params=params,
                data=data,
                timeout=timeout_ms / 1000,
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(f"Request timed out after {timeout_ms}ms") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Connection error: {type(e).__name__}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return HostResponse(response)
