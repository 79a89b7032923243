"""Contracts for the host-provided credential store and transport.

The client never sees the API key. It asks the credential store whether a
named credential exists and hands every request to an authenticated
transport, which resolves the secret and places it on the outbound request.
"""

from typing import Any, Protocol


class TransportResponse(Protocol):
    """Response returned by an authenticated transport."""

    @property
    def ok(self) -> bool: ...

    @property
    def status(self) -> int: ...

    def json(self) -> Any:
        """Decode the body as JSON. Raises ValueError if it is not JSON."""
        ...

    def text(self) -> str: ...


class CredentialStore(Protocol):
    """Answers whether a named credential is configured on the host."""

    def has_credential(self, name: str) -> bool: ...


class AuthenticatedTransport(Protocol):
    """Sends a request with the named credential injected by the host.

    Implementations raise ``TransportError`` when no HTTP response is
    obtained (connection failure, timeout, disallowed domain).
    """

    def authenticated_request(
        self,
        service_id: str,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
        timeout_ms: int = 30000,
    ) -> TransportResponse: ...
