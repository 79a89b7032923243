"""Custom exceptions for the Mailchimp CLI."""

from typing import Any


class MailchimpError(Exception):
    """Base exception for all Mailchimp CLI errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(MailchimpError):
    """Raised when the host credential store has no usable credential.

    Not retryable: the user has to edit the host configuration. ``hint``
    carries the exact configuration block that is expected.
    """

    def __init__(
        self,
        message: str,
        slot: str | None = None,
        hint: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.slot = slot
        self.hint = hint


class RequestError(MailchimpError):
    """Normalized failure of a single API request.

    Attributes:
        message: ``detail`` or ``title`` from the error body, else ``HTTP <status>``
        status: HTTP status code, ``None`` for transport-level failures
        error_type: The ``type`` tag of the API problem document, if any
        raw_body: Decoded error body (or ``{"detail": <text>}``) for diagnostics
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        error_type: str | None = None,
        raw_body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.error_type = error_type
        self.raw_body = raw_body

    def __str__(self) -> str:
        if self.status:
            return f"{self.message} (HTTP {self.status})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"error": self.message}
        if self.status is not None:
            result["status"] = self.status
        if self.error_type:
            result["type"] = self.error_type
        if self.raw_body is not None:
            result["data"] = self.raw_body
        return result


class TransportError(MailchimpError):
    """Raised by a transport when no HTTP response was obtained."""


class ValidationError(MailchimpError):
    """Raised when local input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value
