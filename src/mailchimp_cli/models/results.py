"""Result models for Mailchimp API operations."""

from dataclasses import dataclass
from typing import Any

from mailchimp_cli.core.exceptions import RequestError


@dataclass(frozen=True)
class RequestResult:
    """Normalized outcome of a single API request.

    Exactly one of ``payload`` or ``error`` is meaningful: a successful
    request carries the decoded response body, a failed one carries the
    RequestError describing it.

    Attributes:
        payload: Decoded JSON body of a successful response
        error: Normalized error of a failed request
    """

    payload: Any = None
    error: RequestError | None = None

    @classmethod
    def success(cls, payload: Any) -> "RequestResult":
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: RequestError) -> "RequestResult":
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        """Check if the request succeeded."""
        return self.error is None

    @property
    def is_failure(self) -> bool:
        """Check if the request failed."""
        return self.error is not None

    def unwrap(self) -> Any:
        """Return the payload, raising the stored RequestError on failure.

        Raises:
            RequestError: If the request failed
        """
        if self.error is not None:
            raise self.error
        return self.payload

    def to_dict(self) -> Any:
        """Payload on success, the error dict on failure."""
        if self.error is not None:
            return self.error.to_dict()
        return self.payload


@dataclass(frozen=True)
class CampaignReportDetails:
    """Results of a campaign report with optional click and open details.

    Each sub-request is reported on its own terms; a failed detail request
    does not affect the report.
    """

    report: RequestResult
    click_details: RequestResult | None = None
    open_details: RequestResult | None = None

    @property
    def all_results(self) -> list[RequestResult]:
        return [r for r in [self.report, self.click_details, self.open_details] if r]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.all_results if r.is_success)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"report": self.report.to_dict()}
        if self.click_details is not None:
            result["clickDetails"] = self.click_details.to_dict()
        if self.open_details is not None:
            result["openDetails"] = self.open_details.to_dict()
        return result


@dataclass(frozen=True)
class CampaignDetails:
    """A campaign and, optionally, its content."""

    campaign: RequestResult
    content: RequestResult | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"campaign": self.campaign.to_dict()}
        if self.content is not None:
            result["content"] = self.content.to_dict()
        return result
