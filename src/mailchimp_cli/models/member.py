"""List member models for the Mailchimp CLI."""

from dataclasses import dataclass, field
from typing import Any

from mailchimp_cli.utils.sanitization import sanitize_input

MEMBER_STATUSES = ("subscribed", "unsubscribed", "cleaned", "pending", "transactional")


@dataclass
class NewMember:
    """Data structure for a member to be added to a list.

    Attributes:
        email: Email address (required)
        status: Subscription status (default "subscribed")
        first_name: Value for the FNAME merge field
        last_name: Value for the LNAME merge field
        tags: Tag names to apply
    """

    email: str
    status: str = "subscribed"
    first_name: str = ""
    last_name: str = ""
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.email = sanitize_input(self.email, max_len=254).strip()
        self.status = (self.status or "subscribed").strip().lower()
        self.first_name = sanitize_input(self.first_name, max_len=100).strip()
        self.last_name = sanitize_input(self.last_name, max_len=100).strip()
        self.tags = [t.strip() for t in self.tags if t and t.strip()]

    def validate(self) -> list[str]:
        """Validate member data and return list of validation errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.email:
            errors.append("Email address is required")
        elif "@" not in self.email:
            errors.append(f"Invalid email address: {self.email}")
        if self.status not in MEMBER_STATUSES:
            errors.append(
                f"Invalid status '{self.status}'. Expected one of: {', '.join(MEMBER_STATUSES)}"
            )

        return errors

    def is_valid(self) -> bool:
        """Check if member data is valid."""
        return len(self.validate()) == 0

    def to_body(self) -> dict[str, Any]:
        """Build the request body for the add-member endpoint."""
        body: dict[str, Any] = {
            "email_address": self.email,
            "status": self.status,
        }

        merge_fields = {}
        if self.first_name:
            merge_fields["FNAME"] = self.first_name
        if self.last_name:
            merge_fields["LNAME"] = self.last_name
        if merge_fields:
            body["merge_fields"] = merge_fields

        if self.tags:
            body["tags"] = list(self.tags)

        return body

    @classmethod
    def from_options(
        cls,
        email: str,
        status: str = "subscribed",
        fname: str = "",
        lname: str = "",
        tags: str = "",
    ) -> "NewMember":
        """Create a NewMember from CLI-style options (comma-separated tags)."""
        return cls(
            email=email,
            status=status,
            first_name=fname,
            last_name=lname,
            tags=[t.strip() for t in tags.split(",") if t.strip()],
        )
