"""Configuration management for the Mailchimp CLI."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SERVICE_ID = "mailchimp"
DEFAULT_TIMEOUT_MS = 30000
API_DOMAIN_PATTERN = "*.api.mailchimp.com"
API_KEY_ENV = "MAILCHIMP_API_KEY"


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable.

    Raises:
        ValueError: If the variable is set but not an integer.
    """
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None


@dataclass
class Config:
    """Global configuration for the Mailchimp CLI.

    All values can be overridden via environment variables with a MAILCHIMP_ prefix.
    Example: MAILCHIMP_TIMEOUT_MS=10000

    The API key itself is not part of this object. It lives in the host
    token store and is only ever referenced by ``service_id``.
    """

    # Account
    datacenter: str = field(default_factory=lambda: os.environ.get("MAILCHIMP_DC", ""))
    service_id: str = field(
        default_factory=lambda: os.environ.get("MAILCHIMP_SERVICE_ID", DEFAULT_SERVICE_ID)
    )

    # Request Settings
    default_timeout_ms: int = field(
        default_factory=lambda: _env_int("MAILCHIMP_TIMEOUT_MS", DEFAULT_TIMEOUT_MS)
    )

    # Host token store
    permissions_file: str = field(
        default_factory=lambda: os.path.expanduser(
            os.environ.get("MAILCHIMP_PERMISSIONS_FILE", "~/.pave/permissions.yaml")
        )
    )
    tokens_file: str = field(
        default_factory=lambda: os.path.expanduser(
            os.environ.get("MAILCHIMP_TOKENS_FILE", "~/.pave/tokens.yaml")
        )
    )

    # Logging
    log_level: str = field(
        default_factory=lambda: os.environ.get("MAILCHIMP_LOG_LEVEL", "WARNING")
    )
    redact_sensitive: bool = field(
        default_factory=lambda: os.environ.get("MAILCHIMP_REDACT_SENSITIVE", "true").lower() == "true"
    )

    def validate(self) -> None:
        """Validate that all required configuration is present.

        Raises:
            ValueError: If required configuration is missing.
        """
        if not self.datacenter:
            raise ValueError(
                "Datacenter not set. Pass --dc <datacenter> (e.g., --dc us21) "
                "or set MAILCHIMP_DC."
            )
        if self.default_timeout_ms <= 0:
            raise ValueError(
                f"Timeout must be a positive number of milliseconds, got {self.default_timeout_ms}"
            )

    @classmethod
    def from_env(cls) -> "Config":
        """Create a Config instance from environment variables.

        Returns:
            Config instance with values from environment.
        """
        return cls()


def credential_setup_hint(service_id: str = DEFAULT_SERVICE_ID) -> str:
    """Render the host configuration expected for the API credential.

    Args:
        service_id: Name of the credential slot

    Returns:
        Multi-line remediation text naming the slot, placement and domain
    """
    return "\n".join(
        [
            "Add to ~/.pave/permissions.yaml under tokens section:",
            "",
            "tokens:",
            f"  {service_id}:",
            f"    env: {API_KEY_ENV}",
            "    type: api_key",
            "    domains:",
            f'      - "{API_DOMAIN_PATTERN}"',
            "    placement:",
            "      type: header",
            "      name: Authorization",
            '      format: "Bearer {token}"',
            "",
            "Then add your API key to ~/.pave/tokens.yaml:",
            "",
            f'{API_KEY_ENV}: "your-api-key-us21"',
            "",
            "Note: The API key format is: key-datacenter (e.g., abc123-us21)",
        ]
    )
