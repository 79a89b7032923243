"""Host-side token store.

Token slots are declared in a permissions file::

    tokens:
      mailchimp:
        env: MAILCHIMP_API_KEY
        type: api_key
        domains:
          - "*.api.mailchimp.com"
        placement:
          type: header
          name: Authorization
          format: "Bearer {token}"

Secret values come from the environment variable named by ``env`` or, failing
that, from a flat ``ENV_NAME: value`` tokens file. Only this module and the
host transport ever read them.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml

from mailchimp_cli.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PLACEMENT_TYPES = ("header", "query")


@dataclass(frozen=True)
class PlacementRule:
    """Where and how a secret is written into an outbound request."""

    type: str = "header"
    name: str = "Authorization"
    format: str = "Bearer {token}"

    def render(self, secret: str) -> str:
        return self.format.replace("{token}", secret)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "PlacementRule":
        data = data or {}
        placement_type = str(data.get("type", "header")).lower()
        if placement_type not in PLACEMENT_TYPES:
            raise ConfigurationError(
                f"Unsupported placement type '{placement_type}'",
                details={"expected": list(PLACEMENT_TYPES)},
            )
        return cls(
            type=placement_type,
            name=str(data.get("name", "Authorization")),
            format=str(data.get("format", "{token}")),
        )


@dataclass(frozen=True)
class TokenSlot:
    """A named credential declared by the host.

    Attributes:
        name: Slot identifier (the service id clients refer to)
        env: Name of the variable holding the secret
        type: Credential kind (e.g., "api_key")
        domains: Host glob patterns the secret may be sent to
        placement: How the secret is placed on requests
    """

    name: str
    env: str
    type: str = "api_key"
    domains: tuple[str, ...] = field(default_factory=tuple)
    placement: PlacementRule = field(default_factory=PlacementRule)

    def allows_url(self, url: str) -> bool:
        """Check the URL is HTTPS and its host matches one of the allowed domains."""
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
        if parsed.scheme != "https" or not host:
            return False
        return any(fnmatch(host, pattern.lower()) for pattern in self.domains)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "TokenSlot":
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Token '{name}' must be a mapping", slot=name)
        if not data.get("env"):
            raise ConfigurationError(f"Token '{name}' has no env entry", slot=name)
        domains = data.get("domains") or []
        if isinstance(domains, str):
            domains = [domains]
        return cls(
            name=name,
            env=str(data["env"]),
            type=str(data.get("type", "api_key")),
            domains=tuple(str(d) for d in domains),
            placement=PlacementRule.from_dict(data.get("placement")),
        )


def _load_yaml(path: str | Path) -> dict[str, Any]:
    path = Path(path).expanduser()
    if not path.is_file():
        logger.debug(f"Token file not found: {path}")
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}", details={"error": str(e)}) from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping in {path}")
    return data


class HostTokenStore:
    """Credential store backed by host configuration."""

    def __init__(
        self,
        slots: Mapping[str, TokenSlot],
        secrets: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._slots = dict(slots)
        self._secrets = dict(secrets or {})
        self._environ = os.environ if environ is None else environ

    @classmethod
    def from_files(
        cls,
        permissions_file: str | Path,
        tokens_file: str | Path,
        environ: Mapping[str, str] | None = None,
    ) -> "HostTokenStore":
        """Load token slots and stored secrets from YAML files.

        Missing files yield an empty store.
        """
        permissions = _load_yaml(permissions_file)
        tokens = permissions.get("tokens") or {}
        if not isinstance(tokens, dict):
            raise ConfigurationError(f"Expected a mapping under 'tokens' in {permissions_file}")
        slots = {name: TokenSlot.from_dict(name, data or {}) for name, data in tokens.items()}
        secrets = {str(k): str(v) for k, v in _load_yaml(tokens_file).items() if v is not None}
        logger.debug(f"Loaded {len(slots)} token slot(s) from {permissions_file}")
        return cls(slots, secrets, environ)

    def slot(self, name: str) -> TokenSlot | None:
        return self._slots.get(name)

    def has_credential(self, name: str) -> bool:
        """Check that the slot is declared and its secret resolves."""
        return self._lookup(name) is not None

    def resolve(self, name: str) -> tuple[TokenSlot, str]:
        """Return the slot and its secret.

        Raises:
            ConfigurationError: If the slot is missing or has no secret
        """
        found = self._lookup(name)
        if found is None:
            raise ConfigurationError(f"Token '{name}' not configured", slot=name)
        return found

    def _lookup(self, name: str) -> tuple[TokenSlot, str] | None:
        slot = self._slots.get(name)
        if slot is None:
            return None
        secret = self._environ.get(slot.env) or self._secrets.get(slot.env)
        if not secret:
            return None
        return slot, secret
