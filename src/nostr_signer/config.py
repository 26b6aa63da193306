"""
Signing provider configuration.

Loaded from YAML for the CLI, or built directly in code:

    storage_path: ~/.nostr_signer/keys.db
    key_slot: nostr:privkey
    deterministic_signing: true
    relays:
      wss://relay.example.com: {read: true, write: true}
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from nostr_signer.keystore import PRIVATE_KEY_SLOT
from nostr_signer.types import StrictBaseModel

RELAY_SCHEMES: Final = ("ws://", "wss://")
"""URL schemes accepted for relay endpoints."""


class RelayPolicy(StrictBaseModel):
    """Read/write policy of one relay endpoint."""

    read: bool = True
    """Whether the host may read events from this relay."""

    write: bool = True
    """Whether the host may publish events to this relay."""


DEFAULT_RELAYS: Final = {"wss://example-relay.com": RelayPolicy(read=True, write=True)}
"""Relay directory used when none is configured."""


class ProviderConfig(StrictBaseModel):
    """Runtime configuration for a SigningProvider."""

    storage_path: Path | None = None
    """SQLite database holding the key. None keeps the key in memory for the process lifetime."""

    key_slot: str = Field(default=PRIVATE_KEY_SLOT, min_length=1)
    """Storage slot holding the hex private key."""

    relays: dict[str, RelayPolicy] = Field(default_factory=lambda: dict(DEFAULT_RELAYS))
    """Static relay directory reported by `get_relays`."""

    deterministic_signing: bool = True
    """
    Sign with all-zero auxiliary randomness.

    When False, every signature mixes in 32 fresh random bytes (hedged signing).
    Both produce valid BIP-340 signatures.
    """

    @field_validator("storage_path", mode="before")
    @classmethod
    def parse_storage_path(cls, v: Any) -> Path | None:
        """Accept a plain string path and expand `~`."""
        if v is None or isinstance(v, Path):
            return v
        if not isinstance(v, str):
            raise ValueError(f"storage_path must be a string, got {type(v).__name__}")
        return Path(v).expanduser()

    @field_validator("relays", mode="before")
    @classmethod
    def parse_relays(cls, v: Any) -> dict[str, RelayPolicy]:
        """
        Validate relay URLs and convert plain mappings into RelayPolicy.

        YAML yields nested dicts, while code may pass RelayPolicy instances.
        """
        if not isinstance(v, dict):
            raise ValueError(f"relays must be a mapping, got {type(v).__name__}")

        result = {}
        for url, policy in v.items():
            if not isinstance(url, str) or not url.startswith(RELAY_SCHEMES):
                raise ValueError(f"Relay URL must start with ws:// or wss://: {url!r}")
            if policy is None:
                policy = RelayPolicy()
            elif isinstance(policy, dict):
                try:
                    policy = RelayPolicy.model_validate(policy)
                except PydanticValidationError as exc:
                    raise ValueError(f"Invalid policy for relay {url!r}: {exc}") from exc
            result[url] = policy
        return result

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> ProviderConfig:
        """
        Load configuration from a YAML file.

        An empty file yields the defaults.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            pydantic.ValidationError: If the data fails validation.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml(cls, content: str) -> ProviderConfig:
        """Load configuration from a YAML string."""
        data = yaml.safe_load(content)
        return cls.model_validate(data or {})
