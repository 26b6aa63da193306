"""
Nostr event models (NIP-01).

An event is a signed, timestamped, typed message:

    {
      "id":         <32-byte lowercase hex sha256 of the serialized event>,
      "pubkey":     <32-byte lowercase hex x-only public key>,
      "created_at": <unix timestamp in seconds>,
      "kind":       <integer between 0 and 65535>,
      "tags":       [[<string>, ...], ...],
      "content":    <arbitrary string>,
      "sig":        <64-byte lowercase hex BIP-340 signature of the id>
    }

References:
- https://github.com/nostr-protocol/nips/blob/master/01.md
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from nostr_signer.types import Bytes32, Bytes64, StrictBaseModel, ValidationError

MAX_KIND: Final = 65535
"""Largest event kind allowed by NIP-01."""

DERIVED_FIELDS: Final = frozenset({"id", "sig"})
"""Fields recomputed by signing. Ignored when they appear in signing input."""


def _to_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Convert a pydantic error into the signer's ValidationError, naming the first bad field."""
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or None
    return ValidationError(first["msg"], field=field)


class UnsignedEvent(StrictBaseModel):
    """
    Event content submitted for signing.

    `pubkey` is optional. Signing always replaces it with the signer's key.
    """

    pubkey: Bytes32 | None = None
    """Author public key. Overwritten during signing."""

    created_at: int = Field(ge=0)
    """Unix timestamp in seconds."""

    kind: int = Field(ge=0, le=MAX_KIND)
    """Event kind (1 = short text note, 4 = encrypted direct message, ...)."""

    tags: list[list[str]]
    """Ordered list of tags. Each tag is an ordered list of strings."""

    content: str
    """Arbitrary string content."""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> UnsignedEvent:
        """
        Validate a host-supplied event mapping.

        Derived fields (`id`, `sig`) are dropped. The input is never mutated.

        Raises:
            ValidationError: If a required field is missing or malformed.
        """
        if not isinstance(data, Mapping):
            raise ValidationError(f"Event must be a mapping, got {type(data).__name__}")

        fields = {k: v for k, v in data.items() if k not in DERIVED_FIELDS}
        try:
            return cls.model_validate(fields)
        except PydanticValidationError as exc:
            raise _to_validation_error(exc) from exc


class Event(UnsignedEvent):
    """A signed event. Immutable."""

    pubkey: Bytes32
    """Author public key."""

    id: Bytes32
    """SHA-256 of the canonical serialization."""

    sig: Bytes64
    """BIP-340 signature of `id` under `pubkey`."""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Event:
        """
        Validate a signed event mapping, keeping `id` and `sig`.

        Raises:
            ValidationError: If any field is missing or malformed.
        """
        if not isinstance(data, Mapping):
            raise ValidationError(f"Event must be a mapping, got {type(data).__name__}")

        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise _to_validation_error(exc) from exc

    def to_dict(self) -> dict[str, Any]:
        """Render the event in NIP-01 field order with hex-encoded binary fields."""
        return {
            "id": self.id.hex(),
            "pubkey": self.pubkey.hex(),
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
            "sig": self.sig.hex(),
        }
