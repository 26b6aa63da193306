"""
Event signing and verification.

Signing an event:
1. Validate the input (missing or malformed fields refuse signing)
2. Set pubkey to the signer's x-only public key
3. id  = SHA-256(canonical serialization)
4. sig = BIP-340 signature of id

The caller's event object is never modified; a new Event is returned.
"""

from __future__ import annotations

import hmac
from collections.abc import Mapping
from typing import Any

from nostr_signer.crypto import schnorr_sign, schnorr_verify
from nostr_signer.crypto.schnorr import ZERO_AUX_RAND
from nostr_signer.identity import IdentityKeypair
from nostr_signer.types import ValidationError

from .model import Event, UnsignedEvent
from .serialize import compute_event_id


def sign_event(
    event: UnsignedEvent | Mapping[str, Any],
    private_key: bytes,
    aux_rand: bytes | None = None,
) -> Event:
    """
    Sign an event with a private key.

    Args:
        event: Event content, as a model or a host-supplied mapping.
        private_key: 32-byte secp256k1 private key.
        aux_rand: Optional 32 bytes of fresh randomness for hedged signing.
            None signs deterministically.

    Returns:
        New signed event with `pubkey`, `id` and `sig` populated.

    Raises:
        ValidationError: If the event is malformed.
        InvalidKeyError: If the private key is invalid.
    """
    unsigned = event if isinstance(event, UnsignedEvent) else UnsignedEvent.from_mapping(event)
    keypair = IdentityKeypair.from_bytes(private_key)

    tags = [list(tag) for tag in unsigned.tags]
    event_id = compute_event_id(
        keypair.public_key,
        unsigned.created_at,
        unsigned.kind,
        tags,
        unsigned.content,
    )
    sig = schnorr_sign(event_id, keypair.private_key, aux_rand or ZERO_AUX_RAND)

    return Event(
        pubkey=keypair.public_key,
        created_at=unsigned.created_at,
        kind=unsigned.kind,
        tags=tags,
        content=unsigned.content,
        id=event_id,
        sig=sig,
    )


def verify_event(event: Event | Mapping[str, Any]) -> bool:
    """
    Check that an event's id matches its content and its signature is valid.

    Args:
        event: Signed event, as a model or a mapping of hex fields.

    Returns:
        True if the event is authentic, False otherwise (including malformed input).
    """
    if not isinstance(event, Event):
        try:
            event = Event.from_mapping(event)
        except ValidationError:
            return False

    try:
        expected_id = compute_event_id(
            event.pubkey, event.created_at, event.kind, event.tags, event.content
        )
    except ValidationError:
        return False

    if not hmac.compare_digest(expected_id, event.id):
        return False
    return schnorr_verify(event.id, event.pubkey, event.sig)
