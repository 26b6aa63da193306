"""Shared builders for nostr_signer tests."""

from __future__ import annotations

from typing import Any

from nostr_signer.keystore import PRIVATE_KEY_SLOT, KeyStore
from nostr_signer.storage import MemoryBlobStore
from nostr_signer.types import Bytes32


def make_private_key(scalar: int) -> Bytes32:
    """Encode a small scalar as a 32-byte private key."""
    return Bytes32(scalar.to_bytes(32, "big"))


def make_event(**overrides: Any) -> dict[str, Any]:
    """Build an unsigned short text note, with optional field overrides."""
    event: dict[str, Any] = {
        "kind": 1,
        "created_at": 1700000000,
        "tags": [],
        "content": "hello",
    }
    event.update(overrides)
    return event


def make_keystore(private_key: bytes | None = None) -> KeyStore:
    """Key store over a fresh memory backend, optionally preloaded with a key."""
    initial = None if private_key is None else {PRIVATE_KEY_SLOT: private_key.hex()}
    return KeyStore(MemoryBlobStore(initial))
