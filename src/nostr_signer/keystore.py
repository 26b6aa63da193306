"""
Key store for the signing identity.

Owns the single private key of a storage scope:
- Loads it from the blob store when present
- Otherwise generates a fresh one, persists it once, and returns it

The stored value is the private scalar as 64 lowercase hex characters.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Final

from nostr_signer.crypto import N, random_bytes, validate_private_key
from nostr_signer.identity import derive_public_key
from nostr_signer.storage import BlobStore
from nostr_signer.types import Bytes32, InvalidKeyError, StorageError

logger = logging.getLogger(__name__)

PRIVATE_KEY_SLOT: Final = "nostr:privkey"
"""Storage slot holding the hex-encoded private key."""

_STORAGE_ERRORS = (OSError, sqlite3.Error)
"""Backend exceptions translated into StorageError."""


def generate_private_key() -> Bytes32:
    """
    Generate a uniformly random secp256k1 private key.

    Draws 32 bytes from the OS CSPRNG and rejects candidates outside [1, n-1].
    The rejection probability is about 2^-128, so the loop almost never repeats.

    Raises:
        EntropyError: If the operating system cannot supply randomness.
    """
    while True:
        candidate = random_bytes(32)
        if 0 < int.from_bytes(candidate, "big") < N:
            return Bytes32(candidate)


class KeyStore:
    """
    Load-or-generate access to the identity private key.

    Concurrency:
        A lock makes generate-if-absent single-flight inside the process.
        The write itself goes through the store's compare-and-swap, so when
        several processes race, every one of them ends up with the key that
        was persisted first.
    """

    def __init__(self, store: BlobStore, slot: str = PRIVATE_KEY_SLOT) -> None:
        """
        Initialize the key store.

        Args:
            store: Backend holding the key slot.
            slot: Name of the slot holding the hex private key.
        """
        self._store = store
        self._slot = slot
        self._lock = threading.Lock()

    @property
    def slot(self) -> str:
        """Storage slot used by this key store."""
        return self._slot

    def has(self) -> bool:
        """
        Report whether a private key is stored, without side effects.

        Raises:
            StorageError: If the backend is unavailable.
        """
        try:
            return self._store.has(self._slot)
        except _STORAGE_ERRORS as exc:
            raise StorageError("Key storage unavailable", key=self._slot) from exc

    def load(self) -> Bytes32:
        """
        Return the stored private key, generating and persisting one if absent.

        Returns:
            32-byte private key.

        Raises:
            StorageError: If the backend fails or holds a corrupt value.
            EntropyError: If a new key is needed and no randomness is available.
        """
        stored = self._read()
        if stored is not None:
            return stored

        with self._lock:
            # Another thread may have generated the key while we waited.
            stored = self._read()
            if stored is not None:
                return stored

            candidate = generate_private_key()
            try:
                persisted = self._store.setdefault(self._slot, candidate.hex())
            except _STORAGE_ERRORS as exc:
                raise StorageError("Failed to persist private key", key=self._slot) from exc

            key = self._decode(persisted)
            if key == candidate:
                logger.info("Generated new identity key %s", derive_public_key(key).hex())
            else:
                logger.debug("Concurrent writer persisted the identity key first")
            return key

    def _read(self) -> Bytes32 | None:
        """Fetch and decode the stored key, or None when the slot is empty."""
        try:
            raw = self._store.get(self._slot)
        except _STORAGE_ERRORS as exc:
            raise StorageError("Key storage unavailable", key=self._slot) from exc

        if raw is None:
            return None
        return self._decode(raw)

    def _decode(self, raw: str) -> Bytes32:
        """
        Parse a stored hex private key.

        Raises:
            StorageError: If the value is not 64 hex characters or not a valid scalar.
        """
        if not isinstance(raw, str) or len(raw) != 64:
            raise StorageError("Stored private key is corrupt", key=self._slot)
        try:
            key = Bytes32(bytes.fromhex(raw))
            validate_private_key(key)
        except (ValueError, InvalidKeyError) as exc:
            raise StorageError("Stored private key is corrupt", key=self._slot) from exc
        return key
