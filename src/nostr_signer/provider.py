"""
Signing provider facade.

The capability surface a host application consumes:

- get_public_key: hex x-only public key of the stored identity
- sign_event: NIP-01 event with pubkey, id and sig populated
- get_relays: static relay directory
- nip04.encrypt / nip04.decrypt: pairwise encrypted messages

Every operation loads the key through the KeyStore. Nothing else is kept
between calls, so the provider is safe to share between threads.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Mapping
from types import TracebackType
from typing import Any

from nostr_signer import nip04
from nostr_signer.config import DEFAULT_RELAYS, ProviderConfig, RelayPolicy
from nostr_signer.crypto import random_bytes
from nostr_signer.event import UnsignedEvent, sign_event
from nostr_signer.identity import derive_public_key
from nostr_signer.keystore import KeyStore
from nostr_signer.storage import BlobStore, MemoryBlobStore, SQLiteBlobStore
from nostr_signer.types import InvalidKeyError, StorageError

logger = logging.getLogger(__name__)


def parse_public_key(value: str) -> bytes:
    """
    Decode a peer public key given as hex.

    Accepts 64 hex characters (x-only) or 66 (compressed, 02/03 prefix).
    Curve membership is checked later, when the key is used.

    Raises:
        InvalidKeyError: If the value is not a hex public key of either size.
    """
    if not isinstance(value, str) or len(value) not in (64, 66):
        raise InvalidKeyError("Public key must be 64 or 66 hex characters")
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise InvalidKeyError("Public key is not valid hex") from exc


class Nip04:
    """The `nip04` capability namespace of a provider."""

    def __init__(self, provider: SigningProvider) -> None:
        self._provider = provider

    def encrypt(self, peer_pubkey: str, plaintext: str) -> str:
        """Encrypt plaintext for the peer. See `SigningProvider.nip04_encrypt`."""
        return self._provider.nip04_encrypt(peer_pubkey, plaintext)

    def decrypt(self, peer_pubkey: str, payload: str) -> str:
        """Decrypt a payload from the peer. See `SigningProvider.nip04_decrypt`."""
        return self._provider.nip04_decrypt(peer_pubkey, payload)


class SigningProvider:
    """Signer capabilities backed by a single stored identity."""

    def __init__(
        self,
        keystore: KeyStore,
        relays: Mapping[str, RelayPolicy] | None = None,
        *,
        deterministic_signing: bool = True,
        store: BlobStore | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            keystore: Source of the identity private key.
            relays: Static relay directory. Defaults to DEFAULT_RELAYS.
            deterministic_signing: Sign with zero auxiliary randomness when True,
                with fresh randomness per signature otherwise.
            store: Backend to release on `close`, if the provider owns it.
        """
        self._keystore = keystore
        self._relays = dict(DEFAULT_RELAYS if relays is None else relays)
        self._deterministic_signing = deterministic_signing
        self._owned_store = store
        self._nip04 = Nip04(self)

    @classmethod
    def from_config(cls, config: ProviderConfig) -> SigningProvider:
        """
        Build a provider and its storage from configuration.

        The provider owns the store it opens and closes it on `close`.

        Raises:
            StorageError: If the database cannot be opened.
        """
        store: BlobStore
        if config.storage_path is None:
            store = MemoryBlobStore()
        else:
            try:
                store = SQLiteBlobStore(config.storage_path)
            except (OSError, sqlite3.Error) as exc:
                raise StorageError(f"Cannot open key database {config.storage_path}") from exc

        return cls(
            KeyStore(store, config.key_slot),
            config.relays,
            deterministic_signing=config.deterministic_signing,
            store=store,
        )

    @property
    def nip04(self) -> Nip04:
        """Pairwise encryption capability."""
        return self._nip04

    def get_public_key(self) -> str:
        """
        Return the identity public key as 64 lowercase hex characters.

        Generates and persists a key on first use.
        """
        return derive_public_key(self._keystore.load()).hex()

    def sign_event(self, event: UnsignedEvent | Mapping[str, Any]) -> dict[str, Any]:
        """
        Sign an event with the stored identity.

        The input is left untouched. Any `pubkey`, `id` or `sig` it carries is
        replaced in the returned event.

        Returns:
            The signed event as a NIP-01 mapping.

        Raises:
            ValidationError: If the event is malformed.
        """
        unsigned = event if isinstance(event, UnsignedEvent) else UnsignedEvent.from_mapping(event)
        aux_rand = None if self._deterministic_signing else random_bytes(32)

        signed = sign_event(unsigned, self._keystore.load(), aux_rand)
        logger.debug("Signed event %s (kind %d)", signed.id.hex(), signed.kind)
        return signed.to_dict()

    def get_relays(self) -> dict[str, dict[str, bool]]:
        """Return a copy of the configured relay directory."""
        return {url: policy.model_dump() for url, policy in self._relays.items()}

    def nip04_encrypt(self, peer_pubkey: str, plaintext: str) -> str:
        """
        Encrypt a message for a peer identity.

        Args:
            peer_pubkey: Peer public key as hex.
            plaintext: Message text.

        Returns:
            Transportable payload string.

        Raises:
            InvalidKeyError: If the peer key is malformed or not on the curve.
        """
        shared = nip04.derive_shared_secret(self._keystore.load(), parse_public_key(peer_pubkey))
        return nip04.encrypt(shared, plaintext)

    def nip04_decrypt(self, peer_pubkey: str, payload: str) -> str:
        """
        Decrypt a message from a peer identity.

        Raises:
            InvalidKeyError: If the peer key is malformed or not on the curve.
            DecryptionError: If the payload is malformed or fails authentication.
        """
        shared = nip04.derive_shared_secret(self._keystore.load(), parse_public_key(peer_pubkey))
        return nip04.decrypt(shared, payload)

    def close(self) -> None:
        """Release the store opened by `from_config`, if any."""
        if self._owned_store is not None:
            self._owned_store.close()
            self._owned_store = None

    def __enter__(self) -> SigningProvider:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
