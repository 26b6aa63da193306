"""
Shared pytest fixtures for all nostr_signer tests.

Provides fixed identities and fresh providers.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

from nostr_signer.identity import IdentityKeypair
from nostr_signer.keystore import KeyStore
from nostr_signer.provider import SigningProvider
from nostr_signer.storage import MemoryBlobStore
from tests.nostr_signer.helpers import make_keystore, make_private_key


@pytest.fixture
def alice() -> IdentityKeypair:
    """Fixed identity A."""
    return IdentityKeypair.from_bytes(make_private_key(3))


@pytest.fixture
def bob() -> IdentityKeypair:
    """Fixed identity B."""
    return IdentityKeypair.from_bytes(make_private_key(5))


@pytest.fixture
def carol() -> IdentityKeypair:
    """Fixed identity C, never party to A and B's conversation."""
    return IdentityKeypair.from_bytes(make_private_key(7))


@pytest.fixture
def memory_store() -> MemoryBlobStore:
    """Empty in-memory blob store."""
    return MemoryBlobStore()


@pytest.fixture
def keystore(memory_store: MemoryBlobStore) -> KeyStore:
    """Key store over an empty in-memory backend."""
    return KeyStore(memory_store)


@pytest.fixture
def provider(keystore: KeyStore) -> Generator[SigningProvider, None, None]:
    """Provider with no key stored yet."""
    with SigningProvider(keystore) as p:
        yield p


@pytest.fixture
def alice_provider(alice: IdentityKeypair) -> SigningProvider:
    """Provider holding identity A."""
    return SigningProvider(make_keystore(alice.private_key))


@pytest.fixture
def bob_provider(bob: IdentityKeypair) -> SigningProvider:
    """Provider holding identity B."""
    return SigningProvider(make_keystore(bob.private_key))


@pytest.fixture
def carol_provider(carol: IdentityKeypair) -> SigningProvider:
    """Provider holding identity C."""
    return SigningProvider(make_keystore(carol.private_key))
