"""
Nostr signing provider.

Owns one secp256k1 identity per storage scope and exposes the signer
capabilities a Nostr client needs: public key, event signing, relay
directory and pairwise encrypted messages.
"""

from .config import ProviderConfig, RelayPolicy
from .keystore import KeyStore
from .provider import SigningProvider
from .types import (
    DecryptionError,
    EntropyError,
    InvalidKeyError,
    SignerError,
    StorageError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "DecryptionError",
    "EntropyError",
    "InvalidKeyError",
    "KeyStore",
    "ProviderConfig",
    "RelayPolicy",
    "SignerError",
    "SigningProvider",
    "StorageError",
    "ValidationError",
]
