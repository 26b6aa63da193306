"""
Pairwise encrypted messaging between identities (NIP-04 capability).

ECDH shared secret, HKDF key derivation, AES-256-GCM with random nonces.
"""

from .crypto import decrypt, derive_message_key, derive_shared_secret, encrypt
from .payload import PAYLOAD_VERSION, EncryptedPayload

__all__ = [
    "PAYLOAD_VERSION",
    "EncryptedPayload",
    "decrypt",
    "derive_message_key",
    "derive_shared_secret",
    "encrypt",
]
