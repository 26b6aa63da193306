"""
Public identity derivation.

A Nostr identity is the x-only secp256k1 public key of the private scalar,
exchanged as 64 lowercase hex characters.

Derivation is a pure function: it has no side effects and always returns
the same public key for the same private key.
"""

from __future__ import annotations

from dataclasses import dataclass

from nostr_signer.crypto import base_point_mul, validate_private_key
from nostr_signer.types import Bytes32

__all__ = [
    "IdentityKeypair",
    "derive_public_key",
]


def derive_public_key(private_key: bytes) -> Bytes32:
    """
    Compute the x-only public key for a private key.

    Args:
        private_key: 32-byte secp256k1 private key.

    Returns:
        32-byte x-only public key.

    Raises:
        InvalidKeyError: If the scalar is zero, out of range, or the wrong length.
    """
    pubkey_x, _ = base_point_mul(validate_private_key(private_key))
    return pubkey_x


@dataclass(frozen=True, slots=True)
class IdentityKeypair:
    """
    secp256k1 keypair for a Nostr identity.

    Attributes:
        private_key: The 32-byte private scalar.
        public_key: The 32-byte x-only public key.
    """

    private_key: Bytes32
    public_key: Bytes32

    @classmethod
    def from_bytes(cls, data: bytes) -> IdentityKeypair:
        """
        Load keypair from raw private key bytes.

        Raises:
            InvalidKeyError: If data is not a valid secp256k1 private key.
        """
        public_key = derive_public_key(data)
        return cls(private_key=Bytes32(data), public_key=public_key)

    def __repr__(self) -> str:
        # Never render private material.
        return f"IdentityKeypair(public_key={self.public_key.hex()})"
