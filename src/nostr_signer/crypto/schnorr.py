"""
BIP-340 Schnorr signatures over secp256k1.

Nostr signs the 32-byte event id with BIP-340. Signing and verification run
inside libsecp256k1 through `coincurve`, in constant time with respect to
the private key and nonce.

With a fixed (all-zero) aux_rand the scheme is deterministic: the same key
and message always produce the same signature.

References:
- https://github.com/bitcoin/bips/blob/master/bip-0340.mediawiki
"""

from __future__ import annotations

from typing import Final

from coincurve import PrivateKey, PublicKeyXOnly

from nostr_signer.types import Bytes64

from .secp256k1 import XONLY_PUBKEY_SIZE, base_point_mul, validate_private_key

SIGNATURE_SIZE: Final = 64
"""BIP-340 signature size (R.x || s, each 32 bytes)."""

MESSAGE_SIZE: Final = 32
"""Signed messages are 32-byte digests (event ids)."""

ZERO_AUX_RAND: Final = bytes(32)
"""Auxiliary randomness used for deterministic signing."""


def schnorr_sign(msg: bytes, private_key: bytes, aux_rand: bytes = ZERO_AUX_RAND) -> Bytes64:
    """
    Create a BIP-340 signature.

    Args:
        msg: 32-byte message (the event id).
        private_key: 32-byte secp256k1 private key.
        aux_rand: 32 bytes of auxiliary randomness. Zero bytes give a
            deterministic signature; fresh random bytes give a hedged one.

    Returns:
        64-byte signature.

    Raises:
        InvalidKeyError: If the private key is out of range.
        ValueError: If msg or aux_rand have the wrong length.
    """
    if len(msg) != MESSAGE_SIZE:
        raise ValueError(f"Message must be {MESSAGE_SIZE} bytes, got {len(msg)}")
    if len(aux_rand) != 32:
        raise ValueError(f"aux_rand must be 32 bytes, got {len(aux_rand)}")

    scalar = validate_private_key(private_key)
    signature = Bytes64(PrivateKey(bytes(private_key)).sign_schnorr(bytes(msg), bytes(aux_rand)))

    # Self-check before releasing the signature.
    #
    # A faulty signature is never returned.
    pubkey_x, _ = base_point_mul(scalar)
    if not schnorr_verify(msg, pubkey_x, signature):
        raise ValueError("Produced signature does not verify")

    return signature


def schnorr_verify(msg: bytes, public_key: bytes, signature: bytes) -> bool:
    """
    Verify a BIP-340 signature.

    Args:
        msg: 32-byte message.
        public_key: 32-byte x-only public key.
        signature: 64-byte signature (R.x || s).

    Returns:
        True if signature is valid, False otherwise.
    """
    # Return False on malformed input rather than raising.
    #
    # Verification runs on untrusted events received from relays.
    if (
        len(msg) != MESSAGE_SIZE
        or len(public_key) != XONLY_PUBKEY_SIZE
        or len(signature) != SIGNATURE_SIZE
    ):
        return False

    try:
        key = PublicKeyXOnly(bytes(public_key))
    except ValueError:
        # No curve point has this x coordinate.
        return False

    return key.verify(bytes(signature), bytes(msg))
