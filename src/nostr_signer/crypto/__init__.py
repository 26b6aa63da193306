"""
secp256k1 primitives used by the signer.

- Key validation and x-only public key derivation
- BIP-340 Schnorr signing and verification
- OS randomness for keys, nonces and hedged signatures
"""

from .rand import random_bytes
from .schnorr import SIGNATURE_SIZE, schnorr_sign, schnorr_verify
from .secp256k1 import (
    N,
    base_point_mul,
    load_public_key,
    validate_private_key,
)

__all__ = [
    "N",
    "SIGNATURE_SIZE",
    "base_point_mul",
    "load_public_key",
    "random_bytes",
    "schnorr_sign",
    "schnorr_verify",
    "validate_private_key",
]
