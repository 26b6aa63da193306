"""
secp256k1 curve helpers.

Nostr identities are secp256k1 keys:
- Private keys are 32-byte scalars in [1, n-1]
- Public keys are 32-byte x-only encodings (BIP-340), the point with even y
- Peers may also hand over 33-byte compressed points

Scalar multiplication and ECDH run inside OpenSSL through `cryptography`.
Schnorr signing lives in `schnorr`, on top of libsecp256k1.

References:
- https://www.secg.org/sec2-v2.pdf
- https://github.com/bitcoin/bips/blob/master/bip-0340.mediawiki
"""

from __future__ import annotations

from typing import Final

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from nostr_signer.types import Bytes32, InvalidKeyError

PRIVATE_KEY_SIZE: Final = 32
"""secp256k1 private key scalar size in bytes."""

XONLY_PUBKEY_SIZE: Final = 32
"""BIP-340 x-only public key size in bytes."""

COMPRESSED_PUBKEY_SIZE: Final = 33
"""Compressed secp256k1 public key: 0x02/0x03 + 32-byte x coordinate."""

N: Final = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
"""secp256k1 curve order."""


def validate_private_key(data: bytes) -> int:
    """
    Check that raw bytes encode a usable secp256k1 private key.

    Args:
        data: 32-byte big-endian scalar.

    Returns:
        The scalar as an integer.

    Raises:
        InvalidKeyError: If the length is wrong or the scalar is 0 or >= n.
    """
    if len(data) != PRIVATE_KEY_SIZE:
        raise InvalidKeyError(f"Private key must be {PRIVATE_KEY_SIZE} bytes, got {len(data)}")

    scalar = int.from_bytes(data, "big")
    if not 0 < scalar < N:
        raise InvalidKeyError("Private key scalar is outside the range [1, n-1]")
    return scalar


def base_point_mul(scalar: int) -> tuple[Bytes32, bool]:
    """
    Multiply the generator by a secret scalar.

    Runs inside OpenSSL, in constant time with respect to the scalar.

    Args:
        scalar: Integer in [1, n-1].

    Returns:
        Tuple of (x coordinate as 32 bytes, whether y is even).
    """
    private_key = ec.derive_private_key(scalar, ec.SECP256K1())
    encoded = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.CompressedPoint,
    )
    return Bytes32(encoded[1:]), encoded[0] == 0x02


def load_public_key(data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Parse a peer public key and check that it lies on the curve.

    Accepts either a 32-byte x-only key (lifted to the even-y point, as
    BIP-340 prescribes) or a 33-byte compressed point.

    Raises:
        InvalidKeyError: If the encoding is malformed or the point is invalid.
    """
    if len(data) == XONLY_PUBKEY_SIZE:
        data = b"\x02" + bytes(data)
    elif len(data) != COMPRESSED_PUBKEY_SIZE or data[0] not in (0x02, 0x03):
        raise InvalidKeyError(f"Invalid public key encoding: length={len(data)}")

    # from_encoded_point rejects x values with no matching curve point.
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), bytes(data))
    except ValueError as exc:
        raise InvalidKeyError("Public key is not a valid secp256k1 point") from exc

