"""
Pairwise encryption between two Nostr identities.

Construction:
- Shared secret: secp256k1 ECDH, the x coordinate of a*B (= b*A)
- Message key: HKDF-SHA256(shared secret), never the raw ECDH output
- Cipher: AES-256-GCM with a fresh random 12-byte nonce per message
- Associated data: the scheme label, binding ciphertexts to this version

AES-GCM authenticates the ciphertext, so any bit flip is rejected.
The tag comparison is constant time inside OpenSSL.

References:
- https://github.com/nostr-protocol/nips/blob/master/04.md
- RFC 5869 (HKDF)
"""

from __future__ import annotations

from typing import Final

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from nostr_signer.crypto import load_public_key, random_bytes, validate_private_key
from nostr_signer.types import Bytes12, Bytes32, DecryptionError, ValidationError

from .payload import PAYLOAD_VERSION, EncryptedPayload

MESSAGE_KEY_SIZE: Final = 32
"""AES-256 key size in bytes."""

GCM_NONCE_SIZE: Final = 12
"""AES-GCM nonce size in bytes."""

GCM_TAG_SIZE: Final = 16
"""AES-GCM authentication tag size in bytes."""

KEY_DERIVATION_INFO: Final = b"nostr-signer nip04 aes-256-gcm v" + PAYLOAD_VERSION.encode()
"""HKDF info string. Separates message keys from any other use of the shared secret."""

ASSOCIATED_DATA: Final = b"nip04:v" + PAYLOAD_VERSION.encode()
"""Authenticated but unencrypted data bound into every ciphertext."""


def derive_shared_secret(private_key: bytes, peer_public_key: bytes) -> Bytes32:
    """
    Perform secp256k1 ECDH key agreement.

    Both parties compute the same secret from their private key and the
    other party's public key. Only the x coordinate of the shared point is
    returned, so x-only peer keys give the same result whatever their y parity.

    Args:
        private_key: 32-byte secp256k1 private key.
        peer_public_key: 32-byte x-only or 33-byte compressed public key.

    Returns:
        32-byte shared secret.

    Raises:
        InvalidKeyError: If the private key is out of range or the peer key is
            not a point on the curve.
    """
    scalar = validate_private_key(private_key)
    peer = load_public_key(peer_public_key)

    ours = ec.derive_private_key(scalar, ec.SECP256K1())
    return Bytes32(ours.exchange(ec.ECDH(), peer))


def derive_message_key(shared_secret: bytes) -> bytes:
    """
    Derive the AES-256 message key from an ECDH shared secret.

    Args:
        shared_secret: 32-byte ECDH x coordinate.

    Returns:
        32-byte symmetric key.
    """
    if len(shared_secret) != 32:
        raise ValueError(f"Shared secret must be 32 bytes, got {len(shared_secret)}")

    return HKDF(
        algorithm=hashes.SHA256(),
        length=MESSAGE_KEY_SIZE,
        salt=None,
        info=KEY_DERIVATION_INFO,
    ).derive(bytes(shared_secret))


def encrypt(shared_secret: bytes, plaintext: str) -> str:
    """
    Encrypt a message for a peer.

    Every call draws a new nonce, so encrypting the same plaintext twice
    yields different payloads.

    Args:
        shared_secret: 32-byte ECDH shared secret.
        plaintext: Message text.

    Returns:
        Transportable payload string.

    Raises:
        ValidationError: If the plaintext holds lone surrogates and cannot be
            encoded as UTF-8.
        EntropyError: If no randomness is available for the nonce.
    """
    try:
        data = plaintext.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValidationError("Plaintext must be valid Unicode") from exc

    key = derive_message_key(shared_secret)
    nonce = Bytes12(random_bytes(GCM_NONCE_SIZE))
    ciphertext = AESGCM(key).encrypt(nonce, data, ASSOCIATED_DATA)
    return EncryptedPayload(ciphertext=ciphertext, nonce=nonce).encode()


def decrypt(shared_secret: bytes, payload: str) -> str:
    """
    Decrypt a message from a peer.

    All failures raise the same DecryptionError. Nothing is returned unless
    the authentication tag verifies.

    Args:
        shared_secret: 32-byte ECDH shared secret.
        payload: Payload string produced by `encrypt`.

    Returns:
        The original plaintext.

    Raises:
        DecryptionError: If the payload is malformed or fails authentication.
    """
    parsed = EncryptedPayload.decode(payload)
    if len(parsed.ciphertext) < GCM_TAG_SIZE:
        raise DecryptionError()

    key = derive_message_key(shared_secret)
    try:
        plaintext = AESGCM(key).decrypt(parsed.nonce, parsed.ciphertext, ASSOCIATED_DATA)
        return plaintext.decode("utf-8")
    except (InvalidTag, UnicodeDecodeError) as exc:
        raise DecryptionError() from exc
