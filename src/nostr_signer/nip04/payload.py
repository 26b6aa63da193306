"""
Encrypted payload wire format.

A payload is one transportable string in the NIP-04 shape, extended with an
explicit scheme version:

    <base64(ciphertext || tag)>?iv=<base64(nonce)>&v=<version>

- ciphertext || tag: AES-GCM output, the 16-byte tag appended
- nonce: 12 random bytes, unique per message
- version: scheme identifier, currently "1"

Standard base64 with padding is used for both binary parts.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Final

from nostr_signer.types import Bytes12, DecryptionError

PAYLOAD_VERSION: Final = "1"
"""Current scheme: HKDF-SHA256 key, AES-256-GCM, 12-byte nonce."""

IV_SEPARATOR: Final = "?iv="
"""Separator between ciphertext and nonce."""

VERSION_SEPARATOR: Final = "&v="
"""Separator between nonce and scheme version."""


def _b64decode(data: str) -> bytes:
    """
    Strict standard base64 decoding.

    Only the canonical encoding is accepted: unused trailing bits must be zero,
    so every character of the payload is significant.
    """
    raw = data.encode("ascii")
    decoded = base64.b64decode(raw, validate=True)
    if base64.b64encode(decoded) != raw:
        raise ValueError("Non-canonical base64")
    return decoded


@dataclass(frozen=True, slots=True)
class EncryptedPayload:
    """
    Parsed form of an encrypted payload.

    Attributes:
        ciphertext: Ciphertext with the authentication tag appended.
        nonce: 12-byte AES-GCM nonce.
        version: Scheme version string.
    """

    ciphertext: bytes
    nonce: Bytes12
    version: str = PAYLOAD_VERSION

    def encode(self) -> str:
        """Render the payload as a single string."""
        return (
            base64.b64encode(self.ciphertext).decode("ascii")
            + IV_SEPARATOR
            + base64.b64encode(self.nonce).decode("ascii")
            + VERSION_SEPARATOR
            + self.version
        )

    @classmethod
    def decode(cls, payload: str) -> EncryptedPayload:
        """
        Parse a payload string.

        Raises:
            DecryptionError: If the string is not a well-formed payload.
        """
        if not isinstance(payload, str):
            raise DecryptionError()

        body, sep, rest = payload.partition(IV_SEPARATOR)
        if not sep:
            raise DecryptionError()
        iv_part, sep, version = rest.partition(VERSION_SEPARATOR)
        if not sep or version != PAYLOAD_VERSION:
            raise DecryptionError()

        try:
            ciphertext = _b64decode(body)
            nonce = Bytes12(_b64decode(iv_part))
        except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
            raise DecryptionError() from exc

        return cls(ciphertext=ciphertext, nonce=nonce, version=version)
