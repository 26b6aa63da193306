"""Secure random data for keys, nonces and signing randomness."""

import secrets

from nostr_signer.types import EntropyError


def random_bytes(length: int) -> bytes:
    """
    Draw bytes from the operating system CSPRNG.

    Failures are fatal: the caller must not retry with a weaker source.

    Raises:
        EntropyError: If the operating system cannot supply randomness.
    """
    try:
        return secrets.token_bytes(length)
    except (OSError, NotImplementedError) as exc:
        raise EntropyError("Secure random source unavailable") from exc
