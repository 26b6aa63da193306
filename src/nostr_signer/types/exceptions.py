"""Exception hierarchy for the signing provider."""

from __future__ import annotations


class SignerError(Exception):
    """
    Base exception for all signer errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class StorageError(SignerError):
    """
    Raised when key storage is unavailable or holds corrupt data.

    Attributes:
        key: The storage slot involved, if known.
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        self.key = key
        if key is not None:
            message = f"{message} (slot {key!r})"
        super().__init__(message)


class InvalidKeyError(SignerError):
    """Raised for out-of-range private scalars and public keys that are not on the curve."""


class ValidationError(SignerError):
    """
    Raised when an event or message is malformed and the operation is refused.

    Attributes:
        field: The offending field name, if a single field is at fault.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        if field is not None:
            message = f"Invalid event field '{field}': {message}"
        super().__init__(message)


class DecryptionError(SignerError):
    """
    Raised when a ciphertext payload cannot be decrypted.

    The message is the same for every failure cause.
    """

    def __init__(self, message: str = "Unable to decrypt payload") -> None:
        super().__init__(message)


class EntropyError(SignerError):
    """Raised when the operating system cannot supply secure randomness. Fatal."""
