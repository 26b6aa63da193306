"""Reusable type definitions for the signing provider."""

from .base import SignerModel, StrictBaseModel
from .byte_arrays import BaseBytes, Bytes12, Bytes32, Bytes64
from .exceptions import (
    DecryptionError,
    EntropyError,
    InvalidKeyError,
    SignerError,
    StorageError,
    ValidationError,
)

__all__ = [
    # Core types
    "BaseBytes",
    "Bytes12",
    "Bytes32",
    "Bytes64",
    "SignerModel",
    "StrictBaseModel",
    # Exceptions
    "SignerError",
    "StorageError",
    "InvalidKeyError",
    "ValidationError",
    "DecryptionError",
    "EntropyError",
]
