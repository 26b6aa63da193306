"""
Abstract blob store interface for key persistence.

Defines the Protocol that all storage backends must follow.
Uses structural subtyping for flexibility.
"""

from __future__ import annotations

from typing import Protocol


class BlobStore(Protocol):
    """
    Protocol for string-keyed blob storage.

    All backends must provide these methods.
    Uses structural subtyping - any class with matching methods satisfies the protocol.

    Values are opaque strings. The key store only ever writes one slot,
    holding the hex-encoded private key.

    Backends report their own failures (`OSError`, `sqlite3.Error`, ...);
    the key store translates them into `StorageError`.
    """

    def get(self, key: str) -> str | None:
        """
        Retrieve the value stored under a key.

        Args:
            key: Slot name.

        Returns:
            Stored value, or None if the slot is empty.
        """
        ...

    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Args:
            key: Slot name.
            value: Value to store.
        """
        ...

    def has(self, key: str) -> bool:
        """
        Check whether a slot holds a value.

        Args:
            key: Slot name.

        Returns:
            True if the slot is populated.
        """
        ...

    def setdefault(self, key: str, value: str) -> str:
        """
        Store a value only if the slot is empty (compare-and-swap).

        The check and the write happen as one atomic step with respect to
        the storage medium.

        Args:
            key: Slot name.
            value: Candidate value.

        Returns:
            The value that is stored after the call. This is `value` if the
            slot was empty, otherwise the previously stored value.
        """
        ...

    def close(self) -> None:
        """Release resources held by the backend."""
        ...
