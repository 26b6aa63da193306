"""In-memory blob store for tests and ephemeral identities."""

from __future__ import annotations

import threading


class MemoryBlobStore:
    """
    Dictionary-backed implementation of the BlobStore protocol.

    Contents live only as long as the instance.
    A lock makes `setdefault` atomic under concurrent callers.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        """Retrieve the value stored under a key."""
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        with self._lock:
            self._data[key] = value

    def has(self, key: str) -> bool:
        """Check whether a slot holds a value."""
        with self._lock:
            return key in self._data

    def setdefault(self, key: str, value: str) -> str:
        """Store a value only if the slot is empty, returning the stored value."""
        with self._lock:
            return self._data.setdefault(key, value)

    def close(self) -> None:
        """Nothing to release."""

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
