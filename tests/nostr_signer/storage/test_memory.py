"""Tests for the in-memory blob store."""

from __future__ import annotations

import threading

from nostr_signer.storage import MemoryBlobStore


class TestMemoryBlobStore:
    """Tests for basic slot operations."""

    def test_empty_slot(self) -> None:
        """Missing slots read as None."""
        store = MemoryBlobStore()
        assert store.get("missing") is None
        assert not store.has("missing")

    def test_set_and_get(self) -> None:
        """A stored value is returned by get."""
        store = MemoryBlobStore()
        store.set("slot", "value")
        assert store.get("slot") == "value"
        assert store.has("slot")

    def test_set_overwrites(self) -> None:
        """set replaces the previous value."""
        store = MemoryBlobStore({"slot": "old"})
        store.set("slot", "new")
        assert store.get("slot") == "new"

    def test_initial_contents_are_copied(self) -> None:
        """Mutating the initial mapping does not affect the store."""
        initial = {"slot": "value"}
        store = MemoryBlobStore(initial)
        initial["slot"] = "changed"
        assert store.get("slot") == "value"

    def test_setdefault_writes_when_empty(self) -> None:
        """setdefault stores the candidate in an empty slot."""
        store = MemoryBlobStore()
        assert store.setdefault("slot", "first") == "first"
        assert store.get("slot") == "first"

    def test_setdefault_keeps_existing(self) -> None:
        """setdefault returns and keeps the existing value."""
        store = MemoryBlobStore({"slot": "first"})
        assert store.setdefault("slot", "second") == "first"
        assert store.get("slot") == "first"
        assert len(store) == 1

    def test_concurrent_setdefault_single_winner(self) -> None:
        """Racing writers all observe the same stored value."""
        store = MemoryBlobStore()
        results: list[str] = []
        barrier = threading.Barrier(8)

        def writer(i: int) -> None:
            barrier.wait()
            results.append(store.setdefault("slot", f"value-{i}"))

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(results)) == 1
        assert store.get("slot") == results[0]
