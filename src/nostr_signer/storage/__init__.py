"""
Storage module for key persistence.

Provides a minimal string-keyed blob store abstraction.
Uses SQLite for durable storage and a dict for tests.
"""

from .database import BlobStore
from .memory import MemoryBlobStore
from .namespaces import BlobNamespace
from .sqlite import SQLiteBlobStore

__all__ = [
    "BlobStore",
    "MemoryBlobStore",
    "SQLiteBlobStore",
    "BlobNamespace",
]
