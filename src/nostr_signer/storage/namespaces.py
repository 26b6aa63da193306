"""
Database namespace definitions for storage tables.

Defines table names and schema constants for SQLite storage.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BlobNamespace:
    """
    Namespace for key-value blob storage.

    One row per slot. Values are text (hex-encoded key material).
    """

    TABLE_NAME: str = "blobs"
    """Table name for blob storage."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS blobs (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """
    """SQL to create blobs table."""


# Singleton instance for convenient access
BLOBS = BlobNamespace()
