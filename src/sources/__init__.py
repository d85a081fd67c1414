"""
Snapshot sources for the best-price router.

This module provides the sources that supply exchange order-book
snapshots to the matching engine.
"""

from .base import SnapshotSource, InMemorySnapshotSource
from .file_source import FileSnapshotSource, create_snapshot_source

__all__ = [
    "SnapshotSource",
    "InMemorySnapshotSource",
    "FileSnapshotSource",
    "create_snapshot_source",
]
