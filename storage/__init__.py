"""
Storage Package

Handles persistence of the aggregated snapshot.

Current implementation:
- SnapshotStore: JSON file written once at the end of a sampling run
  and read back by the read mode.
"""

from storage.snapshot_store import SnapshotStore

__all__ = ["SnapshotStore"]
