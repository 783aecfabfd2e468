"""
Persistent Storage Module.

Provides:
- JSON snapshot, root and proof files (distribution format)
- SQLite-backed registry state (root history, claim flags)
"""

from ogclaim.core.storage.sqlite_adapter import SQLiteAdapter
from ogclaim.core.storage.storage_manager import StorageManager
from ogclaim.core.storage.files import (
    SnapshotEntry,
    ProofEntry,
    RootFile,
    read_snapshot_file,
    write_snapshot_file,
    read_root_file,
    write_root_file,
    read_proofs_file,
    write_proofs_file,
    find_proof,
)

__all__ = [
    "SQLiteAdapter",
    "StorageManager",
    "SnapshotEntry",
    "ProofEntry",
    "RootFile",
    "read_snapshot_file",
    "write_snapshot_file",
    "read_root_file",
    "write_root_file",
    "read_proofs_file",
    "write_proofs_file",
    "find_proof",
]
