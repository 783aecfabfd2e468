"""
Ownership snapshot intake.

A snapshot is the finite, deduplicated list of (tokenId, owner) records
captured from the source chain. Records are kept sorted by tokenId so that
rebuilding from the same data, in whatever order the file lists it, always
produces the same tree.
"""

from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from ogclaim.crypto import parse_address
from ogclaim.core.merkle import OwnershipRecord
from ogclaim.core.storage.files import SnapshotEntry, read_snapshot_file
from ogclaim.utils.logger import get_logger

logger = get_logger("snapshot")


class Snapshot:
    """
    Ordered, immutable set of ownership records.

    Attributes:
        records: Records sorted by token_id ascending
    """

    def __init__(self, records: Iterable[OwnershipRecord]):
        by_token: Dict[int, OwnershipRecord] = {}
        for record in records:
            if record.token_id in by_token:
                raise ValueError(f"Duplicate tokenId in snapshot: {record.token_id}")
            by_token[record.token_id] = record

        self._records = tuple(sorted(by_token.values(), key=lambda r: r.token_id))
        self._by_token = by_token

    @classmethod
    def from_entries(cls, entries: Iterable[Union[dict, SnapshotEntry]]) -> "Snapshot":
        """
        Build from snapshot-file rows.

        Accepts validated SnapshotEntry models or raw dicts with
        "tokenId" and "owner" keys.
        """
        records = []
        for entry in entries:
            if not isinstance(entry, SnapshotEntry):
                entry = SnapshotEntry.model_validate(entry)
            records.append(entry.to_record())
        return cls(records)

    @property
    def records(self) -> tuple:
        return self._records

    def leaves(self) -> List[bytes]:
        """Canonical leaves in tokenId order."""
        return [record.leaf() for record in self._records]

    def find(self, token_id: int) -> Optional[OwnershipRecord]:
        return self._by_token.get(token_id)

    def records_for_owner(self, owner: Union[str, bytes]) -> List[OwnershipRecord]:
        owner_bytes = parse_address(owner)
        return [record for record in self._records if record.owner == owner_bytes]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[OwnershipRecord]:
        return iter(self._records)


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Read and validate a snapshot file."""
    snapshot = Snapshot.from_entries(read_snapshot_file(path))
    logger.info(f"Loaded snapshot {path}: {len(snapshot)} tokens")
    return snapshot


__all__ = ["Snapshot", "load_snapshot"]
