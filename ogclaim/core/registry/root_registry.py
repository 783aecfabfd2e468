"""
Root Registry - the authoritative holder of the current Merkle root.

This module provides:
- Owner-restricted root publication
- Explicit root versions (every update supersedes the previous root)
- Root history for audit

Replacing the root invalidates every proof generated against the old one.
An update is a full regeneration event, never a patch.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
import time

from ogclaim.crypto import bytes_to_hex, checksum_address, parse_address
from ogclaim.core.merkle import EMPTY_ROOT
from ogclaim.utils.logger import get_logger
from ogclaim.utils.validation import validate_hash

logger = get_logger("registry")


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class RootRecord:
    """
    A published root.

    Attributes:
        version: 1 for the first root, +1 per update
        root: 32-byte Merkle root
        published_at: Publication timestamp
        leaf_count: Number of leaves committed (informational)
    """
    version: int
    root: bytes
    published_at: int = field(default_factory=lambda: int(time.time()))
    leaf_count: int = 0

    @property
    def hex_root(self) -> str:
        return bytes_to_hex(self.root)


# =============================================================================
# Root Registry
# =============================================================================


class RootRegistry:
    """
    Versioned holder of the current root.

    Mirrors the on-chain contract: anyone can read, only the owner can
    publish.
    """

    def __init__(
        self,
        owner: Union[str, bytes],
        storage=None,  # Optional StorageManager for persistence
    ):
        """
        Initialize the registry.

        Args:
            owner: Address allowed to publish roots
            storage: Optional StorageManager; history is reloaded from it
        """
        self.storage = storage
        self.owner = parse_address(owner)
        self._history: List[RootRecord] = []

        if storage is not None:
            self._load()

        logger.info(
            f"RootRegistry initialized: owner={checksum_address(self.owner)}, version={self.version}"
        )

    def _load(self) -> None:
        stored_owner = self.storage.load_owner()
        if stored_owner is None:
            self.storage.save_owner(self.owner)
        elif stored_owner != self.owner:
            logger.warning(
                f"Stored registry owner {checksum_address(stored_owner)} overrides "
                f"{checksum_address(self.owner)}"
            )
            self.owner = stored_owner

        for version, root, published_at, leaf_count in self.storage.load_roots():
            self._history.append(RootRecord(version, root, published_at, leaf_count))

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def version(self) -> int:
        """Current version, 0 before the first publication."""
        return self._history[-1].version if self._history else 0

    def current_record(self) -> Optional[RootRecord]:
        return self._history[-1] if self._history else None

    def current_root(self) -> Optional[bytes]:
        """The root claims are checked against, or None if never published."""
        record = self.current_record()
        return record.root if record else None

    def is_current(self, root: bytes) -> bool:
        return root is not None and root == self.current_root()

    def get_record(self, version: int) -> Optional[RootRecord]:
        if 1 <= version <= len(self._history):
            return self._history[version - 1]
        return None

    def find_version(self, root: bytes) -> Optional[int]:
        """Latest version that published this root."""
        for record in reversed(self._history):
            if record.root == root:
                return record.version
        return None

    def history(self) -> List[RootRecord]:
        return list(self._history)

    # =========================================================================
    # Writes
    # =========================================================================

    def update_root(
        self,
        new_root: bytes,
        caller: Union[str, bytes],
        leaf_count: int = 0,
    ) -> Tuple[Optional[RootRecord], str]:
        """
        Publish a new root.

        Args:
            new_root: 32-byte root
            caller: Address requesting the update
            leaf_count: Leaves committed under the root

        Returns:
            (record, error_message) - record is None on failure
        """
        if parse_address(caller) != self.owner:
            return None, "Caller is not the registry owner"

        valid, err = validate_hash(new_root, "root")
        if not valid:
            return None, err
        new_root = bytes(new_root)

        if new_root == EMPTY_ROOT:
            return None, "Refusing to publish the empty-tree root"

        if new_root == self.current_root():
            return None, "Root is already current"

        record = RootRecord(version=self.version + 1, root=new_root, leaf_count=leaf_count)
        if self.storage is not None:
            self.storage.persist_root(record.version, record.root, record.published_at, record.leaf_count)
        self._history.append(record)

        logger.info(f"Root updated to v{record.version}: {record.hex_root} ({leaf_count} leaves)")
        return record, ""

    def transfer_ownership(self, new_owner: Union[str, bytes], caller: Union[str, bytes]) -> Tuple[bool, str]:
        """
        Hand publication rights to another address.

        Returns:
            (success, error_message)
        """
        if parse_address(caller) != self.owner:
            return False, "Caller is not the registry owner"

        self.owner = parse_address(new_owner)
        if self.storage is not None:
            self.storage.save_owner(self.owner)

        logger.info(f"Registry ownership transferred to {checksum_address(self.owner)}")
        return True, ""


__all__ = ["RootRecord", "RootRegistry"]
