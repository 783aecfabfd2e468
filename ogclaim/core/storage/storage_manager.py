from pathlib import Path
from typing import List, Optional, Tuple

from ogclaim.core.storage.sqlite_adapter import SQLiteAdapter
from ogclaim.utils.logger import get_logger

logger = get_logger("storage.manager")


class StorageManager:
    """
    Manages persistent registry state.

    Coordinates data persistence using SQLite adapter.
    Handles:
    - Root history (RootRegistry)
    - Claim flags (ClaimLedger)
    - Metadata (registry owner)
    """

    def __init__(self, data_dir: Path, db_name: str = "registry.db"):
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / db_name
        self.adapter = SQLiteAdapter(self.db_path)

        logger.info(f"StorageManager initialized at {self.db_path}")

    def close(self):
        self.adapter.close()

    # =========================================================================
    # Registry Metadata
    # =========================================================================

    def save_owner(self, owner: bytes):
        self.adapter.set_meta("owner", owner.hex())

    def load_owner(self) -> Optional[bytes]:
        value = self.adapter.get_meta("owner")
        return bytes.fromhex(value) if value else None

    # =========================================================================
    # Roots
    # =========================================================================

    def persist_root(self, version: int, root: bytes, published_at: int, leaf_count: int):
        """Append a root to the history."""
        self.adapter.save_root(version, root, published_at, leaf_count)

    def load_roots(self) -> List[Tuple[int, bytes, int, int]]:
        return self.adapter.get_all_roots()

    # =========================================================================
    # Claims
    # =========================================================================

    def persist_claim(self, token_id: int, claimer: bytes, root_version: int, claimed_at: int) -> bool:
        return self.adapter.save_claim(token_id, claimer, root_version, claimed_at)

    def get_claim(self, token_id: int) -> Optional[Tuple[bytes, int, int]]:
        return self.adapter.get_claim(token_id)

    def load_claims(self) -> List[Tuple[int, bytes, int, int]]:
        return self.adapter.get_all_claims()

    def get_claims_count(self) -> int:
        return self.adapter.get_claims_count()
